# =============================================================================
# test_config.py - Front-End Configuration Tests
# =============================================================================

import pytest

from kaleido.config import FrontendOptions


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every KALEIDO_* variable for the duration of a test."""
    for name in ("KALEIDO_PROMPT", "KALEIDO_SHOW_PROMPT", "KALEIDO_STRICT_NUMBERS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_default_values(self):
        options = FrontendOptions()
        assert options.prompt == "ready> "
        assert options.show_prompt is True
        assert options.strict_numbers is False
        assert options.filename == "<stdin>"


class TestFromEnv:
    """Environment variables override the defaults."""

    def test_unset_keeps_defaults(self, clean_env):
        assert FrontendOptions.from_env() == FrontendOptions()

    def test_prompt(self, clean_env):
        clean_env.setenv("KALEIDO_PROMPT", "kal> ")
        assert FrontendOptions.from_env().prompt == "kal> "

    def test_empty_prompt_is_honoured(self, clean_env):
        clean_env.setenv("KALEIDO_PROMPT", "")
        assert FrontendOptions.from_env().prompt == ""

    @pytest.mark.parametrize("value, expected", [
        ("1", True),
        ("yes", True),
        ("ON", True),
        ("0", False),
        ("false", False),
        (" off ", False),
    ])
    def test_boolean_values(self, clean_env, value, expected):
        clean_env.setenv("KALEIDO_STRICT_NUMBERS", value)
        clean_env.setenv("KALEIDO_SHOW_PROMPT", value)
        options = FrontendOptions.from_env()
        assert options.strict_numbers is expected
        assert options.show_prompt is expected

    def test_invalid_boolean(self, clean_env):
        clean_env.setenv("KALEIDO_SHOW_PROMPT", "maybe")
        with pytest.raises(ValueError, match="KALEIDO_SHOW_PROMPT"):
            FrontendOptions.from_env()


class TestOverrides:
    """with_overrides returns a modified copy."""

    def test_replaces_values(self):
        base = FrontendOptions()
        changed = base.with_overrides(strict_numbers=True, filename="a.kal")
        assert changed.strict_numbers is True
        assert changed.filename == "a.kal"
        assert base.strict_numbers is False

    def test_none_is_ignored(self):
        base = FrontendOptions(show_prompt=False)
        assert base.with_overrides(show_prompt=None).show_prompt is False
