"""
Kaleido Front End - Configuration
=================================

Options controlling the read loop and the lexer. Configuration can come
from:
- Default values (defined here)
- Environment variables (FrontendOptions.from_env)
- Command-line flags (applied by the kparse command on top of the above)

Environment Variables
---------------------
| Variable               | Option         | Example     |
|------------------------|----------------|-------------|
| KALEIDO_PROMPT         | prompt         | "kal> "     |
| KALEIDO_SHOW_PROMPT    | show_prompt    | 0 / 1       |
| KALEIDO_STRICT_NUMBERS | strict_numbers | 0 / 1       |
"""

from dataclasses import dataclass, replace
import os

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean (got {value!r})")


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        prompt: Text written before each top-level form is read
        show_prompt: Write the prompt at all (off for piped or file input)
        strict_numbers: Reject malformed numeric literals such as "1.2.3"
            instead of reading their longest numeric prefix
        filename: Source name used in diagnostics
    """
    prompt: str = "ready> "
    show_prompt: bool = True
    strict_numbers: bool = False
    filename: str = "<stdin>"

    @classmethod
    def from_env(cls) -> "FrontendOptions":
        """
        Create FrontendOptions from environment variables.

        Variables that are not set keep their defaults.

        Raises:
            ValueError: If a boolean variable holds an unrecognised value
        """
        options = cls()

        if (prompt := os.environ.get("KALEIDO_PROMPT")) is not None:
            options.prompt = prompt

        if show_prompt := os.environ.get("KALEIDO_SHOW_PROMPT"):
            options.show_prompt = _parse_bool("KALEIDO_SHOW_PROMPT", show_prompt)

        if strict := os.environ.get("KALEIDO_STRICT_NUMBERS"):
            options.strict_numbers = _parse_bool("KALEIDO_STRICT_NUMBERS", strict)

        return options

    def with_overrides(self, **changes) -> "FrontendOptions":
        """Return a copy with the given options replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})
