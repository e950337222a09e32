"""
Kaleido Command-Line Interface
==============================

This package provides the command-line front end:

- **kparse**: reads Kaleido source from a file or standard input and
  reports each top-level form it parses

The tool is a Click-based CLI application.
"""

__all__ = ["kparse"]
