"""Exception hierarchy for the pound viewer.

Everything raised on purpose derives from :class:`PoundError`, so the CLI
can turn any of them into a one-line diagnostic and exit status 1.
"""

from __future__ import annotations

from pathlib import Path


class PoundError(Exception):
    """Base class for all pound errors."""


class LoadError(PoundError):
    """The file requested on the command line could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read {self.path}: {reason}")


class TerminalIOError(PoundError, OSError):
    """Writing to the terminal, or toggling its mode, failed."""


class DegenerateSizeError(PoundError, ValueError):
    """The terminal reported a zero (or negative) width or height."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        super().__init__(
            f"terminal size {width}x{height} is too small to draw into"
        )


class ConfigError(PoundError, ValueError):
    """Invalid option value."""


class ContractViolation(PoundError, AssertionError):
    """A caller passed a value that no code path is supposed to produce."""
