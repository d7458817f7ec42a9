"""Runtime options for a viewer session."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pound.dispatch import DEFAULT_QUIT_KEY, parse_quit_key
from pound.errors import ConfigError

DEFAULT_POLL_INTERVAL = 0.5


@dataclass
class EditorConfig:
    """Session configuration, built from command-line options."""

    file: Path | None = None
    scrolling: bool = True
    quit_key: str = DEFAULT_QUIT_KEY
    poll_interval: float = DEFAULT_POLL_INTERVAL
    write_log: Path | None = None

    def validate(self) -> EditorConfig:
        """Raise :class:`ConfigError` for unusable values; return self."""
        if self.poll_interval <= 0:
            raise ConfigError(
                f"poll interval must be positive, got {self.poll_interval}"
            )
        parse_quit_key(self.quit_key)
        return self
