"""CLI entry point for pound. Uses Click for argument parsing."""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

import click

from pound import __version__
from pound.config import DEFAULT_POLL_INTERVAL, EditorConfig
from pound.dispatch import DEFAULT_QUIT_KEY
from pound.errors import PoundError
from pound.rows import RowStore
from pound.session import Session
from pound.terminal import ProcessTerminal

logger = logging.getLogger("pound")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


@contextlib.contextmanager
def _logging_to(log_file: Path | None, log_level: str) -> Iterator[None]:
    """Send logs to *log_file* for the duration of the block.

    Nothing may reach stderr while the terminal is in raw mode, so the
    handler goes on the package logger rather than the root logger, and
    without a log file a single ``NullHandler`` keeps the screen clean.
    """
    if log_file is None:
        if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
            logger.addHandler(logging.NullHandler())
        yield
        return

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, log_level.upper()))
    try:
        yield
    finally:
        logger.removeHandler(handler)
        handler.close()
        logger.setLevel(previous_level)


def _run(config: EditorConfig) -> int:
    try:
        config.validate()
        rows = RowStore.load(config.file)
        terminal = ProcessTerminal(write_log=config.write_log)
        return Session(terminal, rows, config).run()
    except PoundError as exc:
        logger.exception("fatal error")
        click.echo(f"pound: {exc}", err=True)
        return 1


@click.command()
@click.argument(
    "file",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--bounded",
    is_flag=True,
    help="Keep the cursor on the visible screen instead of scrolling.",
)
@click.option(
    "--quit-key",
    default=DEFAULT_QUIT_KEY,
    show_default=True,
    help="Key chord that exits the viewer.",
)
@click.option(
    "--poll-interval",
    type=float,
    default=DEFAULT_POLL_INTERVAL,
    show_default=True,
    help="Seconds to wait for input before polling again.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write log messages to this file.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    show_default=True,
)
@click.option(
    "--write-log",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Append every byte written to the terminal to this file.",
)
@click.version_option(__version__, prog_name="pound")
def main(file, bounded, quit_key, poll_interval, log_file, log_level, write_log):
    """View FILE in the terminal. Arrow keys move, Ctrl-Q quits."""
    config = EditorConfig(
        file=file,
        scrolling=not bounded,
        quit_key=quit_key,
        poll_interval=poll_interval,
        write_log=write_log,
    )

    with _logging_to(log_file, log_level):
        code = _run(config)
    sys.exit(code)


if __name__ == "__main__":
    main()
