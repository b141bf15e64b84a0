"""CLI entry point for kilo. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.kilo.config import EditorConfig
from pi.kilo.document import Document, load_document
from pi.kilo.editor import Editor
from pi.kilo.render import clear_screen
from pi.kilo.terminal import TerminalError, TerminalSession

logger = logging.getLogger("pi.kilo")


def _configure_logging(log_file: str | None, log_level: str) -> None:
    # stderr shares the screen with the editor, so only log to a file.
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=getattr(logging, log_level.upper()),
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )
    else:
        logger.addHandler(logging.NullHandler())


def _fatal(session: TerminalSession | None, error: BaseException) -> None:
    """Clear the screen, report *error* on stderr and exit non-zero."""
    logger.error("Fatal: %s", error)
    if session is not None:
        try:
            clear_screen(session)
        except OSError:
            logger.warning("Could not clear screen before exiting")
    click.echo(f"kilo: {error}", err=True)
    sys.exit(1)


@click.command()
@click.argument("file", required=False, type=click.Path(dir_okay=False))
@click.option("--log-file", default=None, help="Write debug logs to this file")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Log level for --log-file",
)
@click.option(
    "--write-log",
    default=None,
    help="Append every byte sent to the terminal to this file (overrides KILO_WRITE_LOG)",
)
def main(file, log_file, log_level, write_log):
    """A minimal screen-oriented text viewer. Press Ctrl-Q to quit."""
    _configure_logging(log_file, log_level)
    config = EditorConfig.from_env()
    if write_log is not None:
        config.write_log = write_log

    document = Document.empty()
    if file:
        try:
            document = load_document(file)
        except OSError as e:
            click.echo(f"kilo: {file}: {e.strerror or e}", err=True)
            sys.exit(1)

    session = None
    try:
        session = TerminalSession(
            read_timeout_ds=config.read_timeout_ds,
            write_log=config.write_log,
        )
        with session:
            exit_code = Editor(session, document, config).run()
    except (TerminalError, OSError) as e:
        _fatal(session, e)

    sys.exit(exit_code)
