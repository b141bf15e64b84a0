"""Terminal session for raw-mode byte I/O on the controlling terminal.

Provides a ``Terminal`` protocol and a concrete ``TerminalSession`` that
owns the terminal's original termios configuration, switches the line
discipline into raw mode, queries the screen size, and restores the
original configuration when the session ends.
"""

from __future__ import annotations

import errno
import logging
import os
import re
import sys
import termios
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_CURSOR_TO_CORNER = b"\x1b[999C\x1b[999B"
_DEVICE_STATUS_REQUEST = b"\x1b[6n"

_CURSOR_REPORT_RE = re.compile(rb"^\x1b\[(\d+);(\d+)$")
_CURSOR_REPORT_MAX = 32

# termios attribute list indices
_IFLAG, _OFLAG, _CFLAG, _LFLAG, _CC = 0, 1, 2, 3, 6


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TerminalError(RuntimeError):
    """Terminal mode or dimension query failure."""


class TerminalIOError(OSError):
    """Failed or short write, or a read failure other than a timeout."""


# ---------------------------------------------------------------------------
# Screen dimensions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScreenDimensions:
    rows: int
    cols: int


def parse_cursor_position_report(data: bytes) -> ScreenDimensions | None:
    """Parse a device status reply ``ESC [ rows ; cols`` (``R`` stripped).

    Returns ``None`` if *data* is not a well-formed report.
    """
    match = _CURSOR_REPORT_RE.match(data)
    if not match:
        return None
    rows, cols = int(match.group(1)), int(match.group(2))
    if rows <= 0 or cols <= 0:
        return None
    return ScreenDimensions(rows=rows, cols=cols)


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for byte-oriented terminal I/O."""

    def read(self, n: int = 1) -> bytes: ...

    def write(self, data: bytes) -> None: ...

    def query_dimensions(self) -> ScreenDimensions: ...

    def restore(self) -> None: ...


# ---------------------------------------------------------------------------
# TerminalSession implementation
# ---------------------------------------------------------------------------


class TerminalSession:
    """Raw-mode session on a terminal, backed by file descriptors.

    Use as a context manager: entering switches to raw mode, leaving
    restores the captured configuration on both normal and error exits.
    """

    def __init__(
        self,
        fd_in: int | None = None,
        fd_out: int | None = None,
        *,
        read_timeout_ds: int = 1,
        write_log: str = "",
    ) -> None:
        self._fd_in = sys.stdin.fileno() if fd_in is None else fd_in
        self._fd_out = sys.stdout.fileno() if fd_out is None else fd_out
        self._read_timeout_ds = read_timeout_ds
        self._write_log_path = write_log
        self._original_termios: list | None = None
        self._active: bool = False

    # -- properties ---------------------------------------------------------

    @property
    def active(self) -> bool:
        return self._active

    @property
    def original_termios(self) -> list | None:
        return self._original_termios

    # -- raw mode -----------------------------------------------------------

    def enter_raw_mode(self) -> None:
        """Capture the current configuration and switch to raw mode."""
        try:
            original = termios.tcgetattr(self._fd_in)
            raw = termios.tcgetattr(self._fd_in)
        except termios.error as e:
            raise TerminalError(f"tcgetattr: {e}") from e

        raw[_IFLAG] &= ~(
            termios.IXON | termios.ICRNL | termios.BRKINT | termios.INPCK | termios.ISTRIP
        )
        raw[_OFLAG] &= ~termios.OPOST
        raw[_CFLAG] |= termios.CS8
        raw[_LFLAG] &= ~(termios.ECHO | termios.ICANON | termios.ISIG | termios.IEXTEN)
        raw[_CC][termios.VMIN] = 0
        raw[_CC][termios.VTIME] = self._read_timeout_ds

        try:
            termios.tcsetattr(self._fd_in, termios.TCSAFLUSH, raw)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e

        self._original_termios = original
        self._active = True
        logger.debug("Entered raw mode on fd %d", self._fd_in)

    def restore(self) -> None:
        """Re-apply the original configuration. A no-op when not active."""
        if not self._active:
            return
        # Cleared first so a failing restore is never retried.
        self._active = False
        try:
            termios.tcsetattr(self._fd_in, termios.TCSAFLUSH, self._original_termios)
        except termios.error as e:
            raise TerminalError(f"tcsetattr: {e}") from e
        logger.debug("Restored terminal mode on fd %d", self._fd_in)

    def __enter__(self) -> TerminalSession:
        self.enter_raw_mode()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is None:
            self.restore()
            return
        try:
            self.restore()
        except TerminalError:
            logger.exception("Failed to restore terminal while handling %r", exc)

    # -- I/O ----------------------------------------------------------------

    def read(self, n: int = 1) -> bytes:
        """Read up to *n* bytes; ``b""`` means the read timed out."""
        try:
            return os.read(self._fd_in, n)
        except OSError as e:
            if e.errno in (errno.EAGAIN, errno.EINTR):
                return b""
            raise TerminalIOError(e.errno, f"read: {e.strerror}") from e

    def write(self, data: bytes) -> None:
        """Write *data* in a single call. A short write is fatal."""
        try:
            written = os.write(self._fd_out, data)
        except OSError as e:
            raise TerminalIOError(e.errno, f"write: {e.strerror}") from e
        if written != len(data):
            raise TerminalIOError(
                errno.EIO, f"short write: {written} of {len(data)} bytes"
            )

        if self._write_log_path:
            try:
                with open(self._write_log_path, "ab") as f:
                    f.write(data)
            except OSError:
                logger.warning("Could not append to write log %s", self._write_log_path)

    # -- dimensions ---------------------------------------------------------

    def query_dimensions(self) -> ScreenDimensions:
        """Return the terminal size, probing the cursor if the OS cannot."""
        try:
            size = os.get_terminal_size(self._fd_out)
        except OSError:
            size = None

        if size is not None and size.columns > 0 and size.lines > 0:
            return ScreenDimensions(rows=size.lines, cols=size.columns)

        logger.debug("Terminal size unavailable, probing cursor position")
        self.write(_CURSOR_TO_CORNER)
        dims = self._get_cursor_position()
        if dims is None:
            raise TerminalError("getWindowSize: could not determine terminal size")
        return dims

    def _get_cursor_position(self) -> ScreenDimensions | None:
        self.write(_DEVICE_STATUS_REQUEST)

        reply = bytearray()
        while len(reply) < _CURSOR_REPORT_MAX - 1:
            c = self.read(1)
            if not c or c == b"R":
                break
            reply += c

        return parse_cursor_position_report(bytes(reply))
