"""Frame rendering: an output buffer and the screen composition around it.

A frame is assembled into a ``RenderBuffer`` and written to the terminal
in one call, so the display never shows a half-drawn screen.
"""

from __future__ import annotations

from pi.kilo.cursor import CursorPosition
from pi.kilo.document import Document
from pi.kilo.terminal import ScreenDimensions, Terminal
from pi.kilo.utils import display_width, truncate_to_columns

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_SCREEN = b"\x1b[2J"
ERASE_LINE = b"\x1b[K"
CRLF = b"\r\n"


def cursor_position(row: int, col: int) -> bytes:
    """Escape sequence moving the cursor to the 0-based (*row*, *col*)."""
    return b"\x1b[%d;%dH" % (row + 1, col + 1)


# ---------------------------------------------------------------------------
# RenderBuffer
# ---------------------------------------------------------------------------


class RenderBuffer:
    """Append-only byte accumulator for one frame."""

    def __init__(self) -> None:
        self._buffer = bytearray()

    def append(self, data: bytes) -> None:
        self._buffer += data

    def getvalue(self) -> bytes:
        return bytes(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()

    def __len__(self) -> int:
        return len(self._buffer)

    def flush_to(self, terminal: Terminal) -> None:
        """Write the whole frame in a single call, then reset.

        The terminal raises ``TerminalIOError`` on a short write.
        """
        terminal.write(bytes(self._buffer))
        self.reset()


# ---------------------------------------------------------------------------
# Frame composition
# ---------------------------------------------------------------------------


def welcome_line(message: str, cols: int, filler: str = "~") -> bytes:
    """Centre *message* in *cols* columns behind a leading filler glyph."""
    banner = truncate_to_columns(message.encode("utf-8"), cols)
    padding = (cols - display_width(banner.decode("utf-8", "replace"))) // 2
    out = bytearray()
    if padding:
        out += filler.encode("utf-8")
        padding -= 1
    out += b" " * padding
    out += banner
    return bytes(out)


def draw_rows(
    buf: RenderBuffer,
    screen: ScreenDimensions,
    document: Document,
    *,
    welcome: str = "",
    filler: str = "~",
) -> None:
    """Append every screen row, each ended by an erase-to-end-of-line.

    All rows but the last are followed by ``\\r\\n``; output
    post-processing is off in raw mode so the carriage return is explicit.
    """
    filler_bytes = filler.encode("utf-8")
    for y in range(screen.rows):
        row = document.row(y)
        if row is not None:
            buf.append(truncate_to_columns(row.content, screen.cols))
        elif document.is_empty and welcome and y == screen.rows // 3:
            buf.append(welcome_line(welcome, screen.cols, filler))
        else:
            buf.append(filler_bytes)

        buf.append(ERASE_LINE)
        if y < screen.rows - 1:
            buf.append(CRLF)


def compose_frame(
    buf: RenderBuffer,
    screen: ScreenDimensions,
    document: Document,
    cursor: CursorPosition,
    *,
    welcome: str = "",
    filler: str = "~",
) -> None:
    """Append a full frame: hide cursor, home, rows, place cursor, show."""
    buf.append(HIDE_CURSOR)
    buf.append(CURSOR_HOME)
    draw_rows(buf, screen, document, welcome=welcome, filler=filler)
    buf.append(cursor_position(cursor.y, cursor.x))
    buf.append(SHOW_CURSOR)


def clear_screen(terminal: Terminal) -> None:
    """Clear the display and home the cursor in one write."""
    terminal.write(CLEAR_SCREEN + CURSOR_HOME)
