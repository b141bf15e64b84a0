"""Keyboard input decoding for the raw terminal byte stream.

Turns the bytes read from a raw-mode terminal into ``LogicalKey`` values:
printable characters, control-key chords, and the named special keys that
terminals send as ``ESC [`` (CSI) or ``ESC O`` (SS3) sequences.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

ESC = 0x1B


# ---------------------------------------------------------------------------
# Logical keys
# ---------------------------------------------------------------------------


class KeyKind(enum.Enum):
    CONTROL_CHORD = "ctrl"
    PRINTABLE = "printable"
    ARROW_UP = "up"
    ARROW_DOWN = "down"
    ARROW_LEFT = "left"
    ARROW_RIGHT = "right"
    HOME = "home"
    END = "end"
    PAGE_UP = "pageUp"
    PAGE_DOWN = "pageDown"
    DELETE = "delete"
    ESCAPE = "escape"


@dataclass(frozen=True)
class LogicalKey:
    """One decoded keystroke.

    ``char`` is set only for ``CONTROL_CHORD`` (the lowercase letter held
    with Ctrl) and ``PRINTABLE`` keys.
    """

    kind: KeyKind
    char: str | None = None

    @classmethod
    def named(cls, kind: KeyKind) -> LogicalKey:
        return cls(kind)

    @classmethod
    def ctrl(cls, letter: str) -> LogicalKey:
        return cls(KeyKind.CONTROL_CHORD, letter.lower())

    @classmethod
    def printable(cls, char: str) -> LogicalKey:
        return cls(KeyKind.PRINTABLE, char)

    def __str__(self) -> str:
        if self.kind is KeyKind.CONTROL_CHORD:
            return f"ctrl+{self.char}"
        if self.kind is KeyKind.PRINTABLE:
            return repr(self.char)
        return self.kind.value


def ctrl_key(letter: str) -> int:
    """Return the byte a terminal sends for Ctrl + *letter*.

    For example, ``ctrl_key("q")`` returns ``0x11``.
    """
    if len(letter) != 1 or not letter.isalpha() or not letter.isascii():
        raise ValueError(f"Not an ASCII letter: {letter!r}")
    return ord(letter) & 0x1F


def classify_byte(byte: int) -> LogicalKey:
    """Classify a single non-escape byte."""
    if 0x01 <= byte <= 0x1A:
        return LogicalKey.ctrl(chr(byte | 0x60))
    return LogicalKey.printable(chr(byte))


# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------

# Sequences after the leading ESC -> key
ESCAPE_SEQUENCES: dict[bytes, KeyKind] = {
    b"[A": KeyKind.ARROW_UP,
    b"[B": KeyKind.ARROW_DOWN,
    b"[C": KeyKind.ARROW_RIGHT,
    b"[D": KeyKind.ARROW_LEFT,
    b"[H": KeyKind.HOME,
    b"[F": KeyKind.END,
    b"[1~": KeyKind.HOME,
    b"[3~": KeyKind.DELETE,
    b"[4~": KeyKind.END,
    b"[5~": KeyKind.PAGE_UP,
    b"[6~": KeyKind.PAGE_DOWN,
    b"[7~": KeyKind.HOME,
    b"[8~": KeyKind.END,
    b"OH": KeyKind.HOME,
    b"OF": KeyKind.END,
}


class SequenceStatus(enum.Enum):
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    UNRECOGNIZED = "unrecognized"


def decode_escape_sequence(seq: bytes) -> tuple[SequenceStatus, KeyKind | None]:
    """Classify the bytes read so far after an ESC.

    *seq* excludes the leading ESC. Returns the status and, when complete,
    the decoded key:

    * Fewer than two bytes, or ``[ <digit>``, is incomplete. Two bytes
      are always read after ESC, even when the first one already rules
      out every known key.
    * A sequence in ``ESCAPE_SEQUENCES`` is complete.
    * Anything else can never become a known key and is unrecognized.
    """
    kind = ESCAPE_SEQUENCES.get(seq)
    if kind is not None:
        return SequenceStatus.COMPLETE, kind

    if len(seq) < 2:
        return SequenceStatus.INCOMPLETE, None
    if len(seq) == 2 and seq[:1] == b"[" and seq[1:2].isdigit():
        return SequenceStatus.INCOMPLETE, None
    return SequenceStatus.UNRECOGNIZED, None


# ---------------------------------------------------------------------------
# KeyDecoder
# ---------------------------------------------------------------------------


class KeyDecoder:
    """Reads logical keys from a byte source.

    *read* is called with a byte count and returns the bytes read, or
    ``b""`` when the terminal's read timeout expired with nothing available.
    Any exception it raises propagates to the caller.
    """

    def __init__(self, read: Callable[[int], bytes]) -> None:
        self._read = read

    def _read_byte(self) -> int | None:
        data = self._read(1)
        if not data:
            return None
        return data[0]

    def read_key(self) -> LogicalKey:
        """Block until a key is available and return it."""
        while True:
            c = self._read_byte()
            if c is not None:
                break

        if c != ESC:
            return classify_byte(c)

        return self._read_escape_sequence()

    def _read_escape_sequence(self) -> LogicalKey:
        seq = b""
        while True:
            status, kind = decode_escape_sequence(seq)
            if status is SequenceStatus.COMPLETE:
                return LogicalKey.named(kind)
            if status is SequenceStatus.UNRECOGNIZED:
                logger.debug("Unrecognized escape sequence %r", b"\x1b" + seq)
                return LogicalKey.named(KeyKind.ESCAPE)

            c = self._read_byte()
            if c is None:
                if seq:
                    logger.debug("Escape sequence %r timed out", b"\x1b" + seq)
                return LogicalKey.named(KeyKind.ESCAPE)
            seq += bytes((c,))
