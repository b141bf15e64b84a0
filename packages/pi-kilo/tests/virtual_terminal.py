"""Virtual terminal for testing -- implements the Terminal protocol in-memory.

This module provides a ``VirtualTerminal`` class that satisfies the
``pi.kilo.terminal.Terminal`` protocol without performing any real I/O.
Input is scripted ahead of time; all output is captured for assertions.
"""

from __future__ import annotations

from collections import deque

from pi.kilo.terminal import ScreenDimensions

# Marks a read that times out with nothing available.
TIMEOUT = None


class VirtualTerminal:
    """In-memory terminal that replays scripted input and records writes.

    Parameters
    ----------
    rows:
        Number of terminal rows (height).
    columns:
        Number of terminal columns (width).
    """

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self._rows = rows
        self._columns = columns
        self._input: deque[int | None] = deque()
        self._writes: list[bytes] = []
        self.restore_count = 0

    # -- Terminal protocol --------------------------------------------------

    def read(self, n: int = 1) -> bytes:
        """Return up to *n* queued bytes, stopping at a timeout marker.

        Raises ``RuntimeError`` when the script is exhausted so a test
        cannot spin forever waiting for a key.
        """
        if not self._input:
            raise RuntimeError("Scripted input exhausted")
        out = bytearray()
        while self._input and len(out) < n:
            item = self._input.popleft()
            if item is TIMEOUT:
                break
            out.append(item)
        return bytes(out)

    def write(self, data: bytes) -> None:
        """Append *data* to the recorded output."""
        self._writes.append(bytes(data))

    def query_dimensions(self) -> ScreenDimensions:
        return ScreenDimensions(rows=self._rows, cols=self._columns)

    def restore(self) -> None:
        self.restore_count += 1

    # -- Test helpers -------------------------------------------------------

    def feed(self, data: bytes | list[int]) -> None:
        """Queue *data* as input bytes."""
        self._input.extend(data)

    def feed_timeout(self, count: int = 1) -> None:
        """Queue *count* reads that time out."""
        self._input.extend([TIMEOUT] * count)

    @property
    def pending_input(self) -> int:
        return len(self._input)

    @property
    def output(self) -> bytes:
        """Return everything written to the terminal as one byte string."""
        return b"".join(self._writes)

    @property
    def writes(self) -> list[bytes]:
        return list(self._writes)

    @property
    def write_count(self) -> int:
        """Return the number of individual ``write`` calls made."""
        return len(self._writes)

    def clear_buffer(self) -> None:
        """Discard all recorded output."""
        self._writes.clear()
