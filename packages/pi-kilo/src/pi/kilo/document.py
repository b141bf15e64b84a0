"""Read-only document rows shown by the editor."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Row:
    content: bytes

    @property
    def length(self) -> int:
        return len(self.content)


@dataclass
class Document:
    """Holds at most one row; an empty document shows the welcome banner."""

    rows: list[Row] = field(default_factory=list)

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def row(self, index: int) -> Row | None:
        if 0 <= index < len(self.rows):
            return self.rows[index]
        return None

    @classmethod
    def empty(cls) -> Document:
        return cls()

    @classmethod
    def from_bytes(cls, data: bytes) -> Document:
        """Build a single-row document from the first line of *data*."""
        line = data.split(b"\n", 1)[0].rstrip(b"\r")
        return cls(rows=[Row(line)])

    @classmethod
    def from_text(cls, text: str) -> Document:
        return cls.from_bytes(text.encode("utf-8"))


def load_document(path: str | Path) -> Document:
    """Load the first line of the file at *path*.

    An empty file yields a single empty row. Raises ``OSError`` if the file
    cannot be read.
    """
    data = Path(path).read_bytes()
    logger.debug("Loaded %d bytes from %s", len(data), path)
    return Document.from_bytes(data)
