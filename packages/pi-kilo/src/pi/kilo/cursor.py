"""Cursor position and bounded movement."""

from __future__ import annotations

from dataclasses import dataclass, replace

from pi.kilo.keys import KeyKind, LogicalKey
from pi.kilo.terminal import ScreenDimensions

MOVEMENT_KEYS: frozenset[KeyKind] = frozenset({
    KeyKind.ARROW_UP,
    KeyKind.ARROW_DOWN,
    KeyKind.ARROW_LEFT,
    KeyKind.ARROW_RIGHT,
    KeyKind.HOME,
    KeyKind.END,
    KeyKind.PAGE_UP,
    KeyKind.PAGE_DOWN,
})


@dataclass(frozen=True)
class CursorPosition:
    """0-based column (``x``) and row (``y``)."""

    x: int = 0
    y: int = 0


def is_movement_key(key: LogicalKey) -> bool:
    return key.kind in MOVEMENT_KEYS


def move_cursor(
    position: CursorPosition,
    screen: ScreenDimensions,
    key: LogicalKey,
) -> CursorPosition:
    """Return the position after applying *key*, clamped to *screen*.

    Keys that do not move the cursor return *position* unchanged.
    """
    x, y = position.x, position.y
    kind = key.kind

    if kind is KeyKind.ARROW_LEFT:
        if x > 0:
            x -= 1
    elif kind is KeyKind.ARROW_RIGHT:
        if x < screen.cols - 1:
            x += 1
    elif kind is KeyKind.ARROW_UP:
        if y > 0:
            y -= 1
    elif kind is KeyKind.ARROW_DOWN:
        if y < screen.rows - 1:
            y += 1
    elif kind is KeyKind.HOME:
        x = 0
    elif kind is KeyKind.END:
        x = screen.cols - 1
    elif kind is KeyKind.PAGE_UP:
        y = 0
    elif kind is KeyKind.PAGE_DOWN:
        y = screen.rows - 1
    else:
        return position

    return replace(position, x=x, y=y)


class CursorModel:
    """Mutable cursor bound to a fixed screen size."""

    def __init__(self, screen: ScreenDimensions, position: CursorPosition | None = None) -> None:
        self.screen = screen
        self.position = position or CursorPosition()

    @property
    def x(self) -> int:
        return self.position.x

    @property
    def y(self) -> int:
        return self.position.y

    def move(self, key: LogicalKey) -> None:
        self.position = move_cursor(self.position, self.screen, key)
