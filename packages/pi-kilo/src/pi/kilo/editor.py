"""The editor loop: render a frame, read a key, apply it, repeat.

``Editor`` owns an explicit ``EditorState`` instead of process-wide
globals. It does not touch the terminal mode itself; the caller runs it
inside a ``TerminalSession`` so the mode is restored on every exit path.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field

from pi.kilo.config import EditorConfig
from pi.kilo.cursor import CursorModel, is_movement_key
from pi.kilo.document import Document
from pi.kilo.keys import KeyDecoder, KeyKind, LogicalKey
from pi.kilo.render import RenderBuffer, clear_screen, compose_frame
from pi.kilo.terminal import ScreenDimensions, Terminal

logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class EditorState:
    screen: ScreenDimensions
    cursor: CursorModel
    document: Document = field(default_factory=Document.empty)
    loop_state: LoopState = LoopState.RUNNING
    exit_code: int | None = None

    @property
    def running(self) -> bool:
        return self.loop_state is LoopState.RUNNING


class Editor:
    """Drives the render/read/dispatch cycle against a terminal."""

    def __init__(
        self,
        terminal: Terminal,
        document: Document | None = None,
        config: EditorConfig | None = None,
        screen: ScreenDimensions | None = None,
    ) -> None:
        self.terminal = terminal
        self.config = config or EditorConfig()
        if screen is None:
            screen = terminal.query_dimensions()
        self.state = EditorState(
            screen=screen,
            cursor=CursorModel(screen),
            document=document or Document.empty(),
        )
        self._decoder = KeyDecoder(terminal.read)
        self._buffer = RenderBuffer()
        self._quit_key = LogicalKey.ctrl(self.config.quit_key)

    # -- rendering ----------------------------------------------------------

    def refresh_screen(self) -> None:
        compose_frame(
            self._buffer,
            self.state.screen,
            self.state.document,
            self.state.cursor.position,
            welcome=self.config.welcome_message,
            filler=self.config.filler,
        )
        self._buffer.flush_to(self.terminal)

    # -- input --------------------------------------------------------------

    def process_key(self, key: LogicalKey) -> None:
        """Apply one decoded key to the editor state."""
        if key == self._quit_key:
            self.quit()
        elif is_movement_key(key):
            self.state.cursor.move(key)
        elif key.kind is KeyKind.ESCAPE:
            logger.debug("Ignoring escape key")

    def process_keypress(self) -> None:
        self.process_key(self._decoder.read_key())

    def quit(self) -> None:
        clear_screen(self.terminal)
        self.terminal.restore()
        self.state.loop_state = LoopState.TERMINATED
        self.state.exit_code = 0
        logger.debug("Quit requested, terminal restored")

    # -- loop ---------------------------------------------------------------

    def run(self) -> int:
        """Run until the quit chord is pressed. Returns the exit code."""
        while self.state.running:
            self.refresh_screen()
            self.process_keypress()
        return self.state.exit_code or 0
