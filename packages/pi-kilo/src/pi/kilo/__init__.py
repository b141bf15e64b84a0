"""pi-kilo: raw-mode terminal core of a minimal screen editor."""

# Configuration
from pi.kilo.config import KILO_VERSION, EditorConfig

# Cursor movement
from pi.kilo.cursor import CursorModel, CursorPosition, move_cursor

# Document rows
from pi.kilo.document import Document, Row, load_document

# Editor loop
from pi.kilo.editor import Editor, EditorState, LoopState

# Keyboard input decoding
from pi.kilo.keys import (
    ESCAPE_SEQUENCES,
    KeyDecoder,
    KeyKind,
    LogicalKey,
    SequenceStatus,
    ctrl_key,
    decode_escape_sequence,
)

# Frame rendering
from pi.kilo.render import RenderBuffer, compose_frame, draw_rows, welcome_line

# Terminal session
from pi.kilo.terminal import (
    ScreenDimensions,
    Terminal,
    TerminalError,
    TerminalIOError,
    TerminalSession,
    parse_cursor_position_report,
)

# Utilities
from pi.kilo.utils import display_width, truncate_to_columns

__version__ = KILO_VERSION

__all__ = [
    "CursorModel",
    "CursorPosition",
    "Document",
    "ESCAPE_SEQUENCES",
    "Editor",
    "EditorConfig",
    "EditorState",
    "KILO_VERSION",
    "KeyDecoder",
    "KeyKind",
    "LogicalKey",
    "LoopState",
    "RenderBuffer",
    "Row",
    "ScreenDimensions",
    "SequenceStatus",
    "Terminal",
    "TerminalError",
    "TerminalIOError",
    "TerminalSession",
    "compose_frame",
    "ctrl_key",
    "decode_escape_sequence",
    "display_width",
    "draw_rows",
    "load_document",
    "move_cursor",
    "parse_cursor_position_report",
    "truncate_to_columns",
    "welcome_line",
]
