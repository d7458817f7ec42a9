"""pound: a minimal terminal text viewer with a scrolling cursor viewport."""

__version__ = "1.0.0"

# Errors
from pound.errors import (
    ConfigError,
    ContractViolation,
    DegenerateSizeError,
    LoadError,
    PoundError,
    TerminalIOError,
)

# Input events
from pound.events import Event, KeyEvent, OtherEvent, ResizeEvent, decode_event

# Core engine
from pound.rows import RowStore
from pound.viewport import CursorState, Direction
from pound.output import FrameBuffer
from pound.renderer import Renderer
from pound.dispatch import ControlSignal, Dispatcher
from pound.config import EditorConfig
from pound.session import Session, SessionState

# Terminal interface and implementation
from pound.terminal import ProcessTerminal, RawMode, Terminal

__all__ = [
    "__version__",
    "ConfigError",
    "ContractViolation",
    "ControlSignal",
    "CursorState",
    "DegenerateSizeError",
    "Direction",
    "Dispatcher",
    "EditorConfig",
    "Event",
    "FrameBuffer",
    "KeyEvent",
    "LoadError",
    "OtherEvent",
    "PoundError",
    "ProcessTerminal",
    "RawMode",
    "Renderer",
    "ResizeEvent",
    "RowStore",
    "Session",
    "SessionState",
    "Terminal",
    "TerminalIOError",
    "decode_event",
]
