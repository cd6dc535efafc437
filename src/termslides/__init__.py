"""Typewriter-style command line presentations."""

from .config import CONFIG_SCHEMA, PresentationConfig, load_config, validate_config
from .emitter import Emitter, precise_sleep
from .errors import EmitError, InputError, PresentError, SlideError
from .fragment import Fragment, Pause, WaitForKey, instant, split_graphemes, typed
from .presentation import Presentation
from .recording import AutoAdvance, RecordingSink, ScriptedInput, WriteRecord
from .replay import CellStyle, ScreenReplay, ScreenSize, ScreenState, render_screen
from .sequencer import DEFAULT_ADVANCE_KEYS, Slide, SlideSequencer, SlideState, slide
from .terminal import (
    InputSource,
    KeyEvent,
    KeyReader,
    ResizeEvent,
    StreamSink,
    TerminalSink,
    cbreak_mode,
    decode_keys,
)

__all__ = [
    "AutoAdvance",
    "CONFIG_SCHEMA",
    "CellStyle",
    "DEFAULT_ADVANCE_KEYS",
    "EmitError",
    "Emitter",
    "Fragment",
    "InputError",
    "InputSource",
    "KeyEvent",
    "KeyReader",
    "Pause",
    "PresentError",
    "Presentation",
    "PresentationConfig",
    "RecordingSink",
    "ResizeEvent",
    "ScreenReplay",
    "ScreenSize",
    "ScreenState",
    "ScriptedInput",
    "Slide",
    "SlideError",
    "SlideSequencer",
    "SlideState",
    "StreamSink",
    "TerminalSink",
    "WaitForKey",
    "WriteRecord",
    "cbreak_mode",
    "decode_keys",
    "instant",
    "load_config",
    "precise_sleep",
    "render_screen",
    "slide",
    "split_graphemes",
    "typed",
    "validate_config",
]
