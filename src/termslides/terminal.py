from __future__ import annotations

import codecs
import os
import re
import selectors
import shutil
import signal
import sys
import termios
import threading
import tty
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Protocol, TextIO, Union

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

from .errors import InputError

CLEAR_SCREEN = "\x1b[2J\x1b[H"

_COLOR_SYSTEMS = {
    "standard": ColorSystem.STANDARD,
    "256": ColorSystem.EIGHT_BIT,
    "truecolor": ColorSystem.TRUECOLOR,
    "windows": ColorSystem.WINDOWS,
}

_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*[@-~]|O[A-Za-z])")

_ESCAPE_KEYS = {
    "\x1b[A": "up",
    "\x1b[B": "down",
    "\x1b[C": "right",
    "\x1b[D": "left",
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
}

_CONTROL_KEYS = {
    "\r": "enter",
    "\n": "enter",
    " ": "space",
    "\t": "tab",
    "\x7f": "backspace",
    "\x08": "backspace",
}


@dataclass(frozen=True, slots=True)
class KeyEvent:
    key: str


@dataclass(frozen=True, slots=True)
class ResizeEvent:
    rows: int
    cols: int


InputEvent = Union[KeyEvent, ResizeEvent]


class TerminalSink(Protocol):
    def write(self, text: str) -> None: ...

    def write_styled(self, text: str, style: Style) -> None: ...

    def flush(self) -> None: ...

    def clear(self) -> None: ...


class InputSource(Protocol):
    def read_event(self) -> InputEvent: ...


def resolve_color_system(stream: TextIO, name: str | None) -> ColorSystem | None:
    """Map a color system name to rich's enum; ``"auto"`` asks rich to detect it."""

    if name == "auto":
        name = Console(file=stream).color_system
    if name is None:
        return None
    try:
        return _COLOR_SYSTEMS[name]
    except KeyError as exc:
        msg = f"Unknown color system: {name!r}"
        raise ValueError(msg) from exc


class StreamSink:
    """Terminal sink writing to a text stream, styling through rich."""

    def __init__(self, stream: TextIO | None = None, *, color_system: str | None = "auto") -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._color_system = resolve_color_system(self._stream, color_system)

    @property
    def color_system(self) -> ColorSystem | None:
        return self._color_system

    def write(self, text: str) -> None:
        self._stream.write(text)

    def write_styled(self, text: str, style: Style) -> None:
        self._stream.write(style.render(text, color_system=self._color_system))

    def flush(self) -> None:
        self._stream.flush()

    def clear(self) -> None:
        self._stream.write(CLEAR_SCREEN)


def decode_keys(text: str) -> list[str]:
    """Translate decoded terminal input into key names."""

    keys: list[str] = []
    pos = 0
    while pos < len(text):
        char = text[pos]
        if char == "\x1b":
            match = _ESCAPE_RE.match(text, pos)
            if match is None:
                keys.append("escape")
                pos += 1
                continue
            sequence = match.group(0)
            keys.append(_ESCAPE_KEYS.get(sequence, sequence))
            pos = match.end()
            continue
        keys.append(_CONTROL_KEYS.get(char, char))
        pos += 1
    return keys


class KeyReader:
    """Blocking key reader over a terminal file descriptor.

    Window size changes are reported as :class:`ResizeEvent` through a
    self-pipe fed by a SIGWINCH handler. The handler is only installed when the
    reader is opened from the main thread.
    """

    def __init__(self, fd: int | None = None, *, watch_resize: bool = True, read_chunk_size: int = 64) -> None:
        self._fd = fd if fd is not None else sys.stdin.fileno()
        self._watch_resize = watch_resize
        self._chunk_size = read_chunk_size
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[KeyEvent] = deque()
        self._selector: selectors.BaseSelector | None = None
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._previous_handler: signal.Handlers | int | None = None

    def __enter__(self) -> "KeyReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        self.close()

    @property
    def is_open(self) -> bool:
        return self._selector is not None

    def open(self) -> None:
        if self._selector is not None:
            return
        selector = selectors.DefaultSelector()
        selector.register(self._fd, selectors.EVENT_READ)
        if self._watch_resize and threading.current_thread() is threading.main_thread():
            self._wake_r, self._wake_w = os.pipe()
            os.set_blocking(self._wake_r, False)
            os.set_blocking(self._wake_w, False)
            selector.register(self._wake_r, selectors.EVENT_READ)
            self._previous_handler = signal.signal(signal.SIGWINCH, self._on_resize)
        self._selector = selector

    def close(self) -> None:
        if self._selector is None:
            return
        try:
            if self._wake_r is not None:
                signal.signal(signal.SIGWINCH, self._previous_handler or signal.SIG_DFL)
        finally:
            self._selector.close()
            for fd in (self._wake_r, self._wake_w):
                if fd is not None:
                    os.close(fd)
            self._selector = None
            self._wake_r = None
            self._wake_w = None
            self._previous_handler = None

    def read_event(self) -> InputEvent:
        if self._selector is None:
            msg = "KeyReader is not open"
            raise RuntimeError(msg)

        while not self._pending:
            for key, _ in self._selector.select():
                if key.fd == self._wake_r:
                    self._drain_wakeups()
                    return self._current_size()
                self._read_keys()
        return self._pending.popleft()

    def _read_keys(self) -> None:
        try:
            data = os.read(self._fd, self._chunk_size)
        except OSError as exc:
            msg = "Failed to read from terminal"
            raise InputError(msg) from exc
        if not data:
            msg = "Terminal input closed"
            raise InputError(msg)
        text = self._decoder.decode(data)
        self._pending.extend(KeyEvent(key) for key in decode_keys(text))

    def _drain_wakeups(self) -> None:
        assert self._wake_r is not None
        try:
            while os.read(self._wake_r, 64):
                pass
        except BlockingIOError:
            pass

    def _current_size(self) -> ResizeEvent:
        try:
            size = os.get_terminal_size(self._fd)
        except OSError:
            size = shutil.get_terminal_size()
        return ResizeEvent(rows=size.lines, cols=size.columns)

    def _on_resize(self, signum, frame) -> None:  # noqa: ARG002 - signal handler signature
        if self._wake_w is None:
            return
        try:
            os.write(self._wake_w, b"\0")
        except BlockingIOError:  # pragma: no cover - pipe already signalled
            pass


@contextmanager
def cbreak_mode(fd: int | None = None) -> Iterator[bool]:
    """Deliver keystrokes immediately without echo; restore the tty afterwards.

    Yields ``False`` and leaves the descriptor untouched when it is not a tty.
    Signals such as Ctrl-C keep working in cbreak mode.
    """

    fd = fd if fd is not None else sys.stdin.fileno()
    if not os.isatty(fd):
        yield False
        return
    saved = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)
