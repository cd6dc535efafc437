from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Iterable

from rich.color import ColorSystem
from rich.style import Style

from .errors import InputError
from .terminal import CLEAR_SCREEN, InputEvent, KeyEvent


@dataclass(slots=True)
class WriteRecord:
    text: str
    style: Style | None
    offset: int
    timestamp: float


class RecordingSink:
    """In-memory terminal sink that keeps every write with its timing.

    Styled writes are also rendered to ANSI so the result can be replayed on a
    virtual screen.
    """

    def __init__(self, *, color_system: ColorSystem | None = ColorSystem.TRUECOLOR) -> None:
        self._color_system = color_system
        self._records: list[WriteRecord] = []
        self._ansi: list[str] = []
        self._offset = 0
        self.flushes = 0
        self.clears = 0

    @property
    def records(self) -> list[WriteRecord]:
        return list(self._records)

    @property
    def text(self) -> str:
        """Plain text of every write, without styling."""

        return "".join(record.text for record in self._records)

    @property
    def ansi(self) -> str:
        return "".join(self._ansi)

    @property
    def offset(self) -> int:
        return self._offset

    def write(self, text: str) -> None:
        self._record(text, None)
        self._ansi.append(text)

    def write_styled(self, text: str, style: Style) -> None:
        self._record(text, style)
        self._ansi.append(style.render(text, color_system=self._color_system))

    def flush(self) -> None:
        self.flushes += 1

    def clear(self) -> None:
        self.clears += 1
        self._ansi.append(CLEAR_SCREEN)

    def reset(self) -> None:
        self._records.clear()
        self._ansi.clear()
        self._offset = 0
        self.flushes = 0
        self.clears = 0

    def _record(self, text: str, style: Style | None) -> None:
        self._records.append(
            WriteRecord(text=text, style=style, offset=self._offset, timestamp=time.monotonic())
        )
        self._offset += len(text)


class ScriptedInput:
    """Input source replaying a fixed sequence of events."""

    def __init__(self, events: Iterable[InputEvent] = ()) -> None:
        self._events: deque[InputEvent] = deque(events)
        self.consumed = 0

    @classmethod
    def keys(cls, *keys: str) -> "ScriptedInput":
        return cls(KeyEvent(key) for key in keys)

    @property
    def remaining(self) -> int:
        return len(self._events)

    def push(self, event: InputEvent) -> None:
        self._events.append(event)

    def read_event(self) -> InputEvent:
        if not self._events:
            msg = "Scripted input exhausted"
            raise InputError(msg)
        self.consumed += 1
        return self._events.popleft()


class AutoAdvance:
    """Input source answering every read with the same key press."""

    def __init__(self, key: str = "enter") -> None:
        self._event = KeyEvent(key)
        self.consumed = 0

    def read_event(self) -> InputEvent:
        self.consumed += 1
        return self._event
