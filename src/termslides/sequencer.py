from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Collection, Iterable, Iterator

from .emitter import Emitter, Sleeper
from .errors import EmitError, InputError, PresentError
from .fragment import Directive, Fragment, Pause, WaitForKey
from .terminal import InputSource, KeyEvent, TerminalSink

DEFAULT_ADVANCE_KEYS: tuple[str, ...] = ("enter", "right", "space")


@dataclass(frozen=True, slots=True)
class Slide:
    """Ordered directives rendered together before waiting for a key."""

    directives: tuple[Directive, ...] = ()

    def __post_init__(self) -> None:
        for directive in self.directives:
            if not isinstance(directive, (Fragment, Pause, WaitForKey)):
                msg = f"Unsupported slide directive: {directive!r}"
                raise TypeError(msg)

    @classmethod
    def of(cls, directives: Iterable[Directive | str]) -> "Slide":
        return cls(tuple(Fragment(item) if isinstance(item, str) else item for item in directives))

    def __len__(self) -> int:
        return len(self.directives)

    def __iter__(self) -> Iterator[Directive]:
        return iter(self.directives)

    @property
    def text(self) -> str:
        return "".join(item.text for item in self.directives if isinstance(item, Fragment))


def slide(*directives: Directive | str) -> Slide:
    return Slide.of(directives)


class SlideState(enum.Enum):
    IDLE = "idle"
    RENDERING = "rendering"
    AWAITING_INPUT = "awaiting-input"
    DONE = "done"
    FAILED = "failed"


class SlideSequencer:
    """Render slides through an :class:`Emitter` and block for a key press."""

    def __init__(
        self,
        sink: TerminalSink,
        events: InputSource,
        *,
        emitter: Emitter | None = None,
        advance_keys: Collection[str] | None = DEFAULT_ADVANCE_KEYS,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self._emitter = emitter or Emitter(sink, sleep=sleep)
        self._events = events
        self._advance_keys = frozenset(advance_keys) if advance_keys is not None else None
        self._sleep = sleep
        self._state = SlideState.IDLE
        self._position: int | None = None

    @property
    def state(self) -> SlideState:
        return self._state

    @property
    def position(self) -> int | None:
        """Index of the directive being rendered, if any."""

        return self._position

    def present(self, directives: Slide | Iterable[Directive | str]) -> None:
        current = directives if isinstance(directives, Slide) else Slide.of(directives)
        self._state = SlideState.IDLE
        self._position = None

        for index, directive in enumerate(current):
            self._state = SlideState.RENDERING
            self._position = index
            self._render(index, directive)

        self._state = SlideState.AWAITING_INPUT
        self._position = None
        self._await_advance(index=None)
        self._state = SlideState.DONE

    def _render(self, index: int, directive: Directive) -> None:
        if isinstance(directive, Fragment):
            try:
                self._emitter.emit(directive)
            except EmitError as exc:
                self._state = SlideState.FAILED
                msg = f"Slide aborted at directive {index}: {exc}"
                raise PresentError(msg, index=index) from exc
        elif isinstance(directive, Pause):
            self._sleep(directive.duration)
        else:
            self._state = SlideState.AWAITING_INPUT
            self._await_advance(index=index)

    def _await_advance(self, *, index: int | None) -> None:
        while True:
            try:
                event = self._events.read_event()
            except (InputError, OSError, EOFError) as exc:
                self._state = SlideState.FAILED
                msg = f"Failed to read input event: {exc}"
                raise PresentError(msg, index=index) from exc
            if self._qualifies(event):
                return

    def _qualifies(self, event: object) -> bool:
        if not isinstance(event, KeyEvent):
            return False
        return self._advance_keys is None or event.key in self._advance_keys
