from __future__ import annotations

import logging
import sys
import time
from contextlib import ExitStack
from typing import Iterable

from .config import PresentationConfig
from .emitter import Sleeper, precise_sleep
from .errors import PresentError
from .fragment import Directive
from .sequencer import Slide, SlideSequencer
from .terminal import InputSource, KeyReader, StreamSink, TerminalSink, cbreak_mode

logger = logging.getLogger(__name__)


class Presentation:
    """Application-level runner that owns the terminal for a whole talk.

    Entering the context switches the input terminal to cbreak mode once and
    opens a :class:`KeyReader`; leaving it restores both, also on error. A sink
    or input source passed in explicitly is used as-is and never touched.
    """

    def __init__(
        self,
        config: PresentationConfig | None = None,
        *,
        sink: TerminalSink | None = None,
        events: InputSource | None = None,
        input_fd: int | None = None,
        sleep: Sleeper | None = None,
    ) -> None:
        self._config = config or PresentationConfig()
        self._sink = sink if sink is not None else StreamSink(color_system=self._config.color_system)
        self._events = events
        self._input_fd = input_fd
        self._sleep = sleep or (precise_sleep if self._config.precise_sleep else time.sleep)
        self._stack: ExitStack | None = None
        self._sequencer: SlideSequencer | None = None
        self.slides_shown = 0

    @property
    def config(self) -> PresentationConfig:
        return self._config

    @property
    def sink(self) -> TerminalSink:
        return self._sink

    def __enter__(self) -> "Presentation":
        stack = ExitStack()
        try:
            events = self._events
            if events is None:
                fd = self._input_fd if self._input_fd is not None else sys.stdin.fileno()
                is_tty = stack.enter_context(cbreak_mode(fd))
                logger.debug("Input fd %s cbreak mode: %s", fd, is_tty)
                events = stack.enter_context(KeyReader(fd))
            self._sequencer = SlideSequencer(
                self._sink,
                events,
                advance_keys=self._config.advance_keys,
                sleep=self._sleep,
            )
        except BaseException:
            stack.close()
            raise
        self._stack = stack
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # type: ignore[override]
        stack, self._stack = self._stack, None
        self._sequencer = None
        if stack is not None:
            stack.close()

    def show(self, *directives: Directive | str) -> None:
        self.present(Slide.of(directives))

    def present(self, current: Slide) -> None:
        sequencer = self._sequencer
        if sequencer is None:
            msg = "Presentation must be entered before showing slides"
            raise RuntimeError(msg)

        number = self.slides_shown + 1
        logger.debug("Presenting slide %d with %d directive(s)", number, len(current))
        try:
            if self._config.clear_screen:
                self._clear()
            sequencer.present(current)
        except PresentError as exc:
            logger.error("Slide %d failed at directive %s: %s", number, exc.index, exc.__cause__ or exc)
            raise
        self.slides_shown = number
        logger.debug("Slide %d acknowledged", number)

    def _clear(self) -> None:
        try:
            self._sink.clear()
            self._sink.flush()
        except (OSError, ValueError) as exc:
            msg = f"Failed to clear the screen: {exc}"
            raise PresentError(msg) from exc

    def run(self, slides: Iterable[Slide]) -> int:
        for current in slides:
            self.present(current)
        return self.slides_shown
