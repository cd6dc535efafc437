from __future__ import annotations

import time
from typing import Callable

from .errors import EmitError
from .fragment import Fragment
from .terminal import TerminalSink

Sleeper = Callable[[float], None]

_SPIN_THRESHOLD = 0.002


def precise_sleep(seconds: float) -> None:
    """Sleep, then busy-wait the last couple of milliseconds.

    Useful where the OS sleep granularity makes typing noticeably slower than
    requested.
    """

    deadline = time.perf_counter() + seconds
    coarse = seconds - _SPIN_THRESHOLD
    if coarse > 0:
        time.sleep(coarse)
    while time.perf_counter() < deadline:
        pass


class Emitter:
    """Write fragments to a sink one user-perceived character at a time."""

    def __init__(self, sink: TerminalSink, *, sleep: Sleeper = time.sleep) -> None:
        self._sink = sink
        self._sleep = sleep

    @property
    def sink(self) -> TerminalSink:
        return self._sink

    def emit(self, fragment: Fragment) -> None:
        units = fragment.units()
        last = len(units) - 1
        for written, unit in enumerate(units):
            try:
                self._write(unit, fragment)
                self._sink.flush()
            except (OSError, ValueError) as exc:
                raise EmitError(fragment, written) from exc
            if written < last:
                self._sleep(fragment.delay)

    def _write(self, unit: str, fragment: Fragment) -> None:
        if fragment.style is None:
            self._sink.write(unit)
        else:
            self._sink.write_styled(unit, fragment.style)
