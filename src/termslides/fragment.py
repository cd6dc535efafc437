from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Union

import regex
from rich.style import Style

_GRAPHEME_RE = regex.compile(r"\X")

StyleLike = Union[Style, str, None]


def split_graphemes(text: str) -> list[str]:
    """Split text into user-perceived characters (extended grapheme clusters)."""

    return _GRAPHEME_RE.findall(text)


def _coerce_seconds(value: float | timedelta, *, field_name: str) -> float:
    seconds = value.total_seconds() if isinstance(value, timedelta) else float(value)
    if not math.isfinite(seconds) or seconds < 0:
        msg = f"{field_name} must be a finite number of seconds >= 0, got {seconds!r}"
        raise ValueError(msg)
    return seconds


def _coerce_style(style: StyleLike) -> Style | None:
    if isinstance(style, str):
        style = Style.parse(style)
    if style is None or not style:
        return None
    if not isinstance(style, Style):
        msg = f"Unsupported style: {style!r}"
        raise TypeError(msg)
    return style


@dataclass(frozen=True, slots=True)
class Fragment:
    """A piece of text with an optional style and per-character delay."""

    text: str
    style: Style | None = None
    delay: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "style", _coerce_style(self.style))
        object.__setattr__(self, "delay", _coerce_seconds(self.delay, field_name="delay"))

    @property
    def is_instant(self) -> bool:
        return self.delay == 0

    @property
    def is_styled(self) -> bool:
        return self.style is not None

    def units(self) -> list[str]:
        """Chunks the emitter writes, one per sleep interval."""

        if not self.text:
            return []
        if self.is_instant:
            return [self.text]
        return split_graphemes(self.text)


@dataclass(frozen=True, slots=True)
class Pause:
    """Hold the slide for ``duration`` seconds without writing."""

    duration: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "duration", _coerce_seconds(self.duration, field_name="duration"))


@dataclass(frozen=True, slots=True)
class WaitForKey:
    """Block mid-slide until a qualifying key is pressed."""


Directive = Union[Fragment, Pause, WaitForKey]


def instant(text: str, style: StyleLike = None) -> Fragment:
    return Fragment(text, style)


def typed(text: str, delay: float | timedelta, style: StyleLike = None) -> Fragment:
    return Fragment(text, style, delay)
