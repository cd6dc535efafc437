from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .fragment import Fragment


class SlideError(Exception):
    """Base class for presentation failures."""


class EmitError(SlideError):
    """The sink rejected a write or a flush while emitting a fragment."""

    def __init__(self, fragment: Fragment, written: int, message: str | None = None) -> None:
        self.fragment = fragment
        self.written = written
        msg = message or f"Failed to emit fragment {fragment.text!r} after {written} unit(s)"
        super().__init__(msg)


class InputError(SlideError):
    """Reading an input event from the terminal failed."""


class PresentError(SlideError):
    """A slide could not be presented.

    The underlying failure is always chained as ``__cause__``. ``index`` is the
    position of the directive that failed, or ``None`` when the final input
    wait failed.
    """

    def __init__(self, message: str, *, index: int | None = None) -> None:
        self.index = index
        super().__init__(message)

    @property
    def emit_error(self) -> EmitError | None:
        cause = self.__cause__
        return cause if isinstance(cause, EmitError) else None
