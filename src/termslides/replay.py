from __future__ import annotations

from dataclasses import dataclass

import pyte
from pyte import modes
from pyte.screens import Char


@dataclass(slots=True)
class ScreenSize:
    """Virtual screen dimensions."""

    rows: int = 24
    cols: int = 80


@dataclass(slots=True)
class CellStyle:
    char: str
    fg: str | None
    bg: str | None
    bold: bool
    italics: bool
    underscore: bool
    reverse: bool

    @property
    def is_plain(self) -> bool:
        return (
            self.fg in (None, "default")
            and self.bg in (None, "default")
            and not (self.bold or self.italics or self.underscore or self.reverse)
        )


@dataclass(slots=True)
class ScreenState:
    cursor_row: int
    cursor_col: int
    cells: tuple[tuple[CellStyle, ...], ...]

    @property
    def text_lines(self) -> tuple[str, ...]:
        return tuple("".join(cell.char for cell in row) for row in self.cells)

    @property
    def text(self) -> str:
        """Visible text with trailing blanks and empty trailing lines removed."""

        lines = [line.rstrip(" ") for line in self.text_lines]
        while lines and not lines[-1]:
            lines.pop()
        return "\n".join(lines)

    def cell(self, row: int, col: int) -> CellStyle:
        return self.cells[row][col]


class ScreenReplay:
    """Feed ANSI output into a pyte screen and snapshot the cells."""

    def __init__(self, size: ScreenSize | None = None) -> None:
        self._size = size or ScreenSize()
        self._screen = pyte.Screen(self._size.cols, self._size.rows)
        # Mirror a tty with output post-processing: LF also returns the carriage.
        self._screen.set_mode(modes.LNM)
        self._stream = pyte.Stream(self._screen)

    @property
    def size(self) -> ScreenSize:
        return self._size

    def feed(self, ansi: str) -> ScreenState:
        if ansi:
            self._stream.feed(ansi)
        return self.snapshot()

    def reset(self) -> None:
        self._screen.reset()
        self._screen.set_mode(modes.LNM)

    def snapshot(self) -> ScreenState:
        screen = self._screen
        empty = Char(" ")
        rows: list[tuple[CellStyle, ...]] = []
        for row_idx in range(screen.lines):
            row_buffer = screen.buffer.get(row_idx, {})
            cells: list[CellStyle] = []
            for col_idx in range(screen.columns):
                char = row_buffer.get(col_idx, empty)
                cells.append(
                    CellStyle(
                        char=char.data if char.data else " ",
                        fg=char.fg,
                        bg=char.bg,
                        bold=bool(char.bold),
                        italics=bool(char.italics),
                        underscore=bool(char.underscore),
                        reverse=bool(char.reverse),
                    )
                )
            rows.append(tuple(cells))
        return ScreenState(
            cursor_row=screen.cursor.y,
            cursor_col=screen.cursor.x,
            cells=tuple(rows),
        )


def render_screen(ansi: str, size: ScreenSize | None = None) -> ScreenState:
    return ScreenReplay(size).feed(ansi)
