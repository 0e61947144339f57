from __future__ import annotations

import curses
from dataclasses import dataclass

from .screens import ColumnView, DetailLine, details_offset, scroll_offset
from .theme import Theme
from .views import draw_box, safe_addstr


@dataclass(frozen=True)
class Rect:
    y: int
    x: int
    h: int
    w: int

    @property
    def inner(self) -> "Rect":
        return Rect(self.y + 1, self.x + 1, max(0, self.h - 2), max(0, self.w - 2))


def draw_column(stdscr: curses.window, theme: Theme, rect: Rect, column: ColumnView) -> None:
    title = f" {column.title} " if rect.w > len(column.title) + 2 else column.title
    draw_box(stdscr, rect.y, rect.x, rect.h, rect.w, title, theme.attrs.panel, theme.attrs.heading, center_title=True)

    inner = rect.inner
    offset = scroll_offset(column.selected, inner.h)
    for row, label in enumerate(column.labels[offset : offset + inner.h]):
        absolute = row + offset
        selected = absolute == column.selected
        if selected and column.focused:
            marker, attr = "► ", theme.attrs.highlight
        elif selected:
            marker, attr = "  ", theme.attrs.highlight_dim
        else:
            marker, attr = "  ", theme.attrs.panel
        safe_addstr(stdscr, inner.y + row, inner.x, f"{marker}{label}  ", attr, width=inner.w)


def draw_option_row(stdscr: curses.window, theme: Theme, y: int, x: int, width: int, line: DetailLine) -> None:
    col = x + 4
    for chip in line.options:
        attr = theme.option_attr(chip.value)
        if chip.selected:
            text = f"[{chip.label}] "
            attr |= curses.A_BOLD
        else:
            text = f" {chip.label}  "
        col += safe_addstr(stdscr, y, col, text, attr, width=max(0, x + width - col))


def draw_details(stdscr: curses.window, theme: Theme, rect: Rect, title: str, lines: tuple[DetailLine, ...]) -> None:
    draw_box(stdscr, rect.y, rect.x, rect.h, rect.w, title, theme.attrs.panel, theme.attrs.heading)
    inner = rect.inner
    offset = details_offset(lines, inner.h)
    for row, line in enumerate(lines[offset : offset + inner.h]):
        y = inner.y + row
        if line.kind == "options":
            draw_option_row(stdscr, theme, y, inner.x, inner.w, line)
            continue
        if line.kind == "param":
            pointer = "➜ " if line.focused else "  "
            pointer_attr = theme.attrs.editing if line.editing else theme.attrs.pointer
            safe_addstr(stdscr, y, inner.x, pointer, pointer_attr, width=inner.w)
            attr = theme.attrs.editing if line.editing else theme.attrs.param_name
            safe_addstr(stdscr, y, inner.x + 2, line.text, attr, width=max(0, inner.w - 2))
            continue
        if line.kind == "heading":
            attr = theme.attrs.heading
        elif line.kind in {"description", "hint"}:
            attr = theme.attrs.muted
        else:
            attr = theme.attrs.panel
        indent = 4 if line.kind == "description" else 0
        safe_addstr(stdscr, y, inner.x + indent, line.text, attr, width=max(0, inner.w - indent))


def draw_text_panel(stdscr: curses.window, theme: Theme, rect: Rect, title: str, text: str, attr: int) -> None:
    if rect.h >= 3:
        draw_box(stdscr, rect.y, rect.x, rect.h, rect.w, title, theme.attrs.panel, theme.attrs.heading)
        safe_addstr(stdscr, rect.y + 1, rect.x + 1, f"  {text}  ", attr, width=max(0, rect.w - 2))
    else:
        safe_addstr(stdscr, rect.y, rect.x, f"  {text}  ", attr, width=rect.w)
