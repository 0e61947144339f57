from __future__ import annotations

import curses
from dataclasses import dataclass

ORANGE_256 = 214


@dataclass(frozen=True)
class ThemeAttrs:
    panel: int
    heading: int
    muted: int
    banner: int
    highlight: int
    highlight_dim: int
    pointer: int
    editing: int
    param_name: int
    status: int
    error: int
    option_green: int
    option_orange: int
    option_red: int


class Theme:
    def __init__(self, has_color: bool) -> None:
        self.has_color = has_color
        self.attrs = ThemeAttrs(
            panel=0,
            heading=curses.A_BOLD,
            muted=curses.A_DIM,
            banner=curses.A_BOLD,
            highlight=curses.A_REVERSE | curses.A_BOLD,
            highlight_dim=curses.A_DIM,
            pointer=curses.A_BOLD,
            editing=curses.A_REVERSE,
            param_name=curses.A_BOLD,
            status=curses.A_BOLD,
            error=curses.A_BOLD,
            option_green=0,
            option_orange=0,
            option_red=curses.A_BOLD,
        )

    @classmethod
    def init(cls) -> "Theme":
        has_color = curses.has_colors()
        theme = cls(has_color=has_color)
        if not has_color:
            return theme

        curses.start_color()
        curses.use_default_colors()

        orange = ORANGE_256 if curses.COLORS >= 256 else curses.COLOR_YELLOW
        curses.init_pair(1, curses.COLOR_WHITE, -1)   # neutral
        curses.init_pair(2, curses.COLOR_YELLOW, -1)  # focus / param names
        curses.init_pair(3, orange, -1)               # banner, pprod
        curses.init_pair(4, curses.COLOR_GREEN, -1)   # qlf
        curses.init_pair(5, curses.COLOR_RED, -1)     # prod / errors
        curses.init_pair(6, curses.COLOR_YELLOW, curses.COLOR_BLACK)  # edit field

        theme.attrs = ThemeAttrs(
            panel=curses.color_pair(1),
            heading=curses.A_BOLD,
            muted=curses.A_DIM,
            banner=curses.color_pair(3) | curses.A_BOLD,
            highlight=curses.color_pair(2) | curses.A_BOLD,
            highlight_dim=curses.A_DIM,
            pointer=curses.color_pair(2),
            editing=curses.color_pair(6) | curses.A_REVERSE,
            param_name=curses.color_pair(2),
            status=curses.color_pair(4) | curses.A_BOLD,
            error=curses.color_pair(5) | curses.A_BOLD,
            option_green=curses.color_pair(4),
            option_orange=curses.color_pair(3),
            option_red=curses.color_pair(5),
        )
        return theme

    def option_attr(self, value: str) -> int:
        if value == "qlf":
            return self.attrs.option_green
        if value in {"pprod", "pprod_legacy"}:
            return self.attrs.option_orange
        if value.startswith("prod"):
            return self.attrs.option_red
        return self.attrs.panel
