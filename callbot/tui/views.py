from __future__ import annotations

import curses


def safe_addstr(stdscr: curses.window, y: int, x: int, text: str, attr: int = 0, width: int | None = None) -> int:
    """Draw ``text`` clipped to the screen (and ``width``); return columns drawn."""
    h, w = stdscr.getmaxyx()
    if y < 0 or y >= h or x >= w:
        return 0
    if x < 0:
        text = text[-x:]
        x = 0
    if not text:
        return 0
    max_len = max(0, w - x - 1)
    if width is not None:
        max_len = min(max_len, width)
    if max_len <= 0:
        return 0
    try:
        stdscr.addnstr(y, x, text, max_len, attr)
    except curses.error:
        pass
    return min(len(text), max_len)


def safe_addch(stdscr: curses.window, y: int, x: int, ch: int, attr: int = 0) -> None:
    h, w = stdscr.getmaxyx()
    if 0 <= y < h and 0 <= x < w:
        try:
            stdscr.addch(y, x, ch, attr)
        except curses.error:
            pass


def draw_box(
    stdscr: curses.window,
    y: int,
    x: int,
    h: int,
    w: int,
    title: str = "",
    attr: int = 0,
    title_attr: int | None = None,
    center_title: bool = False,
) -> None:
    if h < 2 or w < 2:
        return
    safe_addch(stdscr, y, x, curses.ACS_ULCORNER, attr)
    safe_addch(stdscr, y, x + w - 1, curses.ACS_URCORNER, attr)
    safe_addch(stdscr, y + h - 1, x, curses.ACS_LLCORNER, attr)
    safe_addch(stdscr, y + h - 1, x + w - 1, curses.ACS_LRCORNER, attr)
    for xx in range(x + 1, x + w - 1):
        safe_addch(stdscr, y, xx, curses.ACS_HLINE, attr)
        safe_addch(stdscr, y + h - 1, xx, curses.ACS_HLINE, attr)
    for yy in range(y + 1, y + h - 1):
        safe_addch(stdscr, yy, x, curses.ACS_VLINE, attr)
        safe_addch(stdscr, yy, x + w - 1, curses.ACS_VLINE, attr)
    if title:
        label = title if len(title) <= w - 4 else title[: max(0, w - 4)]
        tx = x + max(1, (w - len(label)) // 2) if center_title else x + 2
        safe_addstr(stdscr, y, tx, label, attr if title_attr is None else title_attr, width=w - 2)


def draw_centered(stdscr: curses.window, y: int, x: int, w: int, text: str, attr: int = 0) -> None:
    pad = max(0, (w - len(text)) // 2)
    safe_addstr(stdscr, y, x + pad, text, attr, width=w - pad)
