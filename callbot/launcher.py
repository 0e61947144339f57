#!/usr/bin/env python3
"""Callbot: column-based launcher for parameterised shell commands (stdlib only)."""

from __future__ import annotations

import argparse
import curses
import os
import sys
from pathlib import Path

from callbot.tui.config import resolve_config_path, load_catalog
from callbot.tui.keys import decode_key
from callbot.tui.logstore import LogStore
from callbot.tui.models import LoadError, SelectKind, TextKind
from callbot.tui.runner import CommandRunner, terminal_handoff
from callbot.tui.screens import ScreenView, build_screen, list_page_size
from callbot.tui.state import (
    LauncherState,
    apply_key,
    new_launcher_state,
    note_run_result,
    request_run,
    select_action,
    set_param_option,
    set_param_text,
)
from callbot.tui.theme import Theme
from callbot.tui.title import banner_lines
from callbot.tui.views import draw_centered, safe_addstr
from callbot.tui.widgets import Rect, draw_column, draw_details, draw_text_panel

POLL_MS = 200
FOOTER_H = 6
MIN_BODY_H = 3
MIN_W = 40


class CallbotTUI:
    def __init__(self, stdscr: curses.window, state: LauncherState, runner: CommandRunner) -> None:
        self.stdscr = stdscr
        self.state = state
        self.runner = runner
        self.running = True
        self.page_size = 1
        self.failed_runs = 0

    def run(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        self.stdscr.keypad(True)
        self.stdscr.timeout(POLL_MS)
        self.theme = Theme.init()

        while self.running:
            self._draw()
            try:
                key = self.stdscr.get_wch()
            except curses.error:
                continue
            if key == curses.KEY_RESIZE:
                continue
            event = decode_key(key, text_mode=self.state.editing_text)
            if event is None:
                continue
            effect = apply_key(self.state, event, page_size=self.page_size)
            if effect.kind == "quit":
                self.running = False
            elif effect.kind == "run":
                self._execute(effect.command)

    def _execute(self, command: str) -> None:
        with terminal_handoff(self.stdscr):
            result = self.runner.run(command)
        if result.status == "failed":
            self.failed_runs += 1
        note_run_result(self.state, result)

    def _draw(self) -> None:
        self.stdscr.erase()
        h, w = self.stdscr.getmaxyx()
        view = build_screen(self.state)
        banner = banner_lines(view.title)
        if h < len(banner) + 2 + MIN_BODY_H + FOOTER_H + 2 or any(len(line) > w - 2 for line in banner):
            banner = (view.title,)
        header_h = max(3, len(banner) + 2)

        if h < header_h + MIN_BODY_H + FOOTER_H + 2 or w < MIN_W:
            safe_addstr(self.stdscr, 0, 0, "Terminal too small. Resize to continue.", self.theme.attrs.error)
            self.stdscr.refresh()
            return

        outer = Rect(1, 1, h - 2, w - 2)
        for idx, line in enumerate(banner):
            draw_centered(self.stdscr, outer.y + idx, outer.x, outer.w, line, self.theme.attrs.banner)
        draw_centered(self.stdscr, outer.y + len(banner), outer.x, outer.w, view.subtitle, self.theme.attrs.muted)

        body = Rect(outer.y + header_h, outer.x, outer.h - header_h - FOOTER_H, outer.w)
        self.page_size = list_page_size(body.h)
        if view.mode == "browsing":
            self._draw_columns(body, view)
        else:
            draw_details(self.stdscr, self.theme, body, view.details_title, view.details)

        preview = Rect(body.y + body.h, outer.x, 3, outer.w)
        draw_text_panel(self.stdscr, self.theme, preview, " Preview ", view.preview, self.theme.attrs.panel)

        help_rect = Rect(preview.y + preview.h, outer.x, 3, outer.w)
        help_text = view.help_text
        attr = self.theme.attrs.muted
        if view.status_line:
            help_text = f"{view.status_line}  |  {help_text}"
            attr = self.theme.attrs.status
        draw_text_panel(self.stdscr, self.theme, help_rect, " Help ", help_text, attr)

        self.stdscr.refresh()

    def _draw_columns(self, body: Rect, view: ScreenView) -> None:
        count = len(view.columns)
        if count == 0:
            return
        width = body.w // count
        for idx, column in enumerate(view.columns):
            # Last column absorbs the rounding remainder.
            col_w = body.w - width * idx if idx == count - 1 else width
            draw_column(self.stdscr, self.theme, Rect(body.y, body.x + width * idx, body.h, col_w), column)


def _main(stdscr: curses.window, state: LauncherState, runner: CommandRunner) -> int:
    app = CallbotTUI(stdscr, state, runner)
    app.run()
    return app.failed_runs


def _plain_choose(title: str, options: list[str], current: int = 0) -> int | None:
    while True:
        print(f"\n{title}")
        for idx, label in enumerate(options, start=1):
            marker = "*" if idx - 1 == current else " "
            print(f" {marker} {idx}) {label}")
        try:
            raw = input(f"Select [1-{len(options)}] (Enter keeps {current + 1}, b to go back): ").strip().lower()
        except EOFError:
            return None
        if not raw:
            return current
        if raw == "b":
            return None
        if raw.isdigit() and 1 <= int(raw) <= len(options):
            return int(raw) - 1
        print("Invalid choice.")


def _prompt_text(label: str, default: str) -> str | None:
    try:
        raw = input(f"{label} [{default}]: ")
    except EOFError:
        return None
    return raw or default


def _plain_fill_parameters(state: LauncherState) -> bool:
    action = state.current_action
    if action is None:
        return False
    for idx, current in enumerate(action.params):
        param = current.definition
        label = f"{param.name}{' *' if param.required else ''}"
        if param.description:
            label = f"{label} ({param.description})"
        kind = param.kind
        if isinstance(kind, SelectKind):
            choice = _plain_choose(label, [f"{o.label} [{o.value}]" for o in kind.options], current.selected)
            if choice is None:
                return False
            set_param_option(state, idx, choice)
        elif isinstance(kind, TextKind):
            text = _prompt_text(label, current.text)
            if text is None:
                return False
            set_param_text(state, idx, text)
    return True


def run_plain_console(state: LauncherState, runner: CommandRunner, logstore: LogStore) -> int:
    entries: list[tuple[int, int]] = []
    labels: list[str] = []
    for cidx, column in enumerate(state.columns):
        for aidx, action in enumerate(column.actions):
            entries.append((cidx, aidx))
            labels.append(f"{column.definition.title} / {action.definition.label}")

    failures = 0
    while True:
        print(f"\n{state.catalog.app.title}")
        print(state.catalog.app.subtitle)
        print("=" * max(len(state.catalog.app.title), 12))
        for idx, label in enumerate(labels, start=1):
            print(f"{idx:>3}) {label}")
        print("  q) Quit")
        print(f"Log file: {logstore.log_path}")
        try:
            choice = input("Select action: ").strip().lower()
        except EOFError:
            choice = "q"
        if choice == "q":
            return 1 if failures else 0
        if not choice.isdigit() or not 1 <= int(choice) <= len(entries):
            print("Unknown option.")
            continue

        cidx, aidx = entries[int(choice) - 1]
        select_action(state, cidx, aidx)
        if not _plain_fill_parameters(state):
            continue
        print(f"\nPreview: {state.preview}")
        try:
            confirm = input("Run this command? (y/N): ").strip().lower()
        except EOFError:
            confirm = ""
        if confirm not in {"y", "yes"}:
            continue
        effect = request_run(state)
        if effect.kind != "run":
            print(state.status_line)
            continue
        result = runner.run(effect.command)
        note_run_result(state, result)
        if result.status == "failed":
            failures += 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="callbot", description="Launch parameterised shell commands from a TOML catalog.")
    parser.add_argument("--config", metavar="PATH", help="catalog file (default: $CALLBOT_CONFIG or config.toml)")
    parser.add_argument("--dry-run", action="store_true", help="print commands instead of executing them")
    parser.add_argument("--check", action="store_true", help="validate the catalog and exit")
    parser.add_argument("--plain", action="store_true", help="line-oriented console instead of the curses UI")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    path: Path = resolve_config_path(args.config)
    try:
        catalog = load_catalog(path)
    except LoadError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.check:
        print(f"OK: {len(catalog.columns)} columns, {catalog.action_count} actions ({path})")
        return 0

    try:
        logstore = LogStore()
    except OSError as exc:
        print(f"Error: no writable log directory: {exc}", file=sys.stderr)
        return 1
    logstore.append(
        "info",
        f"catalog loaded from {path}: {len(catalog.columns)} columns, {catalog.action_count} actions",
        category="config",
    )
    runner = CommandRunner(logstore, dry_run=args.dry_run)
    state = new_launcher_state(catalog)

    if args.plain:
        return run_plain_console(state, runner, logstore)

    os.environ.setdefault("ESCDELAY", "25")
    try:
        failed_runs = curses.wrapper(_main, state, runner)
    except KeyboardInterrupt:
        return 130
    if failed_runs:
        print(f"{failed_runs} command(s) failed. Log file: {logstore.log_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
