from __future__ import annotations

import curses
import signal
import subprocess
from contextlib import contextmanager
from typing import Callable, Iterator

from .logstore import LogStore
from .models import ExecutionError, RunResult

DEFAULT_SHELL = "sh"

PauseCb = Callable[[str], object]


def _ignore_interrupt(signum: int, frame: object) -> None:
    return None


def run_shell(command: str, shell: str = DEFAULT_SHELL) -> int:
    # The child inherits stdin/stdout/stderr so interactive commands work.
    # Ctrl-C goes to the child. A Python handler, unlike SIG_IGN, is reset
    # to the default on exec, so only the launcher ignores it.
    previous = signal.signal(signal.SIGINT, _ignore_interrupt)
    try:
        proc = subprocess.run([shell, "-c", command], check=False)
    finally:
        signal.signal(signal.SIGINT, previous)
    return int(proc.returncode)


def wait_for_enter(prompt: str) -> object:
    try:
        return input(prompt)
    except EOFError:
        return ""


@contextmanager
def terminal_handoff(stdscr: curses.window) -> Iterator[None]:
    """Give the terminal back to the shell for the duration of the block."""
    curses.def_prog_mode()
    curses.endwin()
    try:
        yield
    finally:
        curses.reset_prog_mode()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.clear()
        stdscr.refresh()


class CommandRunner:
    def __init__(
        self,
        logstore: LogStore,
        *,
        shell: str = DEFAULT_SHELL,
        dry_run: bool = False,
        pause: PauseCb = wait_for_enter,
    ) -> None:
        self.logstore = logstore
        self.shell = shell
        self.dry_run = dry_run
        self.pause = pause

    def run(self, command: str) -> RunResult:
        self.logstore.append("info", f"run requested dry_run={self.dry_run}: {command}", category="run")
        if self.dry_run:
            print(f"Dry run: {command}")
            self.pause("Press Enter to continue...")
            return RunResult(status="dry_run", command=command)

        try:
            exit_code = run_shell(command, self.shell)
        except OSError as exc:
            err = ExecutionError(
                code="E_SPAWN",
                message=f"Failed to start {self.shell}: {exc}",
                command=command,
                suggested_fix=f"Check that '{self.shell}' is installed and on PATH.",
            )
            self.logstore.append("error", f"{err.message} (hint: {err.suggested_fix})", category="run")
            print(err.message)
            print(err.suggested_fix)
            self.pause("Press Enter to continue...")
            return RunResult(status="failed", command=command, exit_code=127, errors=[err])

        print(f"Command exited with: {exit_code}")
        self.pause("Press Enter to continue...")
        if exit_code != 0:
            err = ExecutionError(
                code="E_EXIT",
                message=f"Command exited with: {exit_code}",
                command=command,
                suggested_fix="Check the command output, then run it manually in a shell.",
            )
            self.logstore.append("warn", f"exit_code={exit_code}: {command} (hint: {err.suggested_fix})", category="run")
            return RunResult(status="failed", command=command, exit_code=exit_code, errors=[err])

        self.logstore.append("info", f"exit_code=0: {command}", category="run")
        return RunResult(status="ok", command=command, exit_code=0)
