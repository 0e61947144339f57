from __future__ import annotations

import io
import signal
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from callbot.tui.logstore import LogStore
from callbot.tui.models import Column, RunResult
from callbot.tui.runner import CommandRunner, terminal_handoff
from callbot.tui.state import new_launcher_state, note_run_result
from callbot.tui.test_core import DEPLOY, make_catalog


class CommandRunnerTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.logstore = LogStore(max_entries=64, log_dir=Path(self._tmp.name))
        self.pause = mock.Mock()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _run(self, runner: CommandRunner, command: str) -> tuple[RunResult, str]:
        out = io.StringIO()
        with redirect_stdout(out):
            result = runner.run(command)
        return result, out.getvalue()

    def test_successful_command(self) -> None:
        runner = CommandRunner(self.logstore, pause=self.pause)
        with mock.patch("callbot.tui.runner.subprocess.run", return_value=mock.Mock(returncode=0)) as run:
            result, out = self._run(runner, "echo hi")
        run.assert_called_once_with(["sh", "-c", "echo hi"], check=False)
        self.assertEqual(result.status, "ok")
        self.assertEqual(result.errors, [])
        self.assertIn("Command exited with: 0", out)
        self.pause.assert_called_once()

    def test_non_zero_exit_is_reported_not_raised(self) -> None:
        runner = CommandRunner(self.logstore, pause=self.pause)
        with mock.patch("callbot.tui.runner.subprocess.run", return_value=mock.Mock(returncode=3)):
            result, _ = self._run(runner, "false")
        self.assertEqual(result.status, "failed")
        self.assertEqual(result.exit_code, 3)
        self.assertEqual(result.errors[0].code, "E_EXIT")
        self.assertEqual(result.summary, "Command exited with: 3")
        self.assertTrue(self.logstore.filtered({"warn"}, "exit_code=3", {"run"}))
        self.assertTrue(self.logstore.filtered({"warn"}, "hint: check the command output", {"run"}))

    def test_spawn_failure(self) -> None:
        runner = CommandRunner(self.logstore, shell="no-such-shell", pause=self.pause)
        with mock.patch("callbot.tui.runner.subprocess.run", side_effect=FileNotFoundError("no-such-shell")):
            result, _ = self._run(runner, "ls")
        self.assertEqual(result.status, "failed")
        self.assertEqual(result.errors[0].code, "E_SPAWN")
        self.assertTrue(result.summary.startswith("Failed to start no-such-shell"))
        self.assertEqual(len(self.logstore.filtered({"error"}, "", {"run"})), 1)
        self.assertEqual(len(self.logstore.filtered({"error"}, "is installed and on PATH", {"run"})), 1)

    def test_interrupt_during_child_is_reported_not_raised(self) -> None:
        before = signal.getsignal(signal.SIGINT)
        runner = CommandRunner(self.logstore, pause=self.pause)
        result, out = self._run(runner, "kill -INT $PPID; sleep 1; exit 130")
        self.assertEqual(result.status, "failed")
        self.assertEqual(result.exit_code, 130)
        self.assertIn("Command exited with: 130", out)
        self.assertIs(signal.getsignal(signal.SIGINT), before)

    def test_dry_run_never_spawns(self) -> None:
        runner = CommandRunner(self.logstore, dry_run=True, pause=self.pause)
        with mock.patch("callbot.tui.runner.subprocess.run") as run:
            result, out = self._run(runner, "rm -rf /tmp/x")
        run.assert_not_called()
        self.assertEqual(result.status, "dry_run")
        self.assertIn("Dry run: rm -rf /tmp/x", out)
        self.pause.assert_called_once_with("Press Enter to continue...")

    def test_result_lands_in_status_line(self) -> None:
        state = new_launcher_state(make_catalog(Column("project", "Project", (DEPLOY,))))
        note_run_result(state, RunResult(status="failed", command="x", exit_code=2))
        self.assertEqual(state.status_line, "Command exited with: 2")
        self.assertEqual(state.mode, "browsing")


class TerminalHandoffTests(unittest.TestCase):
    def test_curses_mode_restored_when_child_call_raises(self) -> None:
        stdscr = mock.Mock()
        with mock.patch("callbot.tui.runner.curses") as fake_curses:
            fake_curses.error = Exception
            with self.assertRaises(RuntimeError):
                with terminal_handoff(stdscr):
                    raise RuntimeError("boom")
        fake_curses.def_prog_mode.assert_called_once()
        fake_curses.endwin.assert_called_once()
        fake_curses.reset_prog_mode.assert_called_once()
        stdscr.refresh.assert_called_once()


class LogStoreTests(unittest.TestCase):
    def test_logstore_falls_back_when_preferred_dir_unwritable(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            denied = Path(td) / "denied"
            real_mkdir = Path.mkdir

            def fake_mkdir(path_obj: Path, *args: object, **kwargs: object) -> None:
                if path_obj == denied:
                    raise PermissionError("denied")
                return real_mkdir(path_obj, *args, **kwargs)

            with mock.patch("callbot.tui.logstore.tempfile.gettempdir", return_value=td), mock.patch(
                "callbot.tui.logstore.Path.mkdir",
                new=fake_mkdir,
            ):
                store = LogStore(max_entries=32, log_dir=denied)
                self.assertEqual(store.log_dir, Path(td) / "callbot-logs")
                self.assertTrue(store.log_path.exists())
                self.assertIn("fallback: permission denied", store.entries[0].message)

    def test_logstore_uses_fallback_when_no_directory_passes_the_write_check(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            real_open = Path.open

            def fake_open(path_obj: Path, *args: object, **kwargs: object):
                if path_obj.name == ".write-test":
                    raise PermissionError("read-only")
                return real_open(path_obj, *args, **kwargs)

            with mock.patch("callbot.tui.logstore.tempfile.gettempdir", return_value=td), mock.patch(
                "callbot.tui.logstore.Path.open",
                new=fake_open,
            ):
                store = LogStore(max_entries=32, log_dir=Path(td) / "preferred")
                self.assertEqual(store.log_dir, Path(td) / "callbot-logs")
                self.assertIn("fallback: permission denied", store.entries[0].message)
                self.assertTrue(store.log_path.exists())

    def test_category_and_search_filtering(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            store = LogStore(max_entries=32, log_dir=Path(td))
            store.append("info", "catalog loaded", category="config")
            store.append("info", "run requested: ls", category="run")
            store.append("error", "Failed to start sh", category="run")
            only_run = store.filtered({"info", "error"}, "", {"run"})
            self.assertEqual([e.category for e in only_run], ["run", "run"])
            self.assertEqual(len(store.filtered({"info"}, "catalog")), 1)
            self.assertIn("[ERROR] [run] Failed to start sh", store.log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
