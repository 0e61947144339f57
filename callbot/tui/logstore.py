from __future__ import annotations

import tempfile
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path

CATEGORIES = {"system", "config", "run"}


@dataclass
class LogEntry:
    ts: float
    level: str
    category: str
    message: str

    def format_line(self) -> str:
        stamp = time.strftime("%H:%M:%S", time.localtime(self.ts))
        category = self.category or "system"
        return f"{stamp} [{self.level.upper():5}] [{category}] {self.message}"


class LogStore:
    def __init__(self, max_entries: int = 2000, log_dir: Path | None = None) -> None:
        self.entries: deque[LogEntry] = deque(maxlen=max_entries)
        self.log_dir, fallback_reason = self._resolve_log_dir(log_dir)
        ts = time.strftime("%Y%m%d-%H%M%S", time.localtime())
        self.log_path = self.log_dir / f"callbot-{ts}.log"
        self.append(
            "info",
            f"log_path={self.log_path}{f' (fallback: {fallback_reason})' if fallback_reason else ''}",
        )

    @staticmethod
    def _resolve_log_dir(log_dir: Path | None) -> tuple[Path, str]:
        fallback = Path(tempfile.gettempdir()) / "callbot-logs"
        candidates: list[Path] = []
        if log_dir is not None:
            candidates.append(log_dir)
        else:
            candidates.append(Path.home() / ".cache" / "callbot" / "logs")
        candidates.append(fallback)

        last_err = ""
        for candidate in candidates:
            try:
                candidate.mkdir(parents=True, exist_ok=True)
                # Explicit writability probe.
                probe = candidate / ".write-test"
                with probe.open("w", encoding="utf-8") as fh:
                    fh.write("ok\n")
                probe.unlink(missing_ok=True)
                return candidate, last_err
            except PermissionError as exc:
                last_err = f"permission denied for {candidate}: {exc}"
            except OSError as exc:
                last_err = f"cannot use {candidate}: {exc}"

        fallback.mkdir(parents=True, exist_ok=True)
        return fallback, last_err or "using fallback log directory"

    def append(self, level: str, message: str, category: str = "system", ts: float | None = None) -> LogEntry:
        entry = LogEntry(ts=ts or time.time(), level=level, category=category, message=message)
        self.entries.append(entry)
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(entry.format_line())
            fh.write("\n")
        return entry

    def filtered(self, levels: set[str], search: str = "", categories: set[str] | None = None) -> list[LogEntry]:
        needle = search.lower().strip()
        cat_mask = categories or CATEGORIES
        out: list[LogEntry] = []
        for entry in self.entries:
            if entry.level not in levels:
                continue
            if entry.category not in cat_mask:
                continue
            if needle and needle not in entry.format_line().lower():
                continue
            out.append(entry)
        return out
