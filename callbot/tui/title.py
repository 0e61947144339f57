from __future__ import annotations

import shutil
import subprocess
from functools import lru_cache

DEFAULT_BANNER = (
    r"  ____    _    _ _     ____   ____  ",
    r" / ___|  / \  | | |   | __ ) | __ ) ",
    r"| |     / _ \ | | |   |  _ \ |  _ \ ",
    r"| |___ / ___ \| | |___| |_) || |_) |",
    r" \____/_/   \_\_|_____|____/ |____/",
)


@lru_cache(maxsize=8)
def banner_lines(title: str) -> tuple[str, ...]:
    """Render ``title`` with figlet when available, else a built-in banner."""
    if shutil.which("figlet"):
        try:
            proc = subprocess.run(["figlet", title], capture_output=True, text=True, timeout=2.0, check=False)
        except (OSError, subprocess.TimeoutExpired):
            proc = None
        if proc is not None and proc.returncode == 0 and proc.stdout.strip():
            return tuple(line.rstrip() for line in proc.stdout.rstrip("\n").splitlines())
    if title.strip().upper() == "CALLBOT":
        return DEFAULT_BANNER
    return (title,)
