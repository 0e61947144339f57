from __future__ import annotations

from dataclasses import dataclass


def clamp(n: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, n))


def move_index(index: int | None, count: int, delta: int) -> int | None:
    """Move a list selection by ``delta``, clamped to ``[0, count)``."""
    if count <= 0 or index is None:
        return None
    return clamp(index + delta, 0, count - 1)


def edge_index(count: int, last: bool) -> int | None:
    if count <= 0:
        return None
    return count - 1 if last else 0


@dataclass
class FocusState:
    count: int = 0
    index: int = 0

    @property
    def current(self) -> int:
        if self.count <= 0:
            return 0
        self.index = clamp(self.index, 0, self.count - 1)
        return self.index

    def next(self) -> None:
        if self.count <= 0:
            return
        self.index = (self.index + 1) % self.count
