"""Cursor movement over the main row list.

The cursor only ever lands on entry or parent-link rows. Movement wraps at
both ends and gives up after one full lap, so lists made entirely of
decorative rows leave the index untouched.
"""

from __future__ import annotations

import enum

from .state import SessionState


class Direction(enum.IntEnum):
    NEXT = 1
    PREVIOUS = -1


class SelectionController:
    """Owns ``state.selection_index``; never raises."""

    def __init__(self, state: SessionState) -> None:
        self.state = state

    def _is_selectable(self, idx: int) -> bool:
        return self.state.rows[idx].selectable

    def move(self, direction: Direction) -> bool:
        """Step to the next selectable row in ``direction``; return whether it moved."""
        rows = self.state.rows
        count = len(rows)
        if count == 0:
            return False
        start = self.state.selection_index
        if not 0 <= start < count:
            start = 0 if direction == Direction.NEXT else count - 1
            if self._is_selectable(start):
                self.state.selection_index = start
                self.state.dirty = True
                return True
        idx = start
        while True:
            idx = (idx + int(direction)) % count
            if idx == start:
                return False
            if self._is_selectable(idx):
                self.state.selection_index = idx
                self.state.dirty = True
                return True

    def reset(self, index: int = 0) -> None:
        """Place the cursor on the first selectable row at or after ``index``.

        Falls back to ``index`` itself (clamped) when nothing is selectable.
        """
        rows = self.state.rows
        count = len(rows)
        self.state.list_start = 0
        self.state.dirty = True
        if count == 0:
            return
        start = max(0, min(index, count - 1))
        for offset in range(count):
            idx = (start + offset) % count
            if self._is_selectable(idx):
                self.state.selection_index = idx
                return
        self.state.selection_index = start


__all__ = ["Direction", "SelectionController"]
