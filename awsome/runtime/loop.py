"""Main interactive event loop for the terminal UI.

Each iteration applies any resolved fetch, advances the loading animation,
re-renders when something changed, and dispatches at most one key. The loop
is wiring only; behavior lives in the injected callbacks.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..input import read_key
from .state import SessionState
from .terminal import TerminalController


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    input_poll_ms: int = 100


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``."""

    handle_key: Callable[[str], bool]
    poll_fetch: Callable[[], bool]
    render: Callable[[SessionState, int, int], None]
    list_view_rows: Callable[[int], int]


def keep_selection_visible(state: SessionState, visible_rows: int) -> None:
    """Scroll ``state.list_start`` so the selected row stays on screen."""
    visible_rows = max(1, visible_rows)
    prev_start = state.list_start
    if state.selection_index < state.list_start:
        state.list_start = state.selection_index
    elif state.selection_index >= state.list_start + visible_rows:
        state.list_start = state.selection_index - visible_rows + 1
    state.list_start = max(0, min(state.list_start, max(0, len(state.rows) - visible_rows)))
    if state.list_start != prev_start:
        state.dirty = True


def run_main_loop(
    state: SessionState,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the interactive loop until a key handler asks to quit."""
    ops = callbacks
    last_size: tuple[int, int] | None = None

    with terminal.raw_mode():
        while True:
            columns, lines = terminal.size()
            if (columns, lines) != last_size:
                last_size = (columns, lines)
                state.dirty = True

            if ops.poll_fetch():
                state.dirty = True
            if state.loading_active:
                state.animation_frame += 1
                state.dirty = True

            keep_selection_visible(state, ops.list_view_rows(lines))

            if state.dirty:
                ops.render(state, columns, lines)
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=timing.input_poll_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            if state.skip_next_lf and key == "ENTER_LF":
                state.skip_next_lf = False
                continue

            if key == "ENTER_CR":
                key = "ENTER"
                state.skip_next_lf = True
            elif key == "ENTER_LF":
                key = "ENTER"
                state.skip_next_lf = False
            else:
                state.skip_next_lf = False

            if ops.handle_key(key):
                break


__all__ = ["RuntimeLoopCallbacks", "RuntimeLoopTiming", "keep_selection_visible", "run_main_loop"]
