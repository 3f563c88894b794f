"""Rendering engine for the resource browser.

``build_frame`` turns session state into one ANSI frame without touching
the state; ``render_frame`` writes that frame to stdout. Popups are drawn
over the list with absolute cursor positioning, lowest precedence first.
"""

from __future__ import annotations

import os
import sys

from ..rows import Row, RowRole
from ..runtime.navigation import PathNavigator
from ..runtime.state import LoadingPhase, ModalMode, SessionState
from .ansi import clip_ansi_line, display_width, fit_ansi_line, selected_with_ansi

SPINNER_FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")
FAVORITE_MARK = "★"

BORDER_SGR = "\033[38;5;45m"
KEY_SGR = "\033[38;5;229m"
HEADING_SGR = "\033[1;38;5;81m"
DIM_SGR = "\033[2;38;5;250m"
ERROR_SGR = "\033[1;38;5;203m"
RESET = "\033[0m"

STATUS_HINT = "│ Space services  r refresh  i details  q quit"
# Title bar, box borders, breadcrumb and status line.
CHROME_ROWS = 5


def list_view_rows(height: int) -> int:
    """Number of list rows visible inside the main box at terminal ``height``."""
    return max(1, height - CHROME_ROWS)


def spinner_frame(frame: int) -> str:
    return SPINNER_FRAMES[frame % len(SPINNER_FRAMES)]


def phase_label(state: SessionState) -> str:
    if state.loading_phase == LoadingPhase.LOADING:
        return f"[LOADING...] {spinner_frame(state.animation_frame)}"
    if state.loading_phase == LoadingPhase.ERROR:
        return "[ERROR]"
    return "[READY]"


def build_title_bar(state: SessionState, width: int) -> str:
    """App name followed by favorite services, the active one highlighted."""
    parts = [f"{HEADING_SGR} awsome {RESET}"]
    for idx, service in state.favorite_services():
        label = f" {service.short_name} "
        parts.append(selected_with_ansi(label) if idx == state.active_service else label)
    if not state.active_descriptor.favorite:
        parts.append(selected_with_ansi(f" {state.active_descriptor.short_name} "))
    return fit_ansi_line("│".join(parts), width)


def build_status_line(left_text: str, width: int, right_text: str = STATUS_HINT) -> str:
    usable = max(1, width - 1)
    if usable <= len(right_text):
        return right_text[-usable:]
    left_limit = max(0, usable - len(right_text) - 1)
    left = left_text[:left_limit]
    gap = " " * (usable - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def _box_top(title: str, width: int, sgr: str = BORDER_SGR) -> str:
    inner = max(0, width - 2)
    title = clip_ansi_line(f" {title} ", max(0, inner - 1)) if title else ""
    fill = "─" * max(0, inner - 1 - display_width(title))
    head = f"─{title}" if title else "─"
    return f"{sgr}╭{RESET}{sgr}{head}{fill}╮{RESET}" if inner else f"{sgr}╭╮{RESET}"


def _box_line(text: str, width: int, sgr: str = BORDER_SGR) -> str:
    inner = max(0, width - 2)
    return f"{sgr}│{RESET}{fit_ansi_line(text, inner)}{RESET}{sgr}│{RESET}"


def _box_bottom(width: int, sgr: str = BORDER_SGR) -> str:
    return f"{sgr}╰{'─' * max(0, width - 2)}╯{RESET}"


def format_row(row: Row, selected: bool, width: int) -> str:
    """Style one list row; only selectable rows show the selection bar."""
    text = fit_ansi_line(row.text, width)
    if row.role == RowRole.SEPARATOR:
        return f"{DIM_SGR}{text}{RESET}"
    if selected and row.selectable:
        return selected_with_ansi(text)
    if row.role == RowRole.PARENT_LINK:
        return f"{KEY_SGR}{text}{RESET}"
    if row.role == RowRole.HEADER:
        return f"\033[1m{text}{RESET}"
    return text


def build_list_box(state: SessionState, width: int, height: int) -> list[str]:
    """The main box: border with phase title, breadcrumb, then visible rows."""
    inner = max(0, width - 2)
    border = ERROR_SGR if state.loading_phase == LoadingPhase.ERROR else BORDER_SGR
    title = f"{state.active_descriptor.display_name} {phase_label(state)}"
    lines = [_box_top(title, width, border)]
    breadcrumb = PathNavigator(state).breadcrumb()
    lines.append(_box_line(f"{DIM_SGR}{breadcrumb}{RESET}" if breadcrumb else "", width, border))
    visible = list_view_rows(height)
    end = state.list_start + visible
    for idx in range(state.list_start, end):
        if 0 <= idx < len(state.rows):
            text = format_row(state.rows[idx], idx == state.selection_index, inner)
        else:
            text = ""
        lines.append(_box_line(text, width, border))
    lines.append(_box_bottom(width, border))
    return lines


def _popup(title: str, body: list[str], width: int, height: int, box_w: int) -> list[str]:
    """Absolute-positioned ANSI ops drawing a centered rounded box."""
    box_w = max(4, min(box_w, width))
    box_h = max(3, min(len(body) + 2, height))
    x = max(0, (width - box_w) // 2)
    y = max(0, (height - box_h) // 2)
    rows = [_box_top(title, box_w)]
    rows.extend(_box_line(f" {text}", box_w) for text in body[: box_h - 2])
    rows.append(_box_bottom(box_w))
    return [f"\033[{y + 1 + offset};{x + 1}H{row}" for offset, row in enumerate(rows)]


def build_service_picker(state: SessionState, width: int, height: int) -> list[str]:
    body: list[str] = []
    for idx, service in enumerate(state.services):
        mark = FAVORITE_MARK if service.favorite else " "
        label = f"{mark} {service.display_name}"
        body.append(selected_with_ansi(label) if idx == state.picker_cursor else label)
    body.append("")
    body.append(
        f"{KEY_SGR}j/k{RESET} move  {KEY_SGR}Enter{RESET} select  "
        f"{KEY_SGR}f{RESET} favorite  {KEY_SGR}Esc{RESET} close"
    )
    return _popup("Services", body, width, height, box_w=min(56, width - 4))


def build_detail_view(state: SessionState, width: int, height: int) -> list[str]:
    detail = state.detail
    box_w = max(20, width - 8)
    visible = max(1, height - 8)
    if detail.loading:
        body = [f"Loading details... {spinner_frame(state.animation_frame)}"]
    elif not detail.content:
        body = [f"{DIM_SGR}No details available{RESET}"]
    else:
        key_width = max(len(key) for key, _ in detail.content)
        shown = detail.content[detail.scroll_offset : detail.scroll_offset + visible]
        body = [f"{KEY_SGR}{key.ljust(key_width)}{RESET}  {value}" for key, value in shown]
    body.append("")
    body.append(f"{KEY_SGR}j/k{RESET} scroll  {KEY_SGR}Esc{RESET} close")
    return _popup(f"Details: {detail.title}", body, width, height, box_w=box_w)


def build_quit_confirm(width: int, height: int) -> list[str]:
    body = ["Quit awsome?", "", f"{KEY_SGR}y{RESET} yes   {KEY_SGR}n{RESET} no"]
    return _popup("Confirm", body, width, height, box_w=min(30, width - 4))


def build_frame(state: SessionState, width: int, height: int) -> str:
    """Compose a full ANSI frame for ``state`` at the given terminal size."""
    width = max(10, width)
    height = max(CHROME_ROWS + 1, height)
    out: list[str] = ["\033[H\033[J"]
    lines = [build_title_bar(state, width)]
    lines.extend(build_list_box(state, width, height))
    lines.append(f"\033[7m{build_status_line(state.status_message, width)}{RESET}")
    for row, line in enumerate(lines[:height]):
        out.append(f"\033[{row + 1};1H{line}")

    stack = state.modal_stack
    if ModalMode.SERVICE_PICKER in stack:
        out.extend(build_service_picker(state, width, height))
    if ModalMode.DETAIL_VIEW in stack and state.detail.visible:
        out.extend(build_detail_view(state, width, height))
    if ModalMode.QUIT_CONFIRM in stack:
        out.extend(build_quit_confirm(width, height))
    return "".join(out)


def render_frame(state: SessionState, width: int, height: int) -> None:
    frame = build_frame(state, width, height)
    os.write(sys.stdout.fileno(), frame.encode("utf-8", errors="replace"))


__all__ = [
    "SPINNER_FRAMES",
    "build_frame",
    "build_status_line",
    "list_view_rows",
    "render_frame",
]
