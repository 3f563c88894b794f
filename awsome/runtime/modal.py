"""Modal arbitration between the main list and its popups.

Modes stack on top of ``NORMAL``; the highest-precedence mode on the stack
receives all input (quit confirmation > detail view > service picker >
normal). Opening a higher mode suspends the lower one, closing it resumes
whatever was underneath with its state intact.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..rows import message_rows
from .state import DetailPane, LoadingPhase, ModalMode, ServiceDescriptor, SessionState

logger = logging.getLogger(__name__)


class ModalArbiter:
    """Sole owner of ``state.modal_stack`` transitions."""

    def __init__(
        self,
        state: SessionState,
        on_favorites_changed: Callable[[list[ServiceDescriptor]], None] | None = None,
    ) -> None:
        self.state = state
        self._on_favorites_changed = on_favorites_changed

    @property
    def active(self) -> ModalMode:
        return self.state.mode

    def _push(self, mode: ModalMode) -> None:
        if mode not in self.state.modal_stack:
            self.state.modal_stack.append(mode)
        self.state.dirty = True

    def _pop(self, mode: ModalMode) -> None:
        if mode in self.state.modal_stack and mode != ModalMode.NORMAL:
            self.state.modal_stack.remove(mode)
        self.state.dirty = True

    # Service picker

    def open_service_picker(self) -> bool:
        if self.active != ModalMode.NORMAL:
            return False
        self.state.picker_cursor = self.state.active_service
        self._push(ModalMode.SERVICE_PICKER)
        return True

    def close_service_picker(self) -> None:
        self._pop(ModalMode.SERVICE_PICKER)

    def toggle_service_picker(self) -> None:
        if self.active == ModalMode.SERVICE_PICKER:
            self.close_service_picker()
        else:
            self.open_service_picker()

    def move_picker_cursor(self, delta: int) -> None:
        count = len(self.state.services)
        if count == 0:
            return
        self.state.picker_cursor = (self.state.picker_cursor + delta) % count
        self.state.dirty = True

    def confirm_service_picker(self) -> None:
        """Switch to the highlighted service and reset list/navigation state."""
        state = self.state
        state.active_service = max(0, min(state.picker_cursor, len(state.services) - 1))
        self._pop(ModalMode.SERVICE_PICKER)
        service = state.active_descriptor
        state.selection_index = 0
        state.list_start = 0
        state.path = None
        state.loading_phase = LoadingPhase.IDLE
        state.error_message = None
        state.rows = message_rows(f"Press 'r' to load {service.display_name} resources")
        state.status_message = f"Switched to {service.display_name}. Press r to refresh."
        logger.info("switched service to %s", service.short_name)

    def toggle_favorite(self) -> None:
        state = self.state
        if self.active != ModalMode.SERVICE_PICKER:
            return
        if not 0 <= state.picker_cursor < len(state.services):
            return
        service = state.services[state.picker_cursor]
        service.favorite = not service.favorite
        state.status_message = "Added to favorites" if service.favorite else "Removed from favorites"
        state.dirty = True
        if self._on_favorites_changed is not None:
            self._on_favorites_changed(state.services)

    # Detail view

    def open_detail(self, title: str) -> bool:
        if self.active != ModalMode.NORMAL:
            return False
        self.state.detail = DetailPane(visible=True, loading=True, title=title)
        self._push(ModalMode.DETAIL_VIEW)
        return True

    def close_detail(self) -> None:
        self.state.detail = DetailPane()
        self._pop(ModalMode.DETAIL_VIEW)

    def scroll_detail(self, delta: int) -> None:
        detail = self.state.detail
        max_offset = max(0, len(detail.content) - 1)
        offset = max(0, min(max_offset, detail.scroll_offset + delta))
        if offset != detail.scroll_offset:
            detail.scroll_offset = offset
            self.state.dirty = True

    # Quit confirmation

    def request_quit(self) -> None:
        self._push(ModalMode.QUIT_CONFIRM)

    def deny_quit(self) -> None:
        self._pop(ModalMode.QUIT_CONFIRM)


__all__ = ["ModalArbiter"]
