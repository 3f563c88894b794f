"""Keyboard dispatch for every modal mode.

Exactly one handler runs per key: the one for the highest-precedence mode
on the modal stack. Each handler returns ``True`` only when the application
should terminate.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..runtime.modal import ModalArbiter
from ..runtime.navigation import (
    DETAIL_UNAVAILABLE_HINT,
    Ascend,
    Descend,
    NavigationIntent,
    NoAction,
    PathNavigator,
    ShowDetail,
)
from ..runtime.refresh import RefreshOrchestrator
from ..runtime.selection import Direction, SelectionController
from ..runtime.state import ModalMode, SessionState
from .key_registry import KeyComboBinding, KeyComboRegistry

ENTER_KEYS = ("ENTER",)
UP_KEYS = ("UP", "k")
DOWN_KEYS = ("DOWN", "j")


@dataclass(frozen=True)
class KeyContext:
    """State and controllers the key handlers act on."""

    state: SessionState
    selection: SelectionController
    navigator: PathNavigator
    arbiter: ModalArbiter
    orchestrator: RefreshOrchestrator


def apply_intent(intent: NavigationIntent, context: KeyContext) -> None:
    """Carry out a navigation intent produced by row activation."""
    if isinstance(intent, (Descend, Ascend)):
        context.orchestrator.refresh(intent.path)
    elif isinstance(intent, ShowDetail):
        context.orchestrator.describe(intent.entry_id)
    elif isinstance(intent, NoAction):
        context.state.status_message = intent.hint
        context.state.dirty = True


def _quit_confirm_registry(context: KeyContext) -> KeyComboRegistry:
    def confirm() -> bool:
        return True

    def deny() -> bool:
        context.arbiter.deny_quit()
        return False

    return KeyComboRegistry(
        KeyComboBinding(("y", "Y"), confirm),
        KeyComboBinding(("n", "N", "ESC"), deny),
    )


def _detail_registry(context: KeyContext) -> KeyComboRegistry:
    arbiter = context.arbiter

    def close() -> bool:
        arbiter.close_detail()
        return False

    def scroll_down() -> bool:
        arbiter.scroll_detail(1)
        return False

    def scroll_up() -> bool:
        arbiter.scroll_detail(-1)
        return False

    def request_quit() -> bool:
        arbiter.request_quit()
        return False

    return KeyComboRegistry(
        KeyComboBinding(("ESC", "i", "I"), close),
        KeyComboBinding(DOWN_KEYS, scroll_down),
        KeyComboBinding(UP_KEYS, scroll_up),
        KeyComboBinding(("q", "Q", "CTRL_C"), request_quit),
    )


def _picker_registry(context: KeyContext) -> KeyComboRegistry:
    arbiter = context.arbiter

    def close() -> bool:
        arbiter.close_service_picker()
        return False

    def down() -> bool:
        arbiter.move_picker_cursor(1)
        return False

    def up() -> bool:
        arbiter.move_picker_cursor(-1)
        return False

    def confirm() -> bool:
        arbiter.confirm_service_picker()
        return False

    def toggle_favorite() -> bool:
        arbiter.toggle_favorite()
        return False

    def request_quit() -> bool:
        arbiter.request_quit()
        return False

    return KeyComboRegistry(
        KeyComboBinding(("ESC", "SPACE"), close),
        KeyComboBinding(DOWN_KEYS, down),
        KeyComboBinding(UP_KEYS, up),
        KeyComboBinding(ENTER_KEYS, confirm),
        KeyComboBinding(("f", "F"), toggle_favorite),
        KeyComboBinding(("q", "Q", "CTRL_C"), request_quit),
    )


def _normal_registry(context: KeyContext) -> KeyComboRegistry:
    state = context.state

    def request_quit() -> bool:
        context.arbiter.request_quit()
        return False

    def open_picker() -> bool:
        context.arbiter.open_service_picker()
        return False

    def show_detail() -> bool:
        target = context.navigator.detail_target()
        if target is None:
            state.status_message = DETAIL_UNAVAILABLE_HINT
            state.dirty = True
            return False
        context.orchestrator.describe(target)
        return False

    def refresh() -> bool:
        context.orchestrator.refresh()
        return False

    def down() -> bool:
        context.selection.move(Direction.NEXT)
        return False

    def up() -> bool:
        context.selection.move(Direction.PREVIOUS)
        return False

    def activate() -> bool:
        apply_intent(context.navigator.activate(), context)
        return False

    return KeyComboRegistry(
        KeyComboBinding(("q", "Q", "CTRL_C"), request_quit),
        KeyComboBinding(("SPACE",), open_picker),
        KeyComboBinding(("i", "I"), show_detail),
        KeyComboBinding(("r", "R"), refresh),
        KeyComboBinding(DOWN_KEYS, down),
        KeyComboBinding(UP_KEYS, up),
        KeyComboBinding(ENTER_KEYS, activate),
    )


_REGISTRY_BUILDERS = {
    ModalMode.QUIT_CONFIRM: _quit_confirm_registry,
    ModalMode.DETAIL_VIEW: _detail_registry,
    ModalMode.SERVICE_PICKER: _picker_registry,
    ModalMode.NORMAL: _normal_registry,
}


class KeyDispatcher:
    """Routes keys to the active mode's registry; registries are built once."""

    def __init__(self, context: KeyContext) -> None:
        self.context = context
        self._registries = {mode: build(context) for mode, build in _REGISTRY_BUILDERS.items()}

    def handle(self, key: str) -> bool:
        """Handle one key and return ``True`` when the app should quit."""
        registry = self._registries[self.context.state.mode]
        return bool(registry.dispatch(key))


def handle_key(key: str, context: KeyContext) -> bool:
    """One-shot form of :class:`KeyDispatcher` for callers without a dispatcher."""
    return KeyDispatcher(context).handle(key)


__all__ = [
    "KeyContext",
    "KeyDispatcher",
    "apply_intent",
    "handle_key",
]
