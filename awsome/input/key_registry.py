"""Key-combo dispatch tables shared by every input mode."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Exact-match key table; ``dispatch`` returns ``None`` for unbound keys."""

    def __init__(self, *bindings: KeyComboBinding) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}
        for binding in bindings:
            self.register(binding)

    def register(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting earlier handlers for the same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def bound_keys(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def dispatch(self, key: str) -> bool | None:
        """Invoke the handler bound to ``key`` and return its should-quit result."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return bool(handler())
