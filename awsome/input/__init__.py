"""Input-layer public API for key decoding and mode handlers.

Split between low-level terminal decoding (`read_key`) and the per-mode
dispatch used by the runtime loop.
"""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import KeyContext, KeyDispatcher, apply_intent, handle_key
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeyContext",
    "KeyDispatcher",
    "apply_intent",
    "handle_key",
    "read_key",
]
