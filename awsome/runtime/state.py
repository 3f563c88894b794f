"""Session state aggregate shared by every runtime handler.

There is exactly one interaction loop, so the state is a plain mutable
dataclass passed around by reference instead of a global.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from ..rows import Row, message_rows
from ..services import DEFAULT_CATALOG, ServiceKind

INITIAL_STATUS = "Press Space for services, r to refresh, q to quit"
INITIAL_ROW_TEXT = "Initializing AWS client..."


class LoadingPhase(enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


class ModalMode(enum.Enum):
    """Input modes; the value is the precedence (higher wins)."""

    NORMAL = 0
    SERVICE_PICKER = 1
    DETAIL_VIEW = 2
    QUIT_CONFIRM = 3

    @property
    def precedence(self) -> int:
        return self.value


@dataclass
class ServiceDescriptor:
    kind: ServiceKind
    favorite: bool = False

    @property
    def display_name(self) -> str:
        return self.kind.display_name

    @property
    def short_name(self) -> str:
        return self.kind.short_name


@dataclass
class DetailPane:
    visible: bool = False
    loading: bool = False
    scroll_offset: int = 0
    title: str = ""
    content: list[tuple[str, str]] = field(default_factory=list)


def default_services() -> list[ServiceDescriptor]:
    return [ServiceDescriptor(kind, favorite) for kind, favorite in DEFAULT_CATALOG]


@dataclass
class SessionState:
    services: list[ServiceDescriptor] = field(default_factory=default_services)
    active_service: int = 0
    rows: list[Row] = field(default_factory=lambda: message_rows(INITIAL_ROW_TEXT))
    selection_index: int = 0
    list_start: int = 0
    path: str | None = None
    loading_phase: LoadingPhase = LoadingPhase.IDLE
    error_message: str | None = None
    status_message: str = INITIAL_STATUS
    detail: DetailPane = field(default_factory=DetailPane)
    modal_stack: list[ModalMode] = field(default_factory=lambda: [ModalMode.NORMAL])
    picker_cursor: int = 0
    animation_frame: int = 0
    dirty: bool = True
    skip_next_lf: bool = False

    @property
    def active_descriptor(self) -> ServiceDescriptor:
        return self.services[self.active_service]

    @property
    def mode(self) -> ModalMode:
        return max(self.modal_stack, key=lambda mode: mode.precedence)

    @property
    def loading_active(self) -> bool:
        return self.loading_phase == LoadingPhase.LOADING or self.detail.loading

    def favorite_services(self) -> list[tuple[int, ServiceDescriptor]]:
        return [(idx, service) for idx, service in enumerate(self.services) if service.favorite]

    def selected_row(self) -> Row | None:
        if 0 <= self.selection_index < len(self.rows):
            return self.rows[self.selection_index]
        return None


__all__ = [
    "DetailPane",
    "INITIAL_ROW_TEXT",
    "INITIAL_STATUS",
    "LoadingPhase",
    "ModalMode",
    "ServiceDescriptor",
    "SessionState",
    "default_services",
]
