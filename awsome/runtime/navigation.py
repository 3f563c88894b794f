"""Hierarchical path navigation for the nested resource kinds.

Paths are ``/``-terminated level strings (``"bucket/"``,
``"bucket/logs/2024/"``, ``"cluster/service/"``); ``None`` is the root
collection. Levels are joined verbatim so object keys with empty segments
round-trip. This module turns a row activation into an intent and leaves
fetching to the orchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..rows import Row, RowRole
from ..services import EntryClass, ServiceKind
from .state import SessionState

SELECT_VALID_ROW_HINT = "Select a valid row"
DETAIL_UNAVAILABLE_HINT = "Select an object or bucket to view details"


@dataclass(frozen=True)
class Descend:
    path: str


@dataclass(frozen=True)
class Ascend:
    path: str | None


@dataclass(frozen=True)
class ShowDetail:
    entry_id: str


@dataclass(frozen=True)
class NoAction:
    hint: str = SELECT_VALID_ROW_HINT


NavigationIntent = Descend | Ascend | ShowDetail | NoAction


def parent_path(path: str | None) -> str | None:
    """Strip the trailing level; a single-level path goes straight to root.

    Levels are split on the last ``/`` before the terminator, so empty key
    segments (``"bucket//"``) are levels of their own.
    """
    if not path:
        return None
    head, sep, _last = path.removesuffix("/").rpartition("/")
    if not sep:
        return None
    return f"{head}/"


def child_path(path: str | None, name: str) -> str:
    """Append ``name`` as a container level below ``path``, verbatim."""
    level = name if name.endswith("/") else f"{name}/"
    return f"{path or ''}{level}"


def leaf_key(path: str | None, name: str) -> str:
    """Full identifier of a leaf: everything after the root level, plus ``name``."""
    if path is None:
        return name
    _root, _sep, inner = path.partition("/")
    return f"{inner}{name}"


def resolve_activation(row: Row | None, path: str | None) -> NavigationIntent:
    """Classify Enter on ``row`` into a navigation intent."""
    if row is None or not row.selectable:
        return NoAction()
    if row.role == RowRole.PARENT_LINK:
        if path is None:
            return NoAction()
        return Ascend(parent_path(path))
    entry_id = row.entry_id or ""
    if not entry_id:
        return NoAction()
    if row.entry_class == EntryClass.CONTAINER:
        return Descend(child_path(path, entry_id))
    if path is None:
        return ShowDetail(entry_id)
    return ShowDetail(leaf_key(path, entry_id))


def resolve_detail_target(row: Row | None, path: str | None) -> str | None:
    """Entry id to describe for the show-detail key, or ``None`` when not describable.

    Root containers (buckets) and leaves are describable; intermediate
    containers (prefixes) and the parent link are not.
    """
    if row is None or row.role != RowRole.ENTRY or not row.entry_id:
        return None
    if row.entry_class == EntryClass.CONTAINER:
        return row.entry_id if path is None else None
    if path is None:
        return row.entry_id
    return leaf_key(path, row.entry_id)


class PathNavigator:
    """Reads the current selection/path from state and produces intents."""

    def __init__(self, state: SessionState) -> None:
        self.state = state

    def activate(self) -> NavigationIntent:
        return resolve_activation(self.state.selected_row(), self.state.path)

    def detail_target(self) -> str | None:
        return resolve_detail_target(self.state.selected_row(), self.state.path)

    def breadcrumb(self) -> str:
        if self.state.path is None:
            return ""
        if self.state.active_descriptor.kind == ServiceKind.S3:
            return f"s3://{self.state.path}"
        return self.state.path


__all__ = [
    "Ascend",
    "DETAIL_UNAVAILABLE_HINT",
    "Descend",
    "NavigationIntent",
    "NoAction",
    "PathNavigator",
    "SELECT_VALID_ROW_HINT",
    "ShowDetail",
    "child_path",
    "leaf_key",
    "parent_path",
    "resolve_activation",
    "resolve_detail_target",
]
