"""Row model for the main resource list.

Every displayed line carries a role so cursor logic stays kind-agnostic:
decorative rows (header, separator, messages) are never selectable, while
entries and the synthetic ``..`` parent link are.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .services.base import Column, EntryClass, Record, ServiceBackend

logger = logging.getLogger(__name__)

COLUMN_GAP = "  "
PARENT_LINK_TEXT = ".."
LOADING_TEXT = "Loading..."
ERROR_CAUSES: tuple[str, ...] = (
    "Possible causes:",
    "- Invalid AWS credentials",
    "- Insufficient IAM permissions",
    "- Network connectivity issues",
)


class RowRole(enum.Enum):
    HEADER = "header"
    SEPARATOR = "separator"
    PARENT_LINK = "parent_link"
    ENTRY = "entry"


@dataclass(frozen=True)
class Row:
    """One line of the main list.

    ``entry_id`` and ``entry_class`` are only set for ``ENTRY`` rows; the id is
    opaque to everything except the backend that produced it.
    """

    role: RowRole
    text: str
    entry_id: str | None = None
    entry_class: EntryClass | None = None

    @property
    def selectable(self) -> bool:
        return self.role in (RowRole.ENTRY, RowRole.PARENT_LINK)

    @property
    def is_container(self) -> bool:
        return self.role == RowRole.ENTRY and self.entry_class == EntryClass.CONTAINER


def message_rows(*lines: str) -> list[Row]:
    """Non-selectable informational rows (placeholders, hints, diagnostics)."""
    return [Row(RowRole.HEADER, line) for line in lines]


def loading_rows() -> list[Row]:
    return message_rows(LOADING_TEXT)


def error_rows(service_name: str, message: str) -> list[Row]:
    """Fixed diagnostic shown whenever a list fetch fails."""
    return message_rows(
        f"Error loading {service_name}",
        f"Details: {message}",
        "",
        *ERROR_CAUSES,
    )


def parent_link_row() -> Row:
    return Row(RowRole.PARENT_LINK, PARENT_LINK_TEXT)


def first_selectable_index(rows: Sequence[Row]) -> int | None:
    return next((idx for idx, row in enumerate(rows) if row.selectable), None)


def _record_cells(backend: ServiceBackend, record: Record, column_count: int) -> tuple[str, ...]:
    """Return exactly ``column_count`` cell strings, degrading odd records to text."""
    try:
        cells = tuple(str(cell) for cell in backend.cells(record))
    except Exception:
        logger.debug("unformattable %s record: %r", backend.kind.short_name, record, exc_info=True)
        cells = (str(record),)
    if len(cells) < column_count:
        cells = cells + ("",) * (column_count - len(cells))
    return cells[:column_count]


def _record_entry_id(backend: ServiceBackend, record: Record, fallback: str) -> str:
    try:
        entry_id = backend.entry_id(record)
    except Exception:
        logger.debug("record without id: %r", record, exc_info=True)
        entry_id = ""
    return entry_id or fallback


def _column_widths(columns: Sequence[Column], table: Sequence[tuple[str, ...]]) -> list[int]:
    widths: list[int] = []
    for col_idx, column in enumerate(columns):
        widest = max((len(cells[col_idx]) for cells in table), default=0)
        widths.append(max(column.min_width, len(column.title), widest))
    return widths


def _join_cells(cells: Sequence[str], widths: Sequence[int]) -> str:
    parts = [cell.ljust(width) for cell, width in zip(cells[:-1], widths[:-1])]
    parts.append(cells[-1])
    return COLUMN_GAP.join(parts).rstrip()


def build_rows(records: Sequence[Record], backend: ServiceBackend, path: str | None) -> list[Row]:
    """Lay ``records`` out as a table with role-tagged rows.

    Widths come from the widest value per column in this record set only, so
    they change between refreshes. Hierarchical backends get a ``..`` row right
    after the separator whenever ``path`` is below the root.
    """
    if not records:
        return []

    columns = backend.columns(path)
    table = [_record_cells(backend, record, len(columns)) for record in records]
    widths = _column_widths(columns, table)

    header_text = _join_cells([column.title for column in columns], widths)
    separator_len = sum(widths) + len(COLUMN_GAP) * (len(widths) - 1)
    rows = [
        Row(RowRole.HEADER, header_text),
        Row(RowRole.SEPARATOR, "-" * max(separator_len, len(header_text))),
    ]
    if backend.hierarchical and path is not None:
        rows.append(parent_link_row())

    for record, cells in zip(records, table):
        rows.append(
            Row(
                RowRole.ENTRY,
                _join_cells(cells, widths),
                entry_id=_record_entry_id(backend, record, cells[0]),
                entry_class=backend.classify(record),
            )
        )
    return rows


__all__ = [
    "ERROR_CAUSES",
    "LOADING_TEXT",
    "PARENT_LINK_TEXT",
    "Row",
    "RowRole",
    "build_rows",
    "error_rows",
    "first_selectable_index",
    "loading_rows",
    "message_rows",
    "parent_link_row",
]
