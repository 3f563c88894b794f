"""DynamoDB backend: tables with status, item count, and size."""

from __future__ import annotations

from typing import Any

from .base import (
    Column,
    DetailPairs,
    Record,
    ServiceBackend,
    ServiceKind,
    as_text,
    call_aws,
    format_size,
    format_timestamp,
)

TABLE_COLUMNS = (
    Column("Table Name", 20),
    Column("Status", 10),
    Column("Items", 8),
    Column("Size", 0),
)


class DynamoDbService(ServiceBackend):
    kind = ServiceKind.DYNAMODB

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        """List table names, then describe each one for the summary columns."""
        names = call_aws("dynamodb.list_tables", self.client.list_tables).get("TableNames", [])
        tables: list[Record] = []
        for name in names:
            table = call_aws(
                "dynamodb.describe_table",
                self.client.describe_table,
                TableName=name,
            ).get("Table", {})
            tables.append(table or {"TableName": name})
        return tables

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return TABLE_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        size = record.get("TableSizeBytes")
        return (
            as_text(record.get("TableName")),
            as_text(record.get("TableStatus"), "UNKNOWN"),
            as_text(record.get("ItemCount"), "0"),
            format_size(size) if isinstance(size, int) else "-",
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("TableName"), "")

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        table = call_aws(
            "dynamodb.describe_table",
            self.client.describe_table,
            TableName=entry_id,
        ).get("Table", {})
        details: DetailPairs = [
            ("Table Name", as_text(table.get("TableName"), "")),
            ("Status", as_text(table.get("TableStatus"), "")),
            ("Item Count", str(table.get("ItemCount", 0))),
            ("Size (Bytes)", str(table.get("TableSizeBytes", 0))),
            ("Creation Date", format_timestamp(table.get("CreationDateTime"), "")),
        ]
        key_schema = table.get("KeySchema")
        if key_schema:
            keys = [f"{key.get('AttributeName')} ({key.get('KeyType')})" for key in key_schema]
            details.append(("Key Schema", ", ".join(keys)))
        for label, field in (
            ("Global Secondary Indexes", "GlobalSecondaryIndexes"),
            ("Local Secondary Indexes", "LocalSecondaryIndexes"),
        ):
            indexes = [as_text(index.get("IndexName"), "?") for index in table.get(field) or []]
            if indexes:
                details.append((label, ", ".join(indexes)))
        return details
