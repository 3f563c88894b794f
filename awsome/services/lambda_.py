"""Lambda backend: functions with runtime and last-modified time."""

from __future__ import annotations

from typing import Any

from .base import (
    BackendError,
    Column,
    DetailPairs,
    Record,
    ServiceBackend,
    ServiceKind,
    as_text,
    call_aws,
)

FUNCTION_COLUMNS = (Column("Function Name", 20), Column("Runtime", 10), Column("Last Modified", 0))


class LambdaService(ServiceBackend):
    kind = ServiceKind.LAMBDA

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        resp = call_aws("lambda.list_functions", self.client.list_functions)
        return [fn for fn in resp.get("Functions", []) if fn.get("FunctionName")]

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return FUNCTION_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        return (
            as_text(record.get("FunctionName")),
            as_text(record.get("Runtime"), "unknown"),
            as_text(record.get("LastModified"), "unknown"),
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("FunctionName"), "")

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        resp = call_aws("lambda.get_function", self.client.get_function, FunctionName=entry_id)
        config = resp.get("Configuration")
        if not config:
            raise BackendError("Function configuration not found")
        memory = config.get("MemorySize")
        timeout = config.get("Timeout")
        return [
            ("Name", as_text(config.get("FunctionName"), "unknown")),
            ("ARN", as_text(config.get("FunctionArn"), "unknown")),
            ("Runtime", as_text(config.get("Runtime"), "unknown")),
            ("Handler", as_text(config.get("Handler"), "unknown")),
            ("Description", config.get("Description") or ""),
            ("Memory Size", f"{memory} MB" if memory is not None else "unknown"),
            ("Timeout", f"{timeout} s" if timeout is not None else "unknown"),
            ("Last Modified", as_text(config.get("LastModified"), "unknown")),
            ("Role", as_text(config.get("Role"), "unknown")),
            ("State", as_text(config.get("State"), "unknown")),
        ]
