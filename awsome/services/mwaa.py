"""MWAA backend: managed Airflow environments."""

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
    format_timestamp,
)

ENVIRONMENT_COLUMNS = (Column("Environment Name", 20),)


class MwaaService(ServiceBackend):
    kind = ServiceKind.MWAA

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        resp = call_aws("mwaa.list_environments", self.client.list_environments)
        return [{"Name": name} for name in resp.get("Environments", []) if name]

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return ENVIRONMENT_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        return (as_text(record.get("Name")),)

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("Name"), "")

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        resp = call_aws("mwaa.get_environment", self.client.get_environment, Name=entry_id)
        env = resp.get("Environment")
        if not env:
            raise BackendError("Environment not found")
        return [
            ("Name", as_text(env.get("Name"), "unknown")),
            ("ARN", as_text(env.get("Arn"), "unknown")),
            ("Status", as_text(env.get("Status"), "unknown")),
            ("Airflow Version", as_text(env.get("AirflowVersion"), "unknown")),
            ("Execution Role", as_text(env.get("ExecutionRoleArn"), "unknown")),
            ("Service Role", as_text(env.get("ServiceRoleArn"), "unknown")),
            ("KMS Key", as_text(env.get("KmsKey"), "None")),
            ("Webserver URL", as_text(env.get("WebserverUrl"), "unknown")),
            ("Created At", format_timestamp(env.get("CreatedAt"), "unknown")),
        ]
