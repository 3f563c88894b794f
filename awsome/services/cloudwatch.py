"""CloudWatch backend: metric alarms."""

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

ALARM_COLUMNS = (Column("Alarm Name", 20), Column("State", 10), Column("Metric", 0))


class CloudwatchService(ServiceBackend):
    kind = ServiceKind.CLOUDWATCH

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        resp = call_aws("cloudwatch.describe_alarms", self.client.describe_alarms)
        return [alarm for alarm in resp.get("MetricAlarms", []) if alarm.get("AlarmName")]

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return ALARM_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        namespace = record.get("Namespace")
        metric = record.get("MetricName")
        metric_text = f"{namespace}/{metric}" if namespace and metric else as_text(metric)
        return (
            as_text(record.get("AlarmName")),
            as_text(record.get("StateValue"), "UNKNOWN"),
            metric_text,
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("AlarmName"), "")

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        resp = call_aws(
            "cloudwatch.describe_alarms",
            self.client.describe_alarms,
            AlarmNames=[entry_id],
        )
        alarms = resp.get("MetricAlarms", [])
        if not alarms:
            raise BackendError(f"Alarm {entry_id} not found")
        alarm = alarms[0]
        dimensions = ", ".join(
            f"{dim.get('Name')}={dim.get('Value')}" for dim in alarm.get("Dimensions", [])
        )
        threshold = alarm.get("Threshold")
        operator = alarm.get("ComparisonOperator")
        return [
            ("Alarm Name", as_text(alarm.get("AlarmName"))),
            ("State", as_text(alarm.get("StateValue"))),
            ("State Reason", as_text(alarm.get("StateReason"))),
            ("Namespace", as_text(alarm.get("Namespace"))),
            ("Metric", as_text(alarm.get("MetricName"))),
            ("Dimensions", dimensions or "None"),
            ("Statistic", as_text(alarm.get("Statistic"))),
            ("Condition", f"{operator} {threshold}" if operator else "-"),
            ("Period (s)", as_text(alarm.get("Period"))),
            ("Actions Enabled", as_text(alarm.get("ActionsEnabled"))),
            ("Last Updated", format_timestamp(alarm.get("StateUpdatedTimestamp"))),
        ]
