"""Backend capability interface shared by every resource kind.

Each backend exposes two fetch operations (``list`` and ``describe``) plus
pure helpers the row model uses to lay records out as table rows.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, TypeVar

from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Record = Mapping[str, Any]
DetailPairs = list[tuple[str, str]]


class ServiceKind(enum.Enum):
    """Resource catalogs the browser knows how to page through."""

    EC2 = ("EC2 Instances", "EC2")
    S3 = ("S3 Buckets", "S3")
    IAM = ("IAM Users", "IAM")
    CLOUDWATCH = ("CloudWatch Alarms", "CloudWatch")
    DYNAMODB = ("DynamoDB Tables", "DynamoDB")
    ECS = ("ECS Clusters", "ECS")
    LAMBDA = ("Lambda Functions", "Lambda")
    MWAA = ("MWAA Environments", "MWAA")

    @property
    def display_name(self) -> str:
        return self.value[0]

    @property
    def short_name(self) -> str:
        return self.value[1]


class EntryClass(enum.Enum):
    """Whether an entry can be descended into or only inspected."""

    CONTAINER = "container"
    LEAF = "leaf"


class BackendError(Exception):
    """Any list/describe failure, collapsed to one human-readable message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


@dataclass(frozen=True)
class Column:
    """One table column: header label and minimum display width."""

    title: str
    min_width: int = 10


def format_size(size: int | None) -> str:
    """Format a byte count with 1024-based units and two decimals."""
    if size is None:
        return "0 B"
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024
    if size >= gb:
        return f"{size / gb:.2f} GB"
    if size >= mb:
        return f"{size / mb:.2f} MB"
    if size >= kb:
        return f"{size / kb:.2f} KB"
    return f"{size} B"


def format_timestamp(value: object, default: str = "Unknown") -> str:
    """Render boto3 datetimes (and anything else) as display strings."""
    if value is None or value == "":
        return default
    if isinstance(value, datetime):
        return value.replace(microsecond=0).isoformat()
    return str(value)


def as_text(value: object, default: str = "-") -> str:
    """Best-effort string conversion; never raises on odd record values."""
    if value is None:
        return default
    if isinstance(value, str):
        return value if value else default
    try:
        return str(value)
    except Exception:
        return default


def tag_value(tags: object, key: str, default: str = "-") -> str:
    """Look up ``key`` in an AWS ``[{"Key": ..., "Value": ...}]`` tag list."""
    if not isinstance(tags, list):
        return default
    for tag in tags:
        if isinstance(tag, Mapping) and tag.get("Key") == key:
            return as_text(tag.get("Value"), default)
    return default


def describe_error(exc: BaseException) -> str:
    """Return the message botocore attaches to ``exc`` (or its string form)."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {}) if isinstance(exc.response, Mapping) else {}
        message = error.get("Message") or ""
        code = error.get("Code") or ""
        if code and message:
            return f"{code}: {message}"
        if code or message:
            return code or message
    text = str(exc).strip()
    return text if text else exc.__class__.__name__


def call_aws(operation: str, func: Callable[..., T], **kwargs: Any) -> T:
    """Invoke one boto3 client method, converting botocore failures to ``BackendError``."""
    try:
        return func(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        message = describe_error(exc)
        logger.warning("%s failed: %s", operation, message)
        raise BackendError(message) from exc


class ServiceBackend:
    """Capability interface implemented once per resource kind.

    ``list`` and ``describe`` are the only operations that touch the network;
    they run on the fetch worker thread and must raise ``BackendError`` for
    every failure. The remaining methods are pure and used by the row model.
    """

    kind: ServiceKind
    hierarchical: bool = False

    def list(self, path: str | None) -> list[Record]:
        raise NotImplementedError

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        raise NotImplementedError

    def columns(self, path: str | None) -> tuple[Column, ...]:
        raise NotImplementedError

    def cells(self, record: Record) -> tuple[str, ...]:
        raise NotImplementedError

    def entry_id(self, record: Record) -> str:
        raise NotImplementedError

    def classify(self, record: Record) -> EntryClass:
        return EntryClass.LEAF

    def empty_message(self, path: str | None) -> str:
        return f"No {self.kind.display_name} found"


__all__ = [
    "BackendError",
    "Column",
    "DetailPairs",
    "EntryClass",
    "Record",
    "ServiceBackend",
    "ServiceKind",
    "as_text",
    "call_aws",
    "describe_error",
    "format_size",
    "format_timestamp",
    "tag_value",
]
