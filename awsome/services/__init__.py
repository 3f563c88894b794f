"""Resource backends and the fixed service catalog."""

from __future__ import annotations

from .base import (
    BackendError,
    Column,
    EntryClass,
    ServiceBackend,
    ServiceKind,
    format_size,
)
from .client import AwsClient

# (kind, favorite by default), in picker order.
DEFAULT_CATALOG: tuple[tuple[ServiceKind, bool], ...] = (
    (ServiceKind.EC2, True),
    (ServiceKind.S3, True),
    (ServiceKind.IAM, False),
    (ServiceKind.CLOUDWATCH, False),
    (ServiceKind.DYNAMODB, False),
    (ServiceKind.ECS, False),
    (ServiceKind.LAMBDA, False),
    (ServiceKind.MWAA, False),
)

__all__ = [
    "AwsClient",
    "BackendError",
    "Column",
    "DEFAULT_CATALOG",
    "EntryClass",
    "ServiceBackend",
    "ServiceKind",
    "format_size",
]
