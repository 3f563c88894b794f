"""S3 backend: buckets at the root, prefixes and objects below them.

This is the only hierarchical resource kind. Navigation paths look like
``"bucket/"`` or ``"bucket/folder/sub/"``; everything after the first
segment is the object-key prefix listed with a ``/`` delimiter.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from .base import (
    BackendError,
    Column,
    DetailPairs,
    EntryClass,
    Record,
    ServiceBackend,
    ServiceKind,
    as_text,
    call_aws,
    describe_error,
    format_size,
    format_timestamp,
)

logger = logging.getLogger(__name__)

BUCKET_COLUMNS = (Column("Bucket Name", 20), Column("Creation Date", 0))
OBJECT_COLUMNS = (Column("Name", 20), Column("Size", 10), Column("Last Modified", 0))
DIR_SIZE_LABEL = "DIR"
MAX_DETAIL_TAGS = 3


def split_bucket_path(path: str) -> tuple[str, str]:
    """Split ``"bucket/a/b/"`` into ``("bucket", "a/b/")``."""
    bucket, _sep, prefix = path.partition("/")
    return bucket, prefix


class S3Service(ServiceBackend):
    kind = ServiceKind.S3
    hierarchical = True

    def __init__(self, client: Any) -> None:
        self.client = client

    # Listing

    def list(self, path: str | None) -> list[Record]:
        if path is None:
            return self.list_buckets()
        bucket, prefix = split_bucket_path(path)
        return self.list_objects(bucket, prefix)

    def list_buckets(self) -> list[Record]:
        resp = call_aws("s3.list_buckets", self.client.list_buckets)
        records: list[Record] = []
        for bucket in resp.get("Buckets", []):
            name = bucket.get("Name")
            if not name:
                continue
            records.append(
                {
                    "Kind": "bucket",
                    "Name": name,
                    "CreationDate": bucket.get("CreationDate"),
                }
            )
        return records

    def list_objects(self, bucket: str, prefix: str) -> list[Record]:
        """List one delimiter level: common prefixes first, then objects.

        Names are made relative to ``prefix``; the zero-byte placeholder object
        some tools create for the prefix itself is skipped.
        """
        kwargs: dict[str, Any] = {"Bucket": bucket, "Delimiter": "/"}
        if prefix:
            kwargs["Prefix"] = prefix
        resp = call_aws("s3.list_objects_v2", self.client.list_objects_v2, **kwargs)

        records: list[Record] = []
        for common in resp.get("CommonPrefixes", []):
            folder = common.get("Prefix")
            if not folder:
                continue
            records.append(
                {
                    "Kind": "prefix",
                    "Name": _relative_name(folder, prefix),
                    "Key": folder,
                    "Size": None,
                    "LastModified": None,
                }
            )
        for obj in resp.get("Contents", []):
            key = obj.get("Key")
            if not key or key == prefix:
                continue
            records.append(
                {
                    "Kind": "object",
                    "Name": _relative_name(key, prefix),
                    "Key": key,
                    "Size": obj.get("Size", 0),
                    "LastModified": obj.get("LastModified"),
                }
            )
        return records

    # Row layout

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return BUCKET_COLUMNS if path is None else OBJECT_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        name = as_text(record.get("Name"))
        if record.get("Kind") == "bucket":
            return (name, format_timestamp(record.get("CreationDate")))
        if record.get("Kind") == "prefix":
            return (name, DIR_SIZE_LABEL, "")
        return (
            name,
            format_size(record.get("Size") or 0),
            format_timestamp(record.get("LastModified")),
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("Name"), "")

    def classify(self, record: Record) -> EntryClass:
        if record.get("Kind") == "object":
            return EntryClass.LEAF
        return EntryClass.CONTAINER

    def empty_message(self, path: str | None) -> str:
        if path is None:
            return "No S3 Buckets found"
        return f"No objects found in s3://{path}"

    # Details

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        if path is None:
            return self.get_bucket_details(entry_id)
        bucket, _prefix = split_bucket_path(path)
        return self.get_object_details(bucket, entry_id)

    def get_bucket_details(self, bucket_name: str) -> DetailPairs:
        """Collect bucket attributes; each sub-call failure degrades into its value."""
        details: DetailPairs = [("Bucket Name", bucket_name)]

        try:
            location = self.client.get_bucket_location(Bucket=bucket_name)
            details.append(("Region", location.get("LocationConstraint") or "us-east-1"))
        except (ClientError, BotoCoreError) as exc:
            details.append(("Region", f"Error: {describe_error(exc)}"))

        try:
            versioning = self.client.get_bucket_versioning(Bucket=bucket_name)
            details.append(("Versioning", versioning.get("Status") or "Disabled"))
        except (ClientError, BotoCoreError) as exc:
            details.append(("Versioning", f"Error: {describe_error(exc)}"))

        try:
            encryption = self.client.get_bucket_encryption(Bucket=bucket_name)
            rules = encryption.get("ServerSideEncryptionConfiguration", {}).get("Rules", [])
            if rules:
                default = rules[0].get("ApplyServerSideEncryptionByDefault")
                algorithm = default.get("SSEAlgorithm") if default else None
                details.append(("Encryption", algorithm or "Unknown"))
            else:
                details.append(("Encryption", "None"))
        except (ClientError, BotoCoreError):
            details.append(("Encryption", "None"))

        try:
            acl = self.client.get_bucket_acl(Bucket=bucket_name)
            details.append(("ACL Grants", f"{len(acl.get('Grants', []))} grant(s)"))
            owner = acl.get("Owner", {}).get("DisplayName")
            if owner:
                details.append(("Owner", owner))
        except (ClientError, BotoCoreError) as exc:
            details.append(("ACL", f"Error: {describe_error(exc)}"))

        try:
            pab = self.client.get_public_access_block(Bucket=bucket_name)
            config = pab.get("PublicAccessBlockConfiguration")
            if config is not None:
                all_blocked = all(
                    config.get(flag, False)
                    for flag in (
                        "BlockPublicAcls",
                        "IgnorePublicAcls",
                        "BlockPublicPolicy",
                        "RestrictPublicBuckets",
                    )
                )
                details.append(("Public Access", "All Blocked" if all_blocked else "Partially Blocked"))
        except (ClientError, BotoCoreError):
            details.append(("Public Access", "Unknown"))

        try:
            tagging = self.client.get_bucket_tagging(Bucket=bucket_name)
            tag_set = tagging.get("TagSet", [])
            details.append(("Tags", f"{len(tag_set)} tag(s)"))
            for idx, tag in enumerate(tag_set[:MAX_DETAIL_TAGS]):
                details.append((f"  Tag {idx + 1}", f"{tag.get('Key', '')} = {tag.get('Value', '')}"))
        except (ClientError, BotoCoreError):
            details.append(("Tags", "None"))

        return details

    def get_object_details(self, bucket: str, key: str) -> DetailPairs:
        details: DetailPairs = [("Name", key)]
        try:
            head = self.client.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as exc:
            message = describe_error(exc)
            logger.warning("s3.head_object failed for s3://%s/%s: %s", bucket, key, message)
            raise BackendError(f"Failed to get object details: {message}") from exc
        if head.get("ContentLength") is not None:
            details.append(("Size", format_size(head["ContentLength"])))
        if head.get("LastModified") is not None:
            details.append(("Last Modified", format_timestamp(head["LastModified"])))
        if head.get("ETag"):
            details.append(("ETag", head["ETag"]))
        details.append(("Storage Class", head.get("StorageClass") or "STANDARD"))
        if head.get("ContentType"):
            details.append(("Content Type", head["ContentType"]))
        return details


def _relative_name(key: str, prefix: str) -> str:
    if prefix and key.startswith(prefix):
        return key[len(prefix):]
    return key
