"""EC2 backend: one row per instance across all reservations."""

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
    tag_value,
)

INSTANCE_COLUMNS = (
    Column("Instance ID", 10),
    Column("Name", 20),
    Column("State", 10),
    Column("Type", 10),
    Column("Public IP", 0),
)


class Ec2Service(ServiceBackend):
    kind = ServiceKind.EC2

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        resp = call_aws("ec2.describe_instances", self.client.describe_instances)
        instances: list[Record] = []
        for reservation in resp.get("Reservations", []):
            instances.extend(reservation.get("Instances", []))
        return instances

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return INSTANCE_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        return (
            as_text(record.get("InstanceId"), "unknown"),
            tag_value(record.get("Tags"), "Name"),
            as_text((record.get("State") or {}).get("Name"), "unknown"),
            as_text(record.get("InstanceType"), "unknown"),
            as_text(record.get("PublicIpAddress")),
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("InstanceId"), "")

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        resp = call_aws(
            "ec2.describe_instances",
            self.client.describe_instances,
            InstanceIds=[entry_id],
        )
        instance = next(
            (
                candidate
                for reservation in resp.get("Reservations", [])
                for candidate in reservation.get("Instances", [])
            ),
            None,
        )
        if instance is None:
            raise BackendError(f"Instance {entry_id} not found")

        tags = instance.get("Tags") or []
        details: DetailPairs = [
            ("Instance ID", as_text(instance.get("InstanceId"))),
            ("Name", tag_value(tags, "Name")),
            ("State", as_text((instance.get("State") or {}).get("Name"))),
            ("Instance Type", as_text(instance.get("InstanceType"))),
            ("Availability Zone", as_text((instance.get("Placement") or {}).get("AvailabilityZone"))),
            ("Private IP", as_text(instance.get("PrivateIpAddress"))),
            ("Public IP", as_text(instance.get("PublicIpAddress"))),
            ("VPC", as_text(instance.get("VpcId"))),
            ("Subnet", as_text(instance.get("SubnetId"))),
            ("Image ID", as_text(instance.get("ImageId"))),
            ("Key Name", as_text(instance.get("KeyName"))),
            ("Launch Time", format_timestamp(instance.get("LaunchTime"))),
        ]
        for tag in tags:
            key = tag.get("Key")
            if key and key != "Name":
                details.append((f"Tag: {key}", as_text(tag.get("Value"), "")))
        return details
