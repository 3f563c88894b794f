"""IAM backend: users, with attached policies and groups in the detail view."""

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
    format_timestamp,
)

USER_COLUMNS = (Column("User Name", 20), Column("User ID", 20), Column("Creation Date", 0))


class IamService(ServiceBackend):
    kind = ServiceKind.IAM

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        resp = call_aws("iam.list_users", self.client.list_users)
        return list(resp.get("Users", []))

    def columns(self, path: str | None) -> tuple[Column, ...]:
        return USER_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        return (
            as_text(record.get("UserName")),
            as_text(record.get("UserId")),
            format_timestamp(record.get("CreateDate")),
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("UserName"), "")

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        user = call_aws("iam.get_user", self.client.get_user, UserName=entry_id).get("User", {})
        details: DetailPairs = [
            ("User Name", as_text(user.get("UserName"))),
            ("User ID", as_text(user.get("UserId"))),
            ("ARN", as_text(user.get("Arn"))),
            ("Path", as_text(user.get("Path"))),
            ("Creation Date", format_timestamp(user.get("CreateDate"))),
            ("Password Last Used", format_timestamp(user.get("PasswordLastUsed"), "Never")),
        ]

        policies = call_aws(
            "iam.list_attached_user_policies",
            self.client.list_attached_user_policies,
            UserName=entry_id,
        ).get("AttachedPolicies", [])
        names = [as_text(policy.get("PolicyName")) for policy in policies]
        details.append(("Attached Policies", ", ".join(names) if names else "None"))

        groups = call_aws(
            "iam.list_groups_for_user",
            self.client.list_groups_for_user,
            UserName=entry_id,
        ).get("Groups", [])
        group_names = [as_text(group.get("GroupName")) for group in groups]
        details.append(("Groups", ", ".join(group_names) if group_names else "None"))
        return details
