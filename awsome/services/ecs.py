"""ECS backend: clusters at the root, then services, then tasks.

Paths are ``"cluster/"`` (services of a cluster) and ``"cluster/service/"``
(tasks of a service). Cluster and service names cannot contain ``/``.
"""

from __future__ import annotations

from typing import Any

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
    format_timestamp,
)

CLUSTER_COLUMNS = (Column("Cluster Name", 20),)
SERVICE_COLUMNS = (Column("Service Name", 20),)
TASK_COLUMNS = (
    Column("Task ID", 32),
    Column("Definition", 20),
    Column("Last Status", 12),
    Column("Desired", 12),
    Column("Started At", 0),
)
# describe_tasks accepts at most this many task ARNs per call.
MAX_DESCRIBE_TASKS = 100


def arn_name(arn: str) -> str:
    """Last ``/``-separated part of an ECS ARN (the resource name or id)."""
    return arn.rsplit("/", 1)[-1]


def split_ecs_path(path: str) -> tuple[str, str | None]:
    """Split ``"cluster/"`` or ``"cluster/service/"`` into its two levels."""
    cluster, _sep, rest = path.partition("/")
    service = rest.rstrip("/")
    return cluster, service or None


class EcsService(ServiceBackend):
    kind = ServiceKind.ECS
    hierarchical = True

    def __init__(self, client: Any) -> None:
        self.client = client

    def list(self, path: str | None) -> list[Record]:
        if path is None:
            return self.list_clusters()
        cluster, service = split_ecs_path(path)
        if service is None:
            return self.list_services(cluster)
        return self.list_tasks(cluster, service)

    def list_clusters(self) -> list[Record]:
        resp = call_aws("ecs.list_clusters", self.client.list_clusters)
        return [
            {"Kind": "cluster", "Name": arn_name(arn), "Arn": arn}
            for arn in resp.get("clusterArns", [])
        ]

    def list_services(self, cluster: str) -> list[Record]:
        resp = call_aws("ecs.list_services", self.client.list_services, cluster=cluster)
        return [
            {"Kind": "service", "Name": arn_name(arn), "Arn": arn}
            for arn in resp.get("serviceArns", [])
        ]

    def list_tasks(self, cluster: str, service: str) -> list[Record]:
        resp = call_aws(
            "ecs.list_tasks",
            self.client.list_tasks,
            cluster=cluster,
            serviceName=service,
        )
        task_arns = resp.get("taskArns", [])
        if not task_arns:
            return []
        described = call_aws(
            "ecs.describe_tasks",
            self.client.describe_tasks,
            cluster=cluster,
            tasks=task_arns[:MAX_DESCRIBE_TASKS],
        )
        records: list[Record] = []
        for task in described.get("tasks", []):
            records.append(
                {
                    "Kind": "task",
                    "Name": arn_name(task.get("taskArn") or "") or "unknown",
                    "Definition": arn_name(task.get("taskDefinitionArn") or "") or "unknown",
                    "LastStatus": task.get("lastStatus"),
                    "DesiredStatus": task.get("desiredStatus"),
                    "StartedAt": task.get("startedAt"),
                }
            )
        return records

    def columns(self, path: str | None) -> tuple[Column, ...]:
        if path is None:
            return CLUSTER_COLUMNS
        _cluster, service = split_ecs_path(path)
        return SERVICE_COLUMNS if service is None else TASK_COLUMNS

    def cells(self, record: Record) -> tuple[str, ...]:
        name = as_text(record.get("Name"))
        if record.get("Kind") != "task":
            return (name,)
        return (
            name,
            as_text(record.get("Definition"), "unknown"),
            as_text(record.get("LastStatus"), "unknown"),
            as_text(record.get("DesiredStatus"), "unknown"),
            format_timestamp(record.get("StartedAt"), "pending"),
        )

    def entry_id(self, record: Record) -> str:
        return as_text(record.get("Name"), "")

    def classify(self, record: Record) -> EntryClass:
        if record.get("Kind") == "task":
            return EntryClass.LEAF
        return EntryClass.CONTAINER

    def empty_message(self, path: str | None) -> str:
        if path is None:
            return "No ECS Clusters found"
        cluster, service = split_ecs_path(path)
        if service is None:
            return f"No Services found in cluster {cluster}"
        return f"No Tasks found in Service {service}"

    def describe(self, entry_id: str, path: str | None = None) -> DetailPairs:
        """Cluster details at the root; task details (``"service/task-id"``) below it."""
        if path is None:
            return self.get_cluster_details(entry_id)
        cluster, _service = split_ecs_path(path)
        return self.get_task_details(cluster, arn_name(entry_id))

    def get_cluster_details(self, name: str) -> DetailPairs:
        resp = call_aws("ecs.describe_clusters", self.client.describe_clusters, clusters=[name])
        clusters = resp.get("clusters", [])
        if not clusters:
            raise BackendError(f"Cluster {name} not found")
        cluster = clusters[0]
        return [
            ("Cluster Name", as_text(cluster.get("clusterName"))),
            ("ARN", as_text(cluster.get("clusterArn"))),
            ("Status", as_text(cluster.get("status"))),
            ("Active Services", as_text(cluster.get("activeServicesCount"), "0")),
            ("Running Tasks", as_text(cluster.get("runningTasksCount"), "0")),
            ("Pending Tasks", as_text(cluster.get("pendingTasksCount"), "0")),
            ("Container Instances", as_text(cluster.get("registeredContainerInstancesCount"), "0")),
        ]

    def get_task_details(self, cluster: str, task_id: str) -> DetailPairs:
        resp = call_aws(
            "ecs.describe_tasks",
            self.client.describe_tasks,
            cluster=cluster,
            tasks=[task_id],
        )
        tasks = resp.get("tasks", [])
        if not tasks:
            raise BackendError(f"Task {task_id} not found")
        task = tasks[0]
        return [
            ("Task ID", task_id),
            ("Task ARN", as_text(task.get("taskArn"))),
            ("Cluster", cluster),
            ("Definition", arn_name(task.get("taskDefinitionArn") or "") or "-"),
            ("Last Status", as_text(task.get("lastStatus"))),
            ("Desired Status", as_text(task.get("desiredStatus"))),
            ("Launch Type", as_text(task.get("launchType"))),
            ("CPU", as_text(task.get("cpu"))),
            ("Memory", as_text(task.get("memory"))),
            ("Started At", format_timestamp(task.get("startedAt"), "pending")),
            ("Stopped Reason", as_text(task.get("stoppedReason"))),
        ]
