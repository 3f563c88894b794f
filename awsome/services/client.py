"""AWS connection: one boto3 session feeding every resource backend."""

from __future__ import annotations

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .base import BackendError, ServiceBackend, ServiceKind, describe_error
from .cloudwatch import CloudwatchService
from .dynamodb import DynamoDbService
from .ec2 import Ec2Service
from .ecs import EcsService
from .iam import IamService
from .lambda_ import LambdaService
from .mwaa import MwaaService
from .s3 import S3Service

logger = logging.getLogger(__name__)


class AwsClient:
    """Registry of per-kind backends sharing a single boto3 session."""

    def __init__(self, backends: dict[ServiceKind, ServiceBackend]) -> None:
        self._backends = dict(backends)

    @classmethod
    def connect(cls, profile: str | None = None, region: str | None = None) -> AwsClient:
        """Create clients for every catalog kind.

        Raises ``BackendError`` when the session cannot be built (unknown
        profile, missing region, malformed shared config, ...).
        """
        try:
            session = boto3.Session(profile_name=profile, region_name=region)
            backends: dict[ServiceKind, ServiceBackend] = {
                ServiceKind.EC2: Ec2Service(session.client("ec2")),
                ServiceKind.S3: S3Service(session.client("s3")),
                ServiceKind.IAM: IamService(session.client("iam")),
                ServiceKind.CLOUDWATCH: CloudwatchService(session.client("cloudwatch")),
                ServiceKind.DYNAMODB: DynamoDbService(session.client("dynamodb")),
                ServiceKind.ECS: EcsService(session.client("ecs")),
                ServiceKind.LAMBDA: LambdaService(session.client("lambda")),
                ServiceKind.MWAA: MwaaService(session.client("mwaa")),
            }
        except (BotoCoreError, ClientError) as exc:
            message = describe_error(exc)
            logger.error("AWS session setup failed: %s", message)
            raise BackendError(message) from exc
        logger.info(
            "AWS session ready (profile=%s, region=%s)",
            session.profile_name,
            session.region_name,
        )
        return cls(backends)

    def backend(self, kind: ServiceKind) -> ServiceBackend:
        return self._backends[kind]
