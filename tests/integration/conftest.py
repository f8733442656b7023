"""Shared fixtures for relay integration tests.

Provides EventBridge event factories and a relay wired to recording
channels so tests can exercise the full normalize → classify → filter →
dispatch pipeline without touching Slack or SES.
"""

from __future__ import annotations

from typing import Any

import pytest

from ecsrelay.models.alerts import Notification
from ecsrelay.models.config import RelayConfig
from ecsrelay.notifications.manager import ChannelDeliveryError, NotificationChannel, NotificationDispatcher
from ecsrelay.pipeline.relay import AlertRelay

_ACCOUNT = "123456789012"
_REGION = "us-east-1"

# ---------------------------------------------------------------------------
# Event factory helpers
# ---------------------------------------------------------------------------


def make_deployment_event(
    service: str = "checkout-svc",
    cluster: str = "prod",
    event_name: str = "SERVICE_DEPLOYMENT_FAILED",
    reason: str = "circuit breaker",
) -> dict[str, Any]:
    """Create an ``ECS Deployment State Change`` EventBridge event."""
    return {
        "version": "0",
        "id": f"deploy-{service}",
        "detail-type": "ECS Deployment State Change",
        "source": "aws.ecs",
        "account": _ACCOUNT,
        "region": _REGION,
        "resources": [f"arn:aws:ecs:{_REGION}:{_ACCOUNT}:service/{cluster}/{service}"],
        "detail": {
            "eventType": "ERROR",
            "eventName": event_name,
            "deploymentId": "ecs-svc/1234567890",
            "cluster": f"arn:aws:ecs:{_REGION}:{_ACCOUNT}:cluster/{cluster}",
            "service": f"arn:aws:ecs:{_REGION}:{_ACCOUNT}:service/{service}",
            "reason": reason,
        },
    }


def make_container(name: str = "app", exit_code: int | None = 0, reason: str = "") -> dict[str, Any]:
    container: dict[str, Any] = {
        "name": name,
        "image": f"{_ACCOUNT}.dkr.ecr.{_REGION}.amazonaws.com/{name}:1.4.2",
        "lastStatus": "STOPPED",
        "exitCode": exit_code,
    }
    if reason:
        container["reason"] = reason
    return container


def make_task_event(
    group: str = "service:checkout-svc",
    containers: list[dict[str, Any]] | None = None,
    stopped_reason: str = "",
    last_status: str = "STOPPED",
) -> dict[str, Any]:
    """Create an ``ECS Task State Change`` EventBridge event."""
    detail: dict[str, Any] = {
        "clusterArn": f"arn:aws:ecs:{_REGION}:{_ACCOUNT}:cluster/prod",
        "taskArn": f"arn:aws:ecs:{_REGION}:{_ACCOUNT}:task/prod/0a1b2c3d4e5f",
        "group": group,
        "lastStatus": last_status,
        "desiredStatus": "STOPPED",
        "containers": containers if containers is not None else [make_container()],
    }
    if stopped_reason:
        detail["stoppedReason"] = stopped_reason
    return {
        "version": "0",
        "id": f"task-{group}",
        "detail-type": "ECS Task State Change",
        "source": "aws.ecs",
        "account": _ACCOUNT,
        "region": _REGION,
        "detail": detail,
    }


# ---------------------------------------------------------------------------
# Channels
# ---------------------------------------------------------------------------


class RecordingChannel(NotificationChannel):
    """Channel that records deliveries, or fails with ChannelDeliveryError."""

    def __init__(self, name: str, fail: bool = False) -> None:
        self._name = name
        self._fail = fail
        self.sent: list[Notification] = []

    @property
    def channel_name(self) -> str:
        return self._name

    async def send(self, notification: Notification) -> None:
        if self._fail:
            raise ChannelDeliveryError(self._name, "simulated outage")
        self.sent.append(notification)


def make_relay(
    config: RelayConfig | None = None,
    slack_fails: bool = False,
    email_fails: bool = False,
) -> tuple[AlertRelay, RecordingChannel, RecordingChannel]:
    slack = RecordingChannel("slack", fail=slack_fails)
    email = RecordingChannel("email", fail=email_fails)
    dispatcher = NotificationDispatcher(channels=[slack, email])
    return AlertRelay(config=config or RelayConfig(), dispatcher=dispatcher), slack, email


@pytest.fixture()
def relay() -> tuple[AlertRelay, RecordingChannel, RecordingChannel]:
    """Relay monitoring every service, with two healthy channels."""
    return make_relay()
