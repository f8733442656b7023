"""Failure classifier for decoded ECS detail records.

Decides whether a deployment or task event is alert-worthy and composes the
subject and body of the resulting notification. Classification is a pure
function of the record and the classifier settings.

Deployment events:
    The EventBridge rule upstream only forwards failure-class deployment
    events, so every deployment event alerts unless
    ``strict_deployment_events`` is set, in which case only
    ``SERVICE_DEPLOYMENT_FAILED`` alerts.

Task events:
    Only STOPPED tasks are evaluated. A non-zero container exit code alerts;
    failing that, a stop reason alerts unless it matches a benign pattern
    (scale-in or service-scheduler replacement).
"""

from __future__ import annotations

from ecsrelay.models.alerts import ClassificationResult
from ecsrelay.models.config import ClassifierConfig
from ecsrelay.models.events import DeploymentDetail, DetailRecord, TaskDetail

DEPLOYMENT_FAILED_EVENT = "SERVICE_DEPLOYMENT_FAILED"
TASK_STOPPED_STATUS = "STOPPED"
UNKNOWN_GROUP_SERVICE = "Unknown (Task run manually?)"


def get_resource_name(arn: str) -> str:
    """Return the last ``/`` segment of *arn*, or *arn* unchanged if it has none.

    ``arn:aws:ecs:us-east-1:123:service/my-service`` -> ``my-service``
    """
    return arn.rsplit("/", 1)[-1]


def get_service_name_from_group(group: str) -> str:
    """Extract the service name from a task group such as ``service:my-service``."""
    parts = group.split(":")
    if len(parts) > 1:
        return parts[1]
    return UNKNOWN_GROUP_SERVICE


def classify(detail: DetailRecord, config: ClassifierConfig | None = None) -> ClassificationResult:
    """Classify *detail* and compose its notification text."""
    config = config or ClassifierConfig()
    if isinstance(detail, DeploymentDetail):
        return _classify_deployment(detail, config)
    if isinstance(detail, TaskDetail):
        return _classify_task(detail, config)
    raise TypeError(f"Unsupported detail record: {type(detail).__name__}")


def _classify_deployment(detail: DeploymentDetail, config: ClassifierConfig) -> ClassificationResult:
    service_name = get_resource_name(detail.service)
    if config.strict_deployment_events and detail.event_name != DEPLOYMENT_FAILED_EVENT:
        return ClassificationResult(is_alert=False, subject="", body="", resource_identifier=service_name)

    body = (
        f"*Service:* {service_name}\n"
        f"*Event:* {detail.event_name}\n"
        f"*Reason:* {detail.reason}\n"
        f"*Cluster:* {get_resource_name(detail.cluster)}"
    )
    return ClassificationResult(
        is_alert=True,
        subject=f"ECS Service Rollback/Failure: {service_name}",
        body=body,
        resource_identifier=service_name,
    )


def _classify_task(detail: TaskDetail, config: ClassifierConfig) -> ClassificationResult:
    service_name = get_service_name_from_group(detail.group)
    no_alert = ClassificationResult(is_alert=False, subject="", body="", resource_identifier=service_name)
    if detail.last_status != TASK_STOPPED_STATUS:
        return no_alert

    lines = [
        f"- Container '{c.name}' exited with code {c.exit_code} ({c.reason})\n"
        for c in detail.containers
        if c.exit_code != 0
    ]
    # Tasks that never started have no exit codes, only a stop reason.
    if not lines and detail.stopped_reason and not _is_benign(detail.stopped_reason, config):
        lines.append(f"- Task stopped: {detail.stopped_reason}\n")

    if not lines:
        return no_alert

    body = f"*Service:* {service_name}\n*Task ARN:* {detail.task_arn}\n*Failure Details:*\n" + "".join(lines)
    return ClassificationResult(
        is_alert=True,
        subject=f"⚠️ ECS Task Failure: {service_name}",
        body=body,
        resource_identifier=service_name,
    )


def _is_benign(stopped_reason: str, config: ClassifierConfig) -> bool:
    return any(pattern in stopped_reason for pattern in config.benign_stop_reasons)
