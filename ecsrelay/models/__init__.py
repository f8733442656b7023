"""Core data structures for the ECS alert relay."""

from ecsrelay.models.alerts import (
    ClassificationResult,
    DeliveryStatus,
    Notification,
    RelayOutcome,
    RelayResult,
)
from ecsrelay.models.config import RelayConfig
from ecsrelay.models.events import (
    ContainerResult,
    DeploymentDetail,
    DetailRecord,
    EventCategory,
    EventEnvelope,
    TaskDetail,
)

__all__ = [
    "ClassificationResult",
    "ContainerResult",
    "DeliveryStatus",
    "DeploymentDetail",
    "DetailRecord",
    "EventCategory",
    "EventEnvelope",
    "Notification",
    "RelayConfig",
    "RelayOutcome",
    "RelayResult",
    "TaskDetail",
]
