"""Classification and notification data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ecsrelay.models.events import EventCategory


@dataclass(frozen=True)
class ClassificationResult:
    """Output of the classifier.

    ``subject`` and ``body`` are empty when ``is_alert`` is False.
    ``resource_identifier`` is always resolved.
    """

    is_alert: bool
    subject: str
    body: str
    resource_identifier: str


@dataclass(frozen=True)
class Notification:
    """Unit of outbound work, sent once per configured channel."""

    subject: str
    body: str
    resource_identifier: str = ""
    category: EventCategory = EventCategory.UNKNOWN


class DeliveryStatus(StrEnum):
    """Per-channel delivery outcome."""

    SENT = "sent"
    FAILED = "failed"


class RelayOutcome(StrEnum):
    """How a single invocation ended."""

    DISPATCHED = "dispatched"
    NO_ALERT = "no_alert"
    FILTERED_OUT = "filtered_out"
    IGNORED = "ignored"


@dataclass
class RelayResult:
    """Summary returned to the trigger for one processed event."""

    outcome: RelayOutcome
    resource_identifier: str = ""
    deliveries: dict[str, DeliveryStatus] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "outcome": self.outcome.value,
            "resource": self.resource_identifier,
            "deliveries": {name: status.value for name, status in self.deliveries.items()},
        }
