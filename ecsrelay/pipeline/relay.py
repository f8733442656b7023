"""Per-event relay: normalize, classify, filter, dispatch.

``AlertRelay`` holds only immutable configuration and the dispatcher, so one
instance can be reused across invocations in a warm process.
"""

from __future__ import annotations

from typing import Any

import structlog

from ecsrelay.models.alerts import Notification, RelayOutcome, RelayResult
from ecsrelay.models.config import RelayConfig
from ecsrelay.models.events import EventCategory
from ecsrelay.notifications.manager import NotificationDispatcher
from ecsrelay.observability.metrics import events_total
from ecsrelay.pipeline.classifier import classify
from ecsrelay.pipeline.normalizer import build_envelope, normalize
from ecsrelay.pipeline.service_filter import ServiceFilter

_log = structlog.get_logger(component="pipeline.relay")


class AlertRelay:
    """Processes one EventBridge event start to finish.

    Raises ``MalformedPayloadError`` for undecodable events; every other
    outcome, including channel delivery failures, is reported in the
    returned ``RelayResult``.
    """

    def __init__(self, config: RelayConfig, dispatcher: NotificationDispatcher) -> None:
        self._config = config
        self._dispatcher = dispatcher
        self._filter = ServiceFilter(config.monitored_services)
        _log.info(
            "relay_configured",
            channels=dispatcher.channel_names,
            monitors_all_services=self._filter.monitors_all,
            monitored_services=sorted(config.monitored_services),
        )

    @property
    def channel_names(self) -> list[str]:
        return self._dispatcher.channel_names

    async def process(self, event: Any) -> RelayResult:
        envelope = build_envelope(event)
        log = _log.bind(detail_type=envelope.detail_type, event_id=envelope.event_id)
        log.info("event_received")

        detail = normalize(envelope)
        if detail is None:
            log.info("event_ignored", reason="unrecognized detail-type")
            return self._finish(envelope.category, RelayResult(outcome=RelayOutcome.IGNORED))

        result = classify(detail, self._config.classifier)
        service = result.resource_identifier

        if not self._filter.allows(service):
            return self._finish(
                envelope.category,
                RelayResult(outcome=RelayOutcome.FILTERED_OUT, resource_identifier=service),
            )

        if not result.is_alert:
            log.info("no_alert_conditions_met", service=service)
            return self._finish(
                envelope.category,
                RelayResult(outcome=RelayOutcome.NO_ALERT, resource_identifier=service),
            )

        log.info("alert_raised", service=service, subject=result.subject)
        notification = Notification(
            subject=result.subject,
            body=result.body,
            resource_identifier=service,
            category=envelope.category,
        )
        deliveries = await self._dispatcher.dispatch(notification)
        return self._finish(
            envelope.category,
            RelayResult(outcome=RelayOutcome.DISPATCHED, resource_identifier=service, deliveries=deliveries),
        )

    @staticmethod
    def _finish(category: EventCategory, result: RelayResult) -> RelayResult:
        events_total.labels(category=category.value, outcome=result.outcome.value).inc()
        return result
