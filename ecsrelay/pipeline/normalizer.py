"""Event normalizer.

Turns a raw EventBridge event into an ``EventEnvelope`` and decodes the
envelope's opaque ``detail`` into the typed record for its category.
Unknown categories are not an error: they decode to ``None``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NoReturn

from pydantic import ValidationError

from ecsrelay.models.events import (
    DeploymentDetail,
    DetailRecord,
    EventCategory,
    EventEnvelope,
    TaskDetail,
)
from ecsrelay.observability.logging import get_logger
from ecsrelay.observability.metrics import malformed_payloads_total

_log = get_logger("pipeline.normalizer")

_DETAIL_MODELS: dict[EventCategory, type[DeploymentDetail] | type[TaskDetail]] = {
    EventCategory.DEPLOYMENT_STATE_CHANGE: DeploymentDetail,
    EventCategory.TASK_STATE_CHANGE: TaskDetail,
}


class MalformedPayloadError(Exception):
    """Raised when an event or its detail payload does not match the expected schema.

    Aborts the invocation; callers must let it propagate so the trigger can
    surface or retry the event.
    """

    def __init__(self, category: EventCategory, detail: str) -> None:
        super().__init__(f"Malformed {category.value} payload: {detail}")
        self.category = category
        self.detail = detail


def build_envelope(event: Any) -> EventEnvelope:
    """Build an envelope from an EventBridge event mapping.

    A missing or non-string ``detail-type`` yields an ``UNKNOWN`` envelope
    with an empty ``detail_type``, which the relay ignores.

    Raises:
        MalformedPayloadError: if *event* is not a mapping.
    """
    if not isinstance(event, Mapping):
        raise MalformedPayloadError(
            EventCategory.UNKNOWN,
            f"event must be an object, got {type(event).__name__}",
        )
    detail_type = event.get("detail-type")
    if not isinstance(detail_type, str):
        detail_type = ""
    return EventEnvelope(
        category=EventCategory.from_detail_type(detail_type),
        detail_type=detail_type,
        detail=event.get("detail"),
        event_id=str(event.get("id") or ""),
        source=str(event.get("source") or ""),
        region=str(event.get("region") or ""),
    )


def normalize(envelope: EventEnvelope) -> DetailRecord | None:
    """Decode *envelope.detail* into the record matching its category.

    The payload may be an already-parsed mapping or raw JSON (``str`` or
    ``bytes``).

    Returns:
        ``DeploymentDetail`` or ``TaskDetail``; ``None`` for unknown categories.

    Raises:
        MalformedPayloadError: if the payload cannot be decoded.
    """
    model = _DETAIL_MODELS.get(envelope.category)
    if model is None:
        _log.debug("event_category_ignored", detail_type=envelope.detail_type)
        return None

    payload = envelope.detail
    try:
        if isinstance(payload, (str, bytes, bytearray)):
            return model.model_validate_json(payload)
        if isinstance(payload, Mapping):
            return model.model_validate(dict(payload))
    except ValidationError as exc:
        _fail(envelope, _summarize(exc))

    _fail(envelope, f"detail must be a JSON object, got {type(payload).__name__}")


def _fail(envelope: EventEnvelope, reason: str) -> NoReturn:
    malformed_payloads_total.labels(category=envelope.category.value).inc()
    _log.error(
        "malformed_payload",
        detail_type=envelope.detail_type,
        event_id=envelope.event_id,
        error=reason,
    )
    raise MalformedPayloadError(envelope.category, reason)


def _summarize(exc: ValidationError) -> str:
    """Condense pydantic errors into ``loc: msg`` pairs."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
        parts.append(f"{loc}: {err.get('msg', '')}")
    return "; ".join(parts)
