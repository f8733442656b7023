"""REST routes: event ingest and health."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request

from ecsrelay.api.schemas import HealthResponse, RelayResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    from ecsrelay import __version__

    relay = request.app.state.relay
    return HealthResponse(version=__version__, channels=relay.channel_names)


@router.post("/events", response_model=RelayResponse)
async def relay_event(request: Request, event: dict[str, Any] = Body(...)) -> RelayResponse:
    """Relay one EventBridge event (the full envelope, including ``detail-type``)."""
    result = await request.app.state.relay.process(event)
    return RelayResponse(
        outcome=result.outcome.value,
        resource=result.resource_identifier,
        deliveries={name: status.value for name, status in result.deliveries.items()},
    )
