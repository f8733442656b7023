"""AWS Lambda entry point.

Configure the function handler as ``ecsrelay.handler.handler``. The EventBridge
rule targeting the function should match ``ECS Deployment State Change``
(failure events) and ``ECS Task State Change`` (``lastStatus`` STOPPED).

Configuration, logging and the notification clients are built once per
execution environment on the first invocation and reused while it stays warm.
"""

from __future__ import annotations

import asyncio
from functools import lru_cache
from typing import Any

from ecsrelay.config import load_config
from ecsrelay.notifications import build_notification_dispatcher
from ecsrelay.observability.logging import bind_invocation, setup_logging
from ecsrelay.pipeline.relay import AlertRelay


@lru_cache(maxsize=1)
def get_relay() -> AlertRelay:
    """Build the process-wide relay from the environment."""
    config = load_config()
    setup_logging(config.log.level)
    dispatcher = build_notification_dispatcher(config.notifications)
    return AlertRelay(config=config, dispatcher=dispatcher)


def handler(event: dict[str, Any], context: Any = None) -> dict[str, object]:
    """Process one EventBridge event.

    Raises:
        MalformedPayloadError: the event detail could not be decoded. Lambda
            records the invocation as failed so the async retry and
            dead-letter settings apply.
    """
    relay = get_relay()
    bind_invocation(context)
    result = asyncio.run(relay.process(event))
    return result.to_dict()
