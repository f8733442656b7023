"""Slack incoming-webhook notification channel.

Posts ``{"text": <body>}`` to the configured webhook URL. Slack renders the
``*bold*`` markers the classifier puts in the body.
"""

from __future__ import annotations

import httpx
import structlog

from ecsrelay.models.alerts import Notification
from ecsrelay.notifications.manager import ChannelDeliveryError, NotificationChannel

_log = structlog.get_logger(component="notifications.slack")


class SlackNotificationChannel(NotificationChannel):
    """Delivers notifications by POSTing a JSON payload to a Slack webhook.

    Args:
        webhook_url: Incoming webhook URL.
        timeout:     HTTP request timeout in seconds. Defaults to 10.
        transport:   Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("Slack webhook_url must not be empty")
        self._url = webhook_url
        self._timeout = timeout
        self._transport = transport

    @property
    def channel_name(self) -> str:
        return "slack"

    async def send(self, notification: Notification) -> None:
        """POST *notification* to the webhook; any non-2xx status is a failure."""
        payload = {"text": notification.body}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, json=payload)
        except httpx.TimeoutException as exc:
            raise ChannelDeliveryError(self.channel_name, "request timed out") from exc
        except httpx.HTTPError as exc:
            raise ChannelDeliveryError(self.channel_name, str(exc)) from exc

        if not response.is_success:
            _log.debug("slack_non_2xx_response", status_code=response.status_code, body=response.text[:200])
            raise ChannelDeliveryError(
                self.channel_name,
                f"received {response.status_code} response from Slack",
            )
