"""Email notification channel backed by Amazon SES.

Sends plain-text email through the SES ``SendEmail`` API. The boto3 call is
blocking, so it runs in a thread-pool executor to keep the event loop free.
"""

from __future__ import annotations

import asyncio
from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ecsrelay.models.alerts import Notification
from ecsrelay.notifications.manager import ChannelDeliveryError, NotificationChannel

_log = structlog.get_logger(component="notifications.email")


def build_ses_client(region: str = "", timeout: float = 10.0) -> Any:
    """Create an SES client with a bounded timeout and no automatic retries.

    An empty *region* falls back to the boto3 default resolution chain.
    """
    client_config = Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    return boto3.client("ses", region_name=region or None, config=client_config)


class EmailNotificationChannel(NotificationChannel):
    """Delivers notifications as plain-text email via SES.

    Args:
        sender:    Verified SES sender address.
        recipient: Destination address.
        client:    boto3 SES client (see ``build_ses_client``).
    """

    def __init__(self, sender: str, recipient: str, client: Any) -> None:
        if not sender:
            raise ValueError("Email sender must not be empty")
        if not recipient:
            raise ValueError("Email recipient must not be empty")
        self._sender = sender
        self._recipient = recipient
        self._client = client

    @property
    def channel_name(self) -> str:
        return "email"

    async def send(self, notification: Notification) -> None:
        loop = asyncio.get_running_loop()
        try:
            response = await loop.run_in_executor(None, self._send_sync, notification)
        except ClientError as exc:
            code = exc.response.get("Error", {}).get("Code", "Unknown")
            raise ChannelDeliveryError(self.channel_name, f"SES rejected message ({code}): {exc}") from exc
        except BotoCoreError as exc:
            raise ChannelDeliveryError(self.channel_name, str(exc)) from exc

        _log.debug("ses_message_accepted", message_id=response.get("MessageId", ""))

    def _send_sync(self, notification: Notification) -> dict[str, Any]:
        """Blocking SES call, run inside a thread executor."""
        return self._client.send_email(
            Source=self._sender,
            Destination={"ToAddresses": [self._recipient]},
            Message={
                "Subject": {"Data": notification.subject, "Charset": "UTF-8"},
                "Body": {"Text": {"Data": notification.body, "Charset": "UTF-8"}},
            },
        )
