"""Notification system for the ECS alert relay.

Dispatches composed notifications to one or more channels (Slack, Email).

Exports:
    NotificationChannel      -- Abstract base for all channel implementations.
    NotificationDispatcher   -- Sends a notification to all registered
                                channels with isolated failure handling.
    ChannelDeliveryError     -- Raised by channels, contained by the dispatcher.
    SlackNotificationChannel -- Slack incoming-webhook channel.
    EmailNotificationChannel -- Amazon SES email channel.
    build_notification_dispatcher -- Factory used by the entry points.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from ecsrelay.notifications.email import EmailNotificationChannel, build_ses_client
from ecsrelay.notifications.manager import (
    ChannelDeliveryError,
    NotificationChannel,
    NotificationDispatcher,
)
from ecsrelay.notifications.slack import SlackNotificationChannel

if TYPE_CHECKING:
    from ecsrelay.models.config import NotificationConfig

_log = structlog.get_logger(component="notifications")

__all__ = [
    "ChannelDeliveryError",
    "EmailNotificationChannel",
    "NotificationChannel",
    "NotificationDispatcher",
    "SlackNotificationChannel",
    "build_notification_dispatcher",
]


def build_notification_dispatcher(
    config: NotificationConfig,
    ses_client_factory: Callable[[str, float], Any] = build_ses_client,
) -> NotificationDispatcher:
    """Build a NotificationDispatcher from the notification config.

    A channel is registered only when it is fully configured:

    Slack:
        ``slack_webhook_url`` is non-empty.

    Email:
        both ``sender_email`` and ``recipient_email`` are non-empty. The SES
        client is created for ``aws_region``.

    Unconfigured channels are skipped silently (debug log only).
    """
    channels: list[NotificationChannel] = []

    # --- Slack ---
    if config.slack_webhook_url:
        channels.append(
            SlackNotificationChannel(
                webhook_url=config.slack_webhook_url,
                timeout=config.timeout_seconds,
            )
        )
        _log.info("slack_channel_enabled")
    else:
        _log.debug("slack_channel_skipped", reason="webhook URL not configured")

    # --- Email ---
    if config.sender_email and config.recipient_email:
        client = ses_client_factory(config.aws_region, config.timeout_seconds)
        channels.append(
            EmailNotificationChannel(
                sender=config.sender_email,
                recipient=config.recipient_email,
                client=client,
            )
        )
        _log.info("email_channel_enabled", to=config.recipient_email, region=config.aws_region)
    else:
        _log.debug("email_channel_skipped", reason="sender or recipient not configured")

    if not channels:
        _log.info("no_notification_channels_configured")

    return NotificationDispatcher(channels=channels)
