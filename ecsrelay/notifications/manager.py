"""Notification dispatcher for the ECS alert relay.

NotificationChannel    -- ABC every channel must implement.
ChannelDeliveryError   -- Raised by a channel when its delivery fails.
NotificationDispatcher -- Fans out a notification to all registered channels;
                          a failure in one channel never blocks the others or
                          fails the invocation.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

import structlog

from ecsrelay.models.alerts import DeliveryStatus, Notification
from ecsrelay.observability.metrics import notifications_total

_log = structlog.get_logger(component="notifications.manager")


class ChannelDeliveryError(Exception):
    """A single channel failed to deliver a notification.

    Contained by the dispatcher: logged, counted, never propagated.
    """

    def __init__(self, channel: str, reason: str) -> None:
        super().__init__(f"{channel} delivery failed: {reason}")
        self.channel = channel
        self.reason = reason


class NotificationChannel(ABC):
    """Abstract base class for all notification channels.

    Concrete channels raise ``ChannelDeliveryError`` on any delivery failure
    and perform exactly one attempt per call.
    """

    @property
    @abstractmethod
    def channel_name(self) -> str:
        """Human-readable channel identifier used in metrics and logs."""

    @abstractmethod
    async def send(self, notification: Notification) -> None:
        """Deliver *notification* via this channel.

        Raises:
            ChannelDeliveryError: the remote endpoint rejected the message or
                could not be reached.
        """


class NotificationDispatcher:
    """Fan-out dispatcher that sends a notification to every registered channel.

    * Never raises for channel failures: each channel's exception is caught
      and logged independently.
    * Channels run concurrently; the call returns once every channel has
      finished so that a short-lived invocation does not exit mid-delivery.
    """

    def __init__(self, channels: list[NotificationChannel]) -> None:
        self._channels = channels

    @property
    def channel_names(self) -> list[str]:
        return [channel.channel_name for channel in self._channels]

    async def dispatch(self, notification: Notification) -> dict[str, DeliveryStatus]:
        """Deliver *notification* to every channel concurrently.

        Returns:
            Mapping of channel name to its delivery status.
        """
        if not self._channels:
            _log.info("notification_not_sent", reason="no channels configured")
            return {}
        statuses = await asyncio.gather(*(self._send_one(channel, notification) for channel in self._channels))
        return {channel.channel_name: status for channel, status in zip(self._channels, statuses, strict=True)}

    async def _send_one(self, channel: NotificationChannel, notification: Notification) -> DeliveryStatus:
        """Deliver to a single channel, recording metrics regardless of outcome."""
        try:
            await channel.send(notification)
            status = DeliveryStatus.SENT
        except ChannelDeliveryError as exc:
            _log.warning(
                "notification_failed",
                channel=channel.channel_name,
                service=notification.resource_identifier,
                error=exc.reason,
            )
            status = DeliveryStatus.FAILED
        except Exception as exc:  # noqa: BLE001
            _log.error(
                "notification_channel_unexpected_error",
                channel=channel.channel_name,
                service=notification.resource_identifier,
                error=str(exc),
            )
            status = DeliveryStatus.FAILED

        label = "true" if status is DeliveryStatus.SENT else "false"
        notifications_total.labels(channel=channel.channel_name, success=label).inc()

        if status is DeliveryStatus.SENT:
            _log.info(
                "notification_sent",
                channel=channel.channel_name,
                service=notification.resource_identifier,
                category=notification.category.value,
            )
        return status
