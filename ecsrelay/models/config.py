"""Configuration data structures.

All config objects are frozen: they are built once at process start and
shared read-only by every invocation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_BENIGN_STOP_REASONS: tuple[str, ...] = ("Scaling activity", "Service scheduler")


@dataclass(frozen=True)
class ClassifierConfig:
    """Failure classification settings."""

    benign_stop_reasons: tuple[str, ...] = DEFAULT_BENIGN_STOP_REASONS
    strict_deployment_events: bool = False


@dataclass(frozen=True)
class NotificationConfig:
    """Notification channel configuration.

    An empty webhook URL disables Slack; an empty sender or recipient
    disables email.
    """

    slack_webhook_url: str = ""
    sender_email: str = ""
    recipient_email: str = ""
    aws_region: str = ""
    timeout_seconds: float = 10.0


@dataclass(frozen=True)
class APIConfig:
    """REST API configuration."""

    port: int = 8080


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass(frozen=True)
class RelayConfig:
    """Top-level relay configuration."""

    monitored_services: frozenset[str] = frozenset()
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    notifications: NotificationConfig = field(default_factory=NotificationConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
