"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from ecsrelay.models.config import (
    DEFAULT_BENIGN_STOP_REASONS,
    APIConfig,
    ClassifierConfig,
    LogConfig,
    NotificationConfig,
    RelayConfig,
)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"ECSRELAY_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float, min_val: float | None = None, max_val: float | None = None) -> float:
    val = float(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _split_csv(value: str) -> tuple[str, ...]:
    """Split a comma-separated value, trimming spaces and dropping empty items."""
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> RelayConfig:
    """Load configuration from the process environment.

    The notification and allowlist variables keep the plain names used by
    the Lambda deployment (``SLACK_WEBHOOK_URL``, ``MONITORED_SERVICES``, ...);
    relay tuning knobs are prefixed with ``ECSRELAY_``.
    """
    benign = _split_csv(_env("BENIGN_STOP_REASONS", ",".join(DEFAULT_BENIGN_STOP_REASONS)))
    return RelayConfig(
        monitored_services=frozenset(_split_csv(os.environ.get("MONITORED_SERVICES", ""))),
        classifier=ClassifierConfig(
            benign_stop_reasons=benign,
            strict_deployment_events=_env_bool("STRICT_DEPLOYMENT_EVENTS", False),
        ),
        notifications=NotificationConfig(
            slack_webhook_url=os.environ.get("SLACK_WEBHOOK_URL", ""),
            sender_email=os.environ.get("SENDER_EMAIL", ""),
            recipient_email=os.environ.get("RECIPIENT_EMAIL", ""),
            aws_region=os.environ.get("AWS_REGION", ""),
            timeout_seconds=_env_float("HTTP_TIMEOUT", 10.0, min_val=1.0, max_val=30.0),
        ),
        api=APIConfig(
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
