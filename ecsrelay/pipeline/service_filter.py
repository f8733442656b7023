"""Allowlist gate on resolved resource identifiers."""

from __future__ import annotations

from collections.abc import Iterable

from ecsrelay.observability.logging import get_logger

_log = get_logger("pipeline.service_filter")


class ServiceFilter:
    """Matches resource identifiers against the monitored-services allowlist.

    An empty allowlist monitors everything. Otherwise membership is exact
    and case-sensitive.
    """

    def __init__(self, monitored_services: Iterable[str] = ()) -> None:
        self._allowed = frozenset(monitored_services)

    @property
    def monitors_all(self) -> bool:
        return not self._allowed

    def allows(self, resource_identifier: str) -> bool:
        """Return True if alerts for *resource_identifier* may be dispatched."""
        if not self._allowed:
            return True
        if resource_identifier in self._allowed:
            return True
        _log.info("alert_skipped_not_monitored", service=resource_identifier)
        return False
