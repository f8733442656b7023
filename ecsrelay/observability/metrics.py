"""Prometheus counters for the relay.

Served by the REST runner at ``/metrics``. Under Lambda the counters live
only as long as the execution environment.
"""

from __future__ import annotations

from prometheus_client import Counter

events_total = Counter(
    "ecsrelay_events_total",
    "Processed events by category and outcome",
    ["category", "outcome"],
)

notifications_total = Counter(
    "ecsrelay_notifications_total",
    "Notification delivery attempts by channel and result",
    ["channel", "success"],
)

malformed_payloads_total = Counter(
    "ecsrelay_malformed_payloads_total",
    "Events rejected because the detail payload could not be decoded",
    ["category"],
)
