"""Integration tests for the full relay pipeline.

Each test exercises: EventBridge event -> normalize -> classify -> service
filter -> dispatch to recording channels -> RelayResult.
"""

from __future__ import annotations

import json

import pytest
from structlog.testing import capture_logs

from ecsrelay.models.alerts import DeliveryStatus, RelayOutcome
from ecsrelay.models.config import ClassifierConfig, RelayConfig
from ecsrelay.models.events import EventCategory
from ecsrelay.pipeline.normalizer import MalformedPayloadError
from ecsrelay.pipeline.relay import AlertRelay

from .conftest import (
    RecordingChannel,
    make_container,
    make_deployment_event,
    make_relay,
    make_task_event,
)

pytestmark = pytest.mark.integration

RelayFixture = tuple[AlertRelay, RecordingChannel, RecordingChannel]

# ---------------------------------------------------------------------------
# Deployment failures
# ---------------------------------------------------------------------------


class TestDeploymentPipeline:
    async def test_failed_deployment_is_relayed(self) -> None:
        relay, slack, email = make_relay()

        result = await relay.process(make_deployment_event())

        assert result.outcome is RelayOutcome.DISPATCHED
        assert result.resource_identifier == "checkout-svc"
        assert result.deliveries == {"slack": DeliveryStatus.SENT, "email": DeliveryStatus.SENT}
        notification = email.sent[0]
        assert notification.subject == "ECS Service Rollback/Failure: checkout-svc"
        assert notification.category is EventCategory.DEPLOYMENT_STATE_CHANGE
        assert "*Cluster:* prod" in notification.body
        assert slack.sent == email.sent

    async def test_strict_mode_drops_successful_deployment(self) -> None:
        config = RelayConfig(classifier=ClassifierConfig(strict_deployment_events=True))
        relay, slack, email = make_relay(config)

        result = await relay.process(make_deployment_event(event_name="SERVICE_DEPLOYMENT_COMPLETED"))

        assert result.outcome is RelayOutcome.NO_ALERT
        assert slack.sent == [] and email.sent == []


# ---------------------------------------------------------------------------
# Task failures
# ---------------------------------------------------------------------------


class TestTaskPipeline:
    async def test_crashed_task_is_relayed(self) -> None:
        relay, slack, _ = make_relay()
        event = make_task_event(containers=[make_container("app", 137, "OOMKilled")])

        result = await relay.process(event)

        assert result.outcome is RelayOutcome.DISPATCHED
        assert slack.sent[0].subject == "⚠️ ECS Task Failure: checkout-svc"
        assert "Container 'app' exited with code 137" in slack.sent[0].body

    async def test_scale_in_is_not_relayed(self) -> None:
        relay, slack, email = make_relay()
        event = make_task_event(
            containers=[make_container("app", 0), make_container("envoy", 0)],
            stopped_reason="Scaling activity initiated by (deployment ecs-svc/1234567890)",
        )

        result = await relay.process(event)

        assert result.outcome is RelayOutcome.NO_ALERT
        assert result.resource_identifier == "checkout-svc"
        assert slack.sent == [] and email.sent == []

    async def test_task_that_never_started_is_relayed(self) -> None:
        relay, slack, _ = make_relay()
        event = make_task_event(
            containers=[make_container("app", None)],
            stopped_reason="ResourceInitializationError: unable to pull secrets or registry auth",
        )

        result = await relay.process(event)

        assert result.outcome is RelayOutcome.DISPATCHED
        assert "- Task stopped: ResourceInitializationError" in slack.sent[0].body

    async def test_pending_task_is_ignored(self) -> None:
        relay, slack, _ = make_relay()

        result = await relay.process(make_task_event(containers=[make_container("app", 1)], last_status="PENDING"))

        assert result.outcome is RelayOutcome.NO_ALERT
        assert slack.sent == []

    async def test_detail_as_json_string(self) -> None:
        relay, slack, _ = make_relay()
        event = make_task_event(containers=[make_container("app", 1, "Essential container exited")])
        event["detail"] = json.dumps(event["detail"])

        result = await relay.process(event)

        assert result.outcome is RelayOutcome.DISPATCHED
        assert len(slack.sent) == 1


# ---------------------------------------------------------------------------
# Allowlist
# ---------------------------------------------------------------------------


class TestServiceFilterPipeline:
    def test_startup_log_reports_allowlist_mode(self) -> None:
        with capture_logs() as logs:
            make_relay(RelayConfig(monitored_services=frozenset({"checkout-svc"})))
            make_relay()

        configured = [entry for entry in logs if entry["event"] == "relay_configured"]
        assert [entry["monitors_all_services"] for entry in configured] == [False, True]
        assert configured[0]["monitored_services"] == ["checkout-svc"]

    async def test_service_outside_allowlist_is_skipped(self) -> None:
        config = RelayConfig(monitored_services=frozenset({"checkout-svc"}))
        relay, slack, email = make_relay(config)
        event = make_task_event(group="service:billing-svc", containers=[make_container("app", 1)])

        result = await relay.process(event)

        assert result.outcome is RelayOutcome.FILTERED_OUT
        assert result.resource_identifier == "billing-svc"
        assert result.deliveries == {}
        assert slack.sent == [] and email.sent == []

    async def test_service_in_allowlist_is_relayed(self) -> None:
        config = RelayConfig(monitored_services=frozenset({"checkout-svc", "billing-svc"}))
        relay, slack, _ = make_relay(config)

        result = await relay.process(make_deployment_event(service="billing-svc"))

        assert result.outcome is RelayOutcome.DISPATCHED
        assert len(slack.sent) == 1

    async def test_manual_task_is_filtered_when_allowlist_set(self) -> None:
        config = RelayConfig(monitored_services=frozenset({"checkout-svc"}))
        relay, slack, _ = make_relay(config)
        event = make_task_event(group="manual", containers=[make_container("app", 1)])

        result = await relay.process(event)

        assert result.outcome is RelayOutcome.FILTERED_OUT
        assert result.resource_identifier == "Unknown (Task run manually?)"


# ---------------------------------------------------------------------------
# Channel isolation
# ---------------------------------------------------------------------------


class TestChannelIsolation:
    async def test_chat_outage_still_delivers_email_once(self) -> None:
        relay, slack, email = make_relay(slack_fails=True)

        result = await relay.process(make_deployment_event())

        assert result.outcome is RelayOutcome.DISPATCHED
        assert result.deliveries == {"slack": DeliveryStatus.FAILED, "email": DeliveryStatus.SENT}
        assert len(email.sent) == 1

    async def test_email_outage_still_delivers_chat_once(self) -> None:
        relay, slack, email = make_relay(email_fails=True)

        result = await relay.process(make_deployment_event())

        assert result.deliveries == {"slack": DeliveryStatus.SENT, "email": DeliveryStatus.FAILED}
        assert len(slack.sent) == 1

    async def test_all_channels_down_is_still_a_processed_event(self) -> None:
        relay, _, _ = make_relay(slack_fails=True, email_fails=True)

        result = await relay.process(make_deployment_event())

        assert result.outcome is RelayOutcome.DISPATCHED
        assert set(result.deliveries.values()) == {DeliveryStatus.FAILED}


# ---------------------------------------------------------------------------
# Unrecognized and malformed events
# ---------------------------------------------------------------------------


class TestEventRejection:
    async def test_unknown_category_short_circuits(self, relay: RelayFixture) -> None:
        alert_relay, slack, email = relay

        result = await alert_relay.process({"detail-type": "ECS Container Instance State Change", "detail": {}})

        assert result.outcome is RelayOutcome.IGNORED
        assert slack.sent == [] and email.sent == []

    async def test_event_without_detail_type_is_ignored(self, relay: RelayFixture) -> None:
        alert_relay, slack, email = relay

        result = await alert_relay.process({"detail": {}})

        assert result.outcome is RelayOutcome.IGNORED
        assert slack.sent == [] and email.sent == []

    @pytest.mark.parametrize("exit_code", ["137", True, 1.0])
    async def test_coercible_exit_code_is_malformed(self, relay: RelayFixture, exit_code: object) -> None:
        alert_relay, slack, _ = relay
        event = make_task_event()
        event["detail"]["containers"] = [{"name": "app", "exitCode": exit_code}]

        with pytest.raises(MalformedPayloadError):
            await alert_relay.process(event)

        assert slack.sent == []

    async def test_malformed_payload_propagates(self, relay: RelayFixture) -> None:
        alert_relay, slack, email = relay
        event = make_task_event()
        event["detail"]["containers"] = [{"name": "app", "exitCode": "137abc"}]

        with pytest.raises(MalformedPayloadError):
            await alert_relay.process(event)

        assert slack.sent == [] and email.sent == []

    async def test_same_event_twice_yields_same_notification(self, relay: RelayFixture) -> None:
        alert_relay, slack, _ = relay
        event = make_task_event(containers=[make_container("app", 1, "Essential container exited")])

        await alert_relay.process(event)
        await alert_relay.process(event)

        assert len(slack.sent) == 2
        assert slack.sent[0] == slack.sent[1]
