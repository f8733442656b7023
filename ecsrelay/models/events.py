"""Core event data structures and enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationInfo, field_validator


class EventCategory(StrEnum):
    """EventBridge ``detail-type`` values understood by the relay."""

    DEPLOYMENT_STATE_CHANGE = "ECS Deployment State Change"
    TASK_STATE_CHANGE = "ECS Task State Change"
    UNKNOWN = "Unknown"

    @classmethod
    def from_detail_type(cls, detail_type: str) -> EventCategory:
        try:
            return cls(detail_type)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class EventEnvelope:
    """Inbound event wrapper: a category tag plus an opaque detail payload.

    Built once per invocation from the raw trigger event and never mutated.
    """

    category: EventCategory
    detail_type: str
    detail: Any
    event_id: str = ""
    source: str = ""
    region: str = ""


class _Detail(BaseModel):
    """Base for decoded detail records.

    Absent or null string fields decode to ``""``; unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            field_info = cls.model_fields[info.field_name]
            return field_info.get_default(call_default_factory=True)
        return value


class DeploymentDetail(_Detail):
    """Decoded ``ECS Deployment State Change`` detail.

    ``cluster`` and ``service`` are ARNs (``.../service/NAME``).
    """

    event_name: str = Field(default="", alias="eventName")
    cluster: str = ""
    service: str = ""
    reason: str = ""


class ContainerResult(_Detail):
    """Exit state of one container in a stopped task. ``exit_code`` 0 is clean."""

    name: str = ""
    image: str = ""
    exit_code: StrictInt = Field(default=0, alias="exitCode")
    reason: str = ""


class TaskDetail(_Detail):
    """Decoded ``ECS Task State Change`` detail.

    ``group`` has the form ``kind:name``, e.g. ``service:checkout-svc``.
    """

    cluster_arn: str = Field(default="", alias="clusterArn")
    task_arn: str = Field(default="", alias="taskArn")
    group: str = ""
    last_status: str = Field(default="", alias="lastStatus")
    stopped_reason: str = Field(default="", alias="stoppedReason")
    containers: tuple[ContainerResult, ...] = ()


DetailRecord = DeploymentDetail | TaskDetail
