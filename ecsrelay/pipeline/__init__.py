"""Event processing pipeline: normalizer, classifier, service filter, relay."""

from ecsrelay.pipeline.classifier import classify, get_resource_name, get_service_name_from_group
from ecsrelay.pipeline.normalizer import MalformedPayloadError, build_envelope, normalize
from ecsrelay.pipeline.relay import AlertRelay
from ecsrelay.pipeline.service_filter import ServiceFilter

__all__ = [
    "AlertRelay",
    "MalformedPayloadError",
    "ServiceFilter",
    "build_envelope",
    "classify",
    "get_resource_name",
    "get_service_name_from_group",
    "normalize",
]
