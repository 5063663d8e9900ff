"""Domain models used across application layer boundaries."""

from .events import (
    domain_build_lifecycle_event,
    domain_ensure_event_timestamp,
    domain_serialize_lifecycle_event,
    domain_utc_timestamp,
)
from .models import (
    DEFAULT_DEPLOYMENT_NAME,
    DeliveryResult,
    LaunchRequest,
    LifecycleEvent,
    LifecycleEventKind,
    ProcessOutcome,
    domain_launch_request_public_payload,
    domain_normalize_deployment_name,
)
from .output_sanitizer import NOISY_OUTPUT_MARKERS, domain_sanitize_output, domain_strip_ansi_sequences

__all__ = [
    "DEFAULT_DEPLOYMENT_NAME",
    "DeliveryResult",
    "LaunchRequest",
    "LifecycleEvent",
    "LifecycleEventKind",
    "NOISY_OUTPUT_MARKERS",
    "ProcessOutcome",
    "domain_build_lifecycle_event",
    "domain_ensure_event_timestamp",
    "domain_launch_request_public_payload",
    "domain_normalize_deployment_name",
    "domain_sanitize_output",
    "domain_serialize_lifecycle_event",
    "domain_strip_ansi_sequences",
    "domain_utc_timestamp",
]
