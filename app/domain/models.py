"""Typed domain models shared across runtime layers.

This module provides the data contracts exchanged between the HTTP surface,
the job layer and the notification adapter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_DEPLOYMENT_NAME = "main"


class LifecycleEventKind(str, Enum):
    """Known lifecycle event kinds.

    The first group is emitted by this service. The second group is emitted by
    the provisioning process itself and only relayed, so inbound kinds are not
    validated against this enumeration.
    """

    LAUNCHING = "launching"
    COMPLETED = "completed"
    FAILED = "failed"
    APPROVE_TRIGGERED = "approve_triggered"
    APPROVE_SUCCESS = "approve_success"
    APPROVE_FAILED = "approve_failed"

    CREATING_KEY = "creating_key"
    CREATING_CONFIG = "creating_config"
    CREATING_EC2 = "creating_ec2"
    DEPLOYING_APP = "deploying_app"
    PULLING_IMAGE = "pulling_image"
    STARTING_APP = "starting_app"
    HEALTH_CHECK = "health_check"
    SETTING_UP_CLOUDFLARE = "setting_up_cloudflare"
    AUTO_APPROVING = "auto_approving"
    PAIRING_REQUIRED = "pairing_required"
    CLOUDFLARE_READY = "cloudflare_ready"


@dataclass(frozen=True)
class LifecycleEvent:
    """One timestamped lifecycle transition relayed to the frontend sink.

    Attributes:
        kind: Event kind, usually a `LifecycleEventKind` value.
        name: Deployment identity the event belongs to.
        message: Human-readable message.
        timestamp: RFC 3339 UTC timestamp, empty when not yet assigned.
        data: Optional structured payload.
    """

    kind: str
    name: str
    message: str = ""
    timestamp: str = ""
    data: object | None = None


@dataclass(frozen=True)
class LaunchRequest:
    """Accepted request to run the provisioning pipeline for one deployment.

    Secrets are excluded from `repr` so request objects can be logged safely.

    Attributes:
        name: Requested deployment identity, resolved before launch.
        credential_token: Required credential passed to the provisioning process.
        auxiliary_token: Optional gateway token passed to the provisioning process.
        cloudflare: Whether the tunnel add-on should be provisioned.
    """

    name: str = DEFAULT_DEPLOYMENT_NAME
    credential_token: str = field(default="", repr=False)
    auxiliary_token: str = field(default="", repr=False)
    cloudflare: bool = False


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one notification delivery attempt.

    Attributes:
        delivered: Whether the sink accepted the event.
        status_code: HTTP status returned by the sink, when one was received.
        error: Failure description when delivery did not succeed.
    """

    delivered: bool
    status_code: int | None = None
    error: str | None = None


@dataclass(frozen=True)
class ProcessOutcome:
    """Exit status and combined output of one finished external process.

    Attributes:
        return_code: Process exit code.
        output: Combined stdout and stderr text.
    """

    return_code: int
    output: str

    @property
    def succeeded(self) -> bool:
        return self.return_code == 0


def domain_normalize_deployment_name(name: str | None) -> str:
    """Return the deployment identity to use for a possibly blank name.

    Args:
        name: Requested name, possibly missing or blank.

    Returns:
        str: Stripped name, or the default identity when blank.
    """

    normalized_name = (name or "").strip()
    return normalized_name or DEFAULT_DEPLOYMENT_NAME


def domain_launch_request_public_payload(request: LaunchRequest) -> dict[str, object]:
    """Build the secret-free payload describing a launch request.

    Args:
        request: Accepted launch request.

    Returns:
        dict[str, object]: JSON-serializable payload without token values.
    """

    return {
        "name": request.name,
        "cloudflare": request.cloudflare,
        "auxiliary_token_provided": bool(request.auxiliary_token),
    }
