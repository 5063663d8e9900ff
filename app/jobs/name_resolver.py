"""Deployment identity resolution against persisted provisioning state markers."""

from __future__ import annotations

import logging
from pathlib import Path

from app.domain import domain_normalize_deployment_name

from .interfaces import NameResolverPort

logger = logging.getLogger(__name__)


class StateMarkerNameResolver(NameResolverPort):
    """Pick a free identity by probing for per-identity state marker files.

    A name whose marker exists has been used before, so the resolver tries
    `name1`, `name2`, ... up to `probe_limit`. When every candidate is taken it
    falls back to the requested name; callers still run the conflict check.
    """

    def __init__(
        self,
        pipeline_dir: str | Path,
        marker_template: str = "terraform/ec2/terraform-{name}.tfstate",
        probe_limit: int = 100,
    ):
        """Initialize name resolver.

        Args:
            pipeline_dir: Provisioning working directory holding state markers.
            marker_template: Marker path relative to `pipeline_dir` with a `{name}` placeholder.
            probe_limit: Highest numeric suffix to probe.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when config values are invalid.
        """

        if "{name}" not in marker_template:
            raise ValueError("marker_template must contain the {name} placeholder")
        if probe_limit < 0:
            raise ValueError("probe_limit must be >= 0")

        self._pipeline_dir = Path(pipeline_dir)
        self._marker_template = marker_template
        self._probe_limit = probe_limit

    def job_state_marker_path(self, name: str) -> Path:
        """Return the state marker path for one identity."""

        return self._pipeline_dir / self._marker_template.format(name=name)

    def job_resolve_name(self, requested_name: str) -> str:
        """Return a deployment identity not yet backed by persisted state.

        Args:
            requested_name: Requested identity; blank selects the default.

        Returns:
            str: The requested name, the first free suffixed candidate, or the
            requested name again when all candidates are taken.

        Raises:
            OSError: Raised when state markers cannot be inspected.
        """

        name = domain_normalize_deployment_name(requested_name)
        if not self.job_state_marker_path(name).exists():
            return name

        for suffix in range(1, self._probe_limit + 1):
            candidate = f"{name}{suffix}"
            if not self.job_state_marker_path(candidate).exists():
                logger.info("name %s already provisioned, using %s", name, candidate)
                return candidate

        logger.warning("no free name among %s1..%s%d, keeping %s", name, name, self._probe_limit, name)
        return name
