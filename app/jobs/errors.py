"""Project-native typed exceptions for deployment and approval failures."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base exception for provisioning pipeline failures.

    Attributes:
        identity: Deployment identity the failure belongs to, when known.
    """

    def __init__(self, message: str, identity: str | None = None):
        super().__init__(message)
        self.identity = identity


class DeploymentAlreadyRunningError(PipelineError):
    """Launch rejected because a run for the same identity is in flight."""


class ProcessSpawnError(PipelineError):
    """External command could not be started."""


class ProcessExitError(PipelineError):
    """External command ran but exited unsuccessfully.

    Attributes:
        return_code: Process exit code.
        output: Combined process output.
    """

    def __init__(self, message: str, return_code: int, output: str, identity: str | None = None):
        super().__init__(message, identity=identity)
        self.return_code = return_code
        self.output = output


class ProcessTimeoutError(PipelineError, TimeoutError):
    """Bounded external command did not finish in time.

    Attributes:
        output: Output captured before the process was killed.
    """

    def __init__(self, message: str, output: str = "", identity: str | None = None):
        super().__init__(message, identity=identity)
        self.output = output


class ApprovalFailedError(PipelineError):
    """Device approval command failed to start, timed out or exited non-zero.

    Attributes:
        output: Raw approval command output, or the failure reason when none.
    """

    def __init__(self, message: str, output: str, identity: str | None = None):
        super().__init__(message, identity=identity)
        self.output = output
