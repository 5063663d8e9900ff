"""Job layer package for deployment lifecycle orchestration."""

from .approval_trigger import ApprovalTrigger, ApprovalTriggerConfig
from .coordinator import DeploymentCoordinator
from .errors import (
	ApprovalFailedError,
	DeploymentAlreadyRunningError,
	PipelineError,
	ProcessExitError,
	ProcessSpawnError,
	ProcessTimeoutError,
)
from .interfaces import DeploymentCoordinatorPort, NameResolverPort, ProcessRunnerPort, RunningProcessPort
from .launch_supervisor import LaunchSupervisor, LaunchSupervisorConfig, LaunchTask, job_describe_exit
from .name_resolver import StateMarkerNameResolver
from .process_runner import SubprocessProcessRunner, SubprocessRunningProcess
from .run_registry import RunHandle, RunRegistry

__all__ = [
	"ApprovalFailedError",
	"ApprovalTrigger",
	"ApprovalTriggerConfig",
	"DeploymentAlreadyRunningError",
	"DeploymentCoordinator",
	"DeploymentCoordinatorPort",
	"LaunchSupervisor",
	"LaunchSupervisorConfig",
	"LaunchTask",
	"NameResolverPort",
	"PipelineError",
	"ProcessExitError",
	"ProcessRunnerPort",
	"ProcessSpawnError",
	"ProcessTimeoutError",
	"RunHandle",
	"RunRegistry",
	"RunningProcessPort",
	"StateMarkerNameResolver",
	"SubprocessProcessRunner",
	"SubprocessRunningProcess",
	"job_describe_exit",
]
