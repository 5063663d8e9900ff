"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from app.adapters import HttpNotificationRelay
from app.api import create_api_application
from app.config import AppSettings, config_load_settings
from app.jobs import (
    ApprovalTrigger,
    ApprovalTriggerConfig,
    DeploymentCoordinator,
    LaunchSupervisor,
    LaunchSupervisorConfig,
    RunRegistry,
    StateMarkerNameResolver,
    SubprocessProcessRunner,
)


def bootstrap_create_relay(settings: AppSettings) -> HttpNotificationRelay:
    """Build the frontend notification relay from validated settings."""

    return HttpNotificationRelay(
        frontend_url=settings.frontend_url,
        sink_path=settings.notify_sink_path,
        timeout_seconds=settings.notify_timeout_seconds,
    )


def bootstrap_create_coordinator(
    settings: AppSettings | None = None,
    relay: HttpNotificationRelay | None = None,
) -> DeploymentCoordinator:
    """Build the deployment coordinator for HTTP and command-line surfaces.

    Args:
        settings: Optional validated settings; loaded from the environment when omitted.
        relay: Optional relay shared with the caller; built from settings when omitted.

    Returns:
        DeploymentCoordinator: Fully wired coordinator instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    relay = relay or bootstrap_create_relay(resolved_settings)
    registry = RunRegistry()
    process_runner = SubprocessProcessRunner()
    launch_supervisor = LaunchSupervisor(
        registry=registry,
        relay=relay,
        process_runner=process_runner,
        config=LaunchSupervisorConfig(
            pipeline_dir=resolved_settings.pipeline_dir,
            make_executable=resolved_settings.make_executable,
            provision_target=resolved_settings.provision_target,
            credential_env_name=resolved_settings.credential_env_name,
            auxiliary_env_name=resolved_settings.auxiliary_env_name,
        ),
    )
    approval_trigger = ApprovalTrigger(
        relay=relay,
        process_runner=process_runner,
        config=ApprovalTriggerConfig(
            pipeline_dir=resolved_settings.pipeline_dir,
            make_executable=resolved_settings.make_executable,
            approve_target=resolved_settings.approve_target,
            timeout_seconds=resolved_settings.approve_timeout_seconds,
        ),
    )
    return DeploymentCoordinator(
        name_resolver=StateMarkerNameResolver(
            pipeline_dir=resolved_settings.pipeline_dir,
            marker_template=resolved_settings.state_marker_template,
            probe_limit=resolved_settings.name_probe_limit,
        ),
        registry=registry,
        launch_supervisor=launch_supervisor,
        approval_trigger=approval_trigger,
        relay=relay,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional validated settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    relay = bootstrap_create_relay(resolved_settings)
    return create_api_application(
        settings=resolved_settings,
        coordinator=bootstrap_create_coordinator(resolved_settings, relay=relay),
        shutdown_hooks=(relay.relay_close,),
    )
