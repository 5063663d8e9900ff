"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or runs one pipeline command directly.
"""

import argparse
import logging

import uvicorn

from app.bootstrap import bootstrap_create_application, bootstrap_create_coordinator, bootstrap_create_relay
from app.config import config_configure_logging, config_load_settings
from app.jobs import ApprovalFailedError

logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Provisioning pipeline server runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "approve", "resolve-name"),
        help="Runtime command: `api` starts server, `approve` runs one device approval, "
        "`resolve-name` prints the identity a launch would use",
        type=str,
    )
    argument_parser.add_argument(
        "--name",
        dest="name",
        type=str,
        default="",
        help="Deployment name for `approve` and `resolve-name` (default: main)",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    config_configure_logging(settings.log_level)

    if parsed_arguments.command == "approve":
        relay = bootstrap_create_relay(settings)
        coordinator = bootstrap_create_coordinator(settings, relay=relay)
        try:
            coordinator.approve(parsed_arguments.name)
        except ApprovalFailedError as error:
            logger.error("%s", error)
            raise SystemExit(1) from error
        finally:
            relay.relay_close()
        return

    if parsed_arguments.command == "resolve-name":
        coordinator = bootstrap_create_coordinator(settings)
        identity, _ = coordinator.resolve_and_check(parsed_arguments.name)
        print(identity)
        return

    application = bootstrap_create_application(settings)
    logger.info("Provisioning pipeline server starting on :%d", settings.server_port)
    logger.info("Frontend webhook target: %s", settings.frontend_url)
    logger.info("Pipeline directory: %s", settings.pipeline_dir)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.server_port,
    )


if __name__ == "__main__":
    main()
