"""Typed runtime settings with dotenv support and startup validation."""

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and provisioning pipeline configuration.

    Environment variable names map directly to field names in uppercase.
    Example: `pipeline_dir` reads from `PIPELINE_DIR`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        server_port: Web server port.
        frontend_url: Base URL of the frontend receiving relayed lifecycle events.
        notify_sink_path: Path appended to `frontend_url` for event delivery.
        notify_timeout_seconds: Upper bound for one event delivery attempt.
        pipeline_dir: Working directory of the provisioning Makefile.
        make_executable: Executable used for provisioning and approval commands.
        provision_target: Make target running the full provisioning pipeline.
        approve_target: Make target running device approval.
        approve_timeout_seconds: Upper bound for one approval command.
        state_marker_template: Marker path template relative to `pipeline_dir`.
        name_probe_limit: Maximum numeric suffix probed by the name resolver.
        credential_env_name: Child environment variable carrying the credential token.
        auxiliary_env_name: Child environment variable carrying the auxiliary token.
        cors_allow_origins: Origins accepted by the CORS middleware.
        log_level: Standard library logging level name.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    server_port: int = Field(default=4000, ge=1, le=65535)
    frontend_url: str = Field(default="http://localhost:3000", min_length=1)
    notify_sink_path: str = Field(default="/api/webhook/pipeline")
    notify_timeout_seconds: float = Field(default=5.0, gt=0)
    pipeline_dir: str = Field(default="/app/pipeline", min_length=1)
    make_executable: str = Field(default="make", min_length=1)
    provision_target: str = Field(default="ec2-full-setup", min_length=1)
    approve_target: str = Field(default="ec2-approve", min_length=1)
    approve_timeout_seconds: float = Field(default=300.0, gt=0)
    state_marker_template: str = Field(default="terraform/ec2/terraform-{name}.tfstate")
    name_probe_limit: int = Field(default=100, ge=0)
    credential_env_name: str = Field(default="CLAUDE_CODE_OAUTH_TOKEN", min_length=1)
    auxiliary_env_name: str = Field(default="OPENCLAW_GATEWAY_TOKEN", min_length=1)
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    @field_validator(
        "frontend_url",
        "pipeline_dir",
        "make_executable",
        "provision_target",
        "approve_target",
        "credential_env_name",
        "auxiliary_env_name",
    )
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("frontend_url")
    @classmethod
    def _validate_frontend_url(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("notify_sink_path")
    @classmethod
    def _validate_sink_path(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value.startswith("/"):
            raise ValueError("notify_sink_path must start with '/'")
        return stripped_value

    @field_validator("state_marker_template")
    @classmethod
    def _validate_marker_template(cls, value: str) -> str:
        stripped_value = value.strip()
        if "{name}" not in stripped_value:
            raise ValueError("state_marker_template must contain the {name} placeholder")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if not isinstance(logging.getLevelName(normalized_value), int):
            raise ValueError(f"unknown log_level={value}")
        return normalized_value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when required settings are missing or invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
