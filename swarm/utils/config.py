"""Application configuration management.

This module provides configuration loading from environment variables and YAML files.
"""

import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from swarm.models.agent import AgentProfile

from .exceptions import MissingConfigurationError


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogFormat(str, Enum):
    """Log output format types."""

    JSON = "json"
    CONSOLE = "console"


class CredentialSource(str, Enum):
    """Where the bearer credential for the reasoning service comes from."""

    ENV = "env"
    STATIC = "static"
    AZURE_CLI = "azure_cli"


class AppSettings(BaseModel):
    """Application settings."""

    env: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Admin API host")
    port: int = Field(default=8000, description="Admin API port")
    name: str = Field(default="Agent Swarm", description="Application name")
    version: str = Field(default="0.1.0", description="Application version")
    initial_task: str | None = Field(
        default="Analyze current development environment and create improvement plan",
        description="Task submitted once the swarm starts (None to skip)",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v


class ServiceConfig(BaseModel):
    """Reasoning-service endpoint configuration."""

    endpoint: str = Field(default="", description="Base URL of the reasoning service")
    api_version: str = Field(default="2024-05-01-preview", description="api-version query value")
    assistant_id: str = Field(default="", description="Assistant used for every run")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")


class CredentialConfig(BaseModel):
    """Credential provider configuration."""

    source: CredentialSource = Field(default=CredentialSource.ENV)
    env_var: str = Field(default="REASONING_SERVICE_TOKEN", description="Variable read by the env source")
    token: str | None = Field(default=None, description="Token used by the static source")
    resource: str = Field(
        default="https://cognitiveservices.azure.com",
        description="Resource passed to the Azure CLI source",
    )


class PollingConfig(BaseModel):
    """Run status polling configuration."""

    interval_seconds: float = Field(default=2.0, ge=0, description="Delay between status polls")
    max_attempts: int = Field(default=30, ge=1, description="Poll budget before a run times out")


class CapabilityConfig(BaseModel):
    """Capability handler configuration."""

    handler_timeout: float = Field(default=10.0, gt=0, description="Hard limit for one handler call")
    workspace: str = Field(default=".", description="Root directory for file capabilities")
    read_limit: int = Field(default=2000, gt=0, description="Characters returned by read_file")
    output_limit: int = Field(default=1000, gt=0, description="Characters kept from command output")


class SchedulerConfig(BaseModel):
    """Think-loop scheduling configuration."""

    check_in_interval: float = Field(default=120.0, gt=0, description="Inter-agent check-in period")
    shutdown_grace: float = Field(default=10.0, ge=0, description="Wait for in-flight cycles on stop")


class BroadcastConfig(BaseModel):
    """Broadcast bus configuration."""

    max_history: int = Field(default=1000, gt=0)
    prompt_history: int = Field(default=5, ge=0, description="Team messages quoted in prompts")
    thought_preview: int = Field(default=200, gt=0, description="Characters of thoughts spoken aloud")


class EnvironmentConfig(BaseModel):
    """Development-environment collaborators."""

    bridge: str = Field(default="none", description="'emacs' or 'none'")
    voice: str = Field(default="none", description="'say' or 'none'")
    command_timeout: float = Field(default=10.0, gt=0)

    @field_validator("bridge")
    @classmethod
    def validate_bridge(cls, v: str) -> str:
        if v not in {"emacs", "none"}:
            raise ValueError("bridge must be 'emacs' or 'none'")
        return v

    @field_validator("voice")
    @classmethod
    def validate_voice(cls, v: str) -> str:
        if v not in {"say", "none"}:
            raise ValueError("voice must be 'say' or 'none'")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default=LogFormat.JSON, description="Log format")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


class AppConfig(BaseModel):
    """Main application configuration."""

    app: AppSettings = Field(default_factory=AppSettings)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    credentials: CredentialConfig = Field(default_factory=CredentialConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    capabilities: CapabilityConfig = Field(default_factory=CapabilityConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    broadcast: BroadcastConfig = Field(default_factory=BroadcastConfig)
    environment: EnvironmentConfig = Field(default_factory=EnvironmentConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    agents: list[AgentProfile] = Field(
        default_factory=list, description="Agent roster; empty means the built-in roster"
    )

    def require_service(self) -> None:
        """Fail startup when the reasoning service cannot be reached at all.

        Raises:
            MissingConfigurationError: If the endpoint or assistant is not set.
        """
        if not self.service.endpoint:
            raise MissingConfigurationError("service.endpoint")
        if not self.service.assistant_id:
            raise MissingConfigurationError("service.assistant_id")

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "AppConfig":
        """Load configuration from environment variables only.

        Args:
            env_file: Optional path to .env file

        Returns:
            AppConfig instance populated from environment
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
        return cls._apply_env_overrides(cls())

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            AppConfig instance populated from YAML

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML content is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError("YAML content must be a dictionary")

        return cls.model_validate(data)

    @classmethod
    def load(
        cls,
        yaml_path: str | Path | None = None,
        env_file: str | Path | None = None,
    ) -> "AppConfig":
        """Load configuration with YAML as base and environment overrides.

        Environment variables take precedence over YAML settings.

        Args:
            yaml_path: Optional path to YAML configuration file
            env_file: Optional path to .env file

        Returns:
            AppConfig instance with merged configuration
        """
        config = cls.from_yaml(yaml_path) if yaml_path else cls()

        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls._apply_env_overrides(config)

    @classmethod
    def _apply_env_overrides(cls, config: "AppConfig") -> "AppConfig":
        """Apply environment variable overrides to existing config."""
        data = config.model_dump()

        for env_name, (section, key, cast) in _ENV_OVERRIDES.items():
            raw = os.getenv(env_name)
            if raw:
                data[section][key] = cast(raw)

        return cls.model_validate(data)


def _as_bool(value: str) -> bool:
    return value.lower() == "true"


# ENV name -> (section, key, caster)
_ENV_OVERRIDES: dict[str, tuple[str, str, Callable[[str], Any]]] = {
    "APP_ENV": ("app", "env", str),
    "APP_DEBUG": ("app", "debug", _as_bool),
    "APP_HOST": ("app", "host", str),
    "APP_PORT": ("app", "port", int),
    "REASONING_SERVICE_ENDPOINT": ("service", "endpoint", str),
    "REASONING_API_VERSION": ("service", "api_version", str),
    "REASONING_ASSISTANT_ID": ("service", "assistant_id", str),
    "REASONING_REQUEST_TIMEOUT": ("service", "request_timeout", float),
    "CREDENTIAL_SOURCE": ("credentials", "source", str),
    "POLL_INTERVAL": ("polling", "interval_seconds", float),
    "POLL_MAX_ATTEMPTS": ("polling", "max_attempts", int),
    "CAPABILITY_TIMEOUT": ("capabilities", "handler_timeout", float),
    "SWARM_WORKSPACE": ("capabilities", "workspace", str),
    "ENVIRONMENT_BRIDGE": ("environment", "bridge", str),
    "VOICE_OUTPUT": ("environment", "voice", str),
    "LOG_LEVEL": ("logging", "level", str),
    "LOG_FORMAT": ("logging", "format", str),
}


# Process-wide configuration instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance.

    Returns:
        The global AppConfig instance

    Raises:
        RuntimeError: If configuration has not been initialized
    """
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call init_config() first.")
    return _config


def init_config(
    yaml_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> AppConfig:
    """Initialize the global configuration.

    Args:
        yaml_path: Optional path to YAML configuration file
        env_file: Optional path to .env file

    Returns:
        The initialized AppConfig instance
    """
    global _config
    _config = AppConfig.load(yaml_path=yaml_path, env_file=env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
