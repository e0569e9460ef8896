"""Utility modules for the agent swarm.

This package provides utility functions and classes for:
- Configuration management
- Structured logging
- Exception handling
"""

from .config import (
    AppConfig,
    AppSettings,
    BroadcastConfig,
    CapabilityConfig,
    CredentialConfig,
    CredentialSource,
    Environment,
    EnvironmentConfig,
    LogFormat,
    LoggingConfig,
    PollingConfig,
    SchedulerConfig,
    ServiceConfig,
    get_config,
    init_config,
    reset_config,
)
from .error_handlers import (
    create_error_response,
    register_error_handlers,
)
from .exceptions import (
    APIError,
    AuthError,
    BadRequestError,
    CapabilityError,
    ConfigurationError,
    ConflictError,
    ExternalServiceError,
    InvalidConfigurationError,
    MissingConfigurationError,
    NotFoundError,
    RunStateError,
    ServiceFailure,
    ServiceUnavailableError,
    SwarmError,
    TransportError,
    UnsupportedCapability,
)
from .logging import (
    LoggerAdapter,
    clear_correlation_id,
    get_agent_logger,
    get_correlation_id,
    get_logger,
    get_run_logger,
    set_correlation_id,
    setup_logging,
)

__all__ = [
    # Config
    "AppConfig",
    "AppSettings",
    "ServiceConfig",
    "CredentialConfig",
    "CredentialSource",
    "PollingConfig",
    "CapabilityConfig",
    "SchedulerConfig",
    "BroadcastConfig",
    "EnvironmentConfig",
    "LoggingConfig",
    "Environment",
    "LogFormat",
    "get_config",
    "init_config",
    "reset_config",
    # Logging
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
    "get_agent_logger",
    "get_run_logger",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    # Exceptions
    "SwarmError",
    "ConfigurationError",
    "MissingConfigurationError",
    "InvalidConfigurationError",
    "ExternalServiceError",
    "AuthError",
    "TransportError",
    "ServiceFailure",
    "CapabilityError",
    "UnsupportedCapability",
    "RunStateError",
    "APIError",
    "BadRequestError",
    "NotFoundError",
    "ConflictError",
    "ServiceUnavailableError",
    # Error Handlers
    "register_error_handlers",
    "create_error_response",
]
