"""Custom exception classes for the agent swarm.

This module provides a unified exception hierarchy for the application.
Registry-specific exceptions are defined next to the registry, but every
error that crosses a component boundary derives from ``SwarmError``.
"""

from typing import Any


class SwarmError(Exception):
    """Base exception for all swarm errors.

    All custom exceptions in this system should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            cause: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(SwarmError):
    """Raised when there's a configuration error."""

    pass


class MissingConfigurationError(ConfigurationError):
    """Raised when a required configuration is missing."""

    def __init__(self, config_key: str, message: str | None = None):
        self.config_key = config_key
        msg = message or f"Missing required configuration: {config_key}"
        super().__init__(msg, details={"config_key": config_key})


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(self, config_key: str, value: Any, message: str | None = None):
        self.config_key = config_key
        self.value = value
        msg = message or f"Invalid configuration value for {config_key}: {value}"
        super().__init__(msg, details={"config_key": config_key, "value": str(value)})


# ============================================================================
# Reasoning Service Errors
# ============================================================================


class ExternalServiceError(SwarmError):
    """Base class for reasoning-service boundary errors."""

    pass


class AuthError(ExternalServiceError):
    """Raised when a credential cannot be obtained or is rejected.

    Aborts the current think cycle; the next tick retries.
    """

    def __init__(self, message: str = "Credential denied", cause: Exception | None = None):
        super().__init__(message, cause=cause)


class TransportError(ExternalServiceError):
    """Raised on network failures and non-success HTTP responses."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(message, details=details, cause=cause)
        self.status_code = status_code


class ServiceFailure(ExternalServiceError):
    """The reasoning service marked a run as failed."""

    def __init__(self, reason: str, code: str | None = None):
        details = {"code": code} if code else None
        super().__init__(reason, details=details)
        self.reason = reason
        self.code = code


# ============================================================================
# Capability Errors
# ============================================================================


class CapabilityError(SwarmError):
    """Raised by a capability handler that could not perform its action.

    Never propagates past the dispatcher; it becomes a failed CapabilityResult.
    """

    def __init__(self, capability: str, message: str):
        super().__init__(message, details={"capability": capability})
        self.capability = capability


class UnsupportedCapability(CapabilityError):
    """Raised when an invocation names a capability outside the agent's manifest."""

    def __init__(self, capability: str):
        super().__init__(capability, f"unsupported capability: {capability}")


# ============================================================================
# Run Lifecycle Errors
# ============================================================================


class RunStateError(SwarmError):
    """Raised on an illegal run status transition."""

    def __init__(self, run_id: str | None, current: str, target: str):
        super().__init__(
            f"Cannot move run {run_id or '<unstarted>'} from {current} to {target}",
            details={"run_id": run_id, "current": current, "target": target},
        )
        self.current = current
        self.target = target


# ============================================================================
# API Errors
# ============================================================================


class APIError(SwarmError):
    """Base class for API-related errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, details, cause)
        self.status_code = status_code


class BadRequestError(APIError):
    """Raised for bad request errors (400)."""

    def __init__(
        self,
        message: str = "Bad request",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code=400, details=details)


class NotFoundError(APIError):
    """Raised when a resource is not found (404)."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        msg = message or f"{resource_type} not found: {resource_id}"
        super().__init__(
            msg,
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictError(APIError):
    """Raised for conflict errors (409)."""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code=409, details=details)


class ServiceUnavailableError(APIError):
    """Raised when the swarm is not running (503)."""

    def __init__(
        self,
        service_name: str,
        message: str | None = None,
    ):
        msg = message or f"Service unavailable: {service_name}"
        super().__init__(msg, status_code=503, details={"service": service_name})
        self.service_name = service_name
