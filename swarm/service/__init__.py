"""Reasoning service module.

This module provides the reasoning-service boundary:
- ReasoningService: abstract interface used by the run controller
- ReasoningServiceClient: httpx implementation of the REST API
- CredentialProvider and its env / static / Azure CLI implementations
"""

from swarm.service.base import ReasoningService, RunStatusReport, ServiceMessage
from swarm.service.client import ReasoningServiceClient
from swarm.service.credentials import (
    AzureCliCredentialProvider,
    CredentialProvider,
    EnvCredentialProvider,
    StaticCredentialProvider,
    create_credential_provider,
)

__all__ = [
    # Base
    "ReasoningService",
    "RunStatusReport",
    "ServiceMessage",
    # Client
    "ReasoningServiceClient",
    # Credentials
    "CredentialProvider",
    "StaticCredentialProvider",
    "EnvCredentialProvider",
    "AzureCliCredentialProvider",
    "create_credential_provider",
]
