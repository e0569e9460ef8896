"""Credential providers for the reasoning service.

A provider hands out a bearer token on demand and raises ``AuthError`` when
none can be obtained.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
import os
from abc import ABC, abstractmethod

from swarm.utils.config import CredentialConfig, CredentialSource
from swarm.utils.exceptions import AuthError
from swarm.utils.logging import get_logger

logger = get_logger(__name__)


class CredentialProvider(ABC):
    """Supplies a bearer credential."""

    @abstractmethod
    async def get_credential(self) -> str:
        """Return a bearer token.

        Raises:
            AuthError: If no credential can be obtained.
        """
        pass


class StaticCredentialProvider(CredentialProvider):
    """Always returns the same token."""

    def __init__(self, token: str | None) -> None:
        self._token = token

    async def get_credential(self) -> str:
        if not self._token:
            raise AuthError("No static credential configured")
        return self._token


class EnvCredentialProvider(CredentialProvider):
    """Reads the token from an environment variable on every call."""

    def __init__(self, env_var: str = "REASONING_SERVICE_TOKEN") -> None:
        self._env_var = env_var

    async def get_credential(self) -> str:
        token = os.getenv(self._env_var)
        if not token:
            raise AuthError(f"Environment variable {self._env_var} is not set")
        return token


class AzureCliCredentialProvider(CredentialProvider):
    """Obtains an access token through ``az account get-access-token``."""

    def __init__(
        self,
        resource: str = "https://cognitiveservices.azure.com",
        timeout: float = 30.0,
        executable: str = "az",
    ) -> None:
        self._resource = resource
        self._timeout = timeout
        self._executable = executable

    async def get_credential(self) -> str:
        try:
            process = await asyncio.create_subprocess_exec(
                self._executable,
                "account",
                "get-access-token",
                "--resource",
                self._resource,
                "--output",
                "json",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise AuthError("Azure CLI is not available", cause=e) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise AuthError("Azure CLI timed out", cause=e) from e
        finally:
            if process.returncode is None:
                with contextlib.suppress(ProcessLookupError):
                    process.kill()
                await process.wait()

        if process.returncode != 0:
            logger.warning(
                "Azure CLI credential request failed",
                returncode=process.returncode,
                stderr=stderr.decode(errors="replace").strip()[:200],
            )
            raise AuthError("Azure CLI denied the credential request")

        try:
            token = json.loads(stdout)["accessToken"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise AuthError("Unexpected Azure CLI output", cause=e) from e

        return token


def create_credential_provider(config: CredentialConfig) -> CredentialProvider:
    """Build the provider selected by the configuration."""
    if config.source == CredentialSource.STATIC:
        return StaticCredentialProvider(config.token)
    if config.source == CredentialSource.AZURE_CLI:
        return AzureCliCredentialProvider(config.resource)
    return EnvCredentialProvider(config.env_var)
