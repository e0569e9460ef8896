"""HTTP client for an Assistants-style reasoning service.

Implements ``ReasoningService`` on top of ``httpx.AsyncClient``. Every call
carries a bearer token from the configured CredentialProvider and the
``api-version`` query parameter.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import httpx

from swarm.models import CapabilityInvocation, CapabilityResult, CapabilitySpec
from swarm.service.base import ReasoningService, RunStatusReport, ServiceMessage
from swarm.service.credentials import CredentialProvider
from swarm.utils.config import ServiceConfig
from swarm.utils.exceptions import AuthError, MissingConfigurationError, TransportError
from swarm.utils.logging import get_logger

logger = get_logger(__name__)


class ReasoningServiceClient(ReasoningService):
    """Reasoning service reached over REST."""

    def __init__(
        self,
        endpoint: str,
        assistant_id: str,
        credentials: CredentialProvider,
        api_version: str = "2024-05-01-preview",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            endpoint: Base URL of the service.
            assistant_id: Assistant every run is started with.
            credentials: Source of the bearer token.
            api_version: Value of the ``api-version`` query parameter.
            timeout: Per-request timeout in seconds.
            http_client: Optional pre-built client (tests inject a MockTransport).

        Raises:
            MissingConfigurationError: If the endpoint is empty.
        """
        if not endpoint:
            raise MissingConfigurationError("service.endpoint")
        self._endpoint = endpoint.rstrip("/")
        self._assistant_id = assistant_id
        self._credentials = credentials
        self._api_version = api_version
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(
        cls,
        config: ServiceConfig,
        credentials: CredentialProvider,
        http_client: httpx.AsyncClient | None = None,
    ) -> ReasoningServiceClient:
        return cls(
            endpoint=config.endpoint,
            assistant_id=config.assistant_id,
            credentials=credentials,
            api_version=config.api_version,
            timeout=config.request_timeout,
            http_client=http_client,
        )

    async def create_session(self, initial_message: str) -> str:
        data = await self._request(
            "POST",
            "/openai/threads",
            json={"messages": [{"role": "user", "content": initial_message}]},
        )
        return self._require_id(data, "session")

    async def start_run(
        self,
        session_id: str,
        manifest: Sequence[CapabilitySpec],
    ) -> str:
        data = await self._request(
            "POST",
            f"/openai/threads/{session_id}/runs",
            json={
                "assistant_id": self._assistant_id,
                "tools": [spec.to_tool() for spec in manifest],
            },
        )
        return self._require_id(data, "run")

    async def get_run_status(self, session_id: str, run_id: str) -> RunStatusReport:
        data = await self._request("GET", f"/openai/threads/{session_id}/runs/{run_id}")

        invocations: list[CapabilityInvocation] = []
        required = _field(data, "required_action", dict)
        tool_calls = _field(_field(required, "submit_tool_outputs", dict), "tool_calls", list)
        for call in tool_calls:
            if not isinstance(call, dict):
                raise TransportError("Service response field tool_calls holds a non-object entry")
            function = _field(call, "function", dict)
            invocations.append(
                CapabilityInvocation.from_raw_arguments(
                    str(call.get("id") or ""),
                    str(function.get("name") or ""),
                    _field(function, "arguments", str) or None,
                )
            )

        last_error = _field(data, "last_error", dict)
        return RunStatusReport(
            status=str(data.get("status", "")),
            invocations=invocations,
            last_error=_field(last_error, "message", str) or None,
            error_code=_field(last_error, "code", str) or None,
            raw_response=data,
        )

    async def submit_outputs(
        self,
        session_id: str,
        run_id: str,
        results: Sequence[CapabilityResult],
    ) -> None:
        await self._request(
            "POST",
            f"/openai/threads/{session_id}/runs/{run_id}/submit_tool_outputs",
            json={"tool_outputs": [result.to_output() for result in results]},
        )

    async def list_messages(self, session_id: str) -> list[ServiceMessage]:
        data = await self._request("GET", f"/openai/threads/{session_id}/messages")

        messages: list[ServiceMessage] = []
        for item in _field(data, "data", list):
            if not isinstance(item, dict):
                raise TransportError("Service response field data holds a non-object entry")
            parts = []
            for content in _field(item, "content", list):
                text = content.get("text") if isinstance(content, dict) else None
                if isinstance(text, dict) and isinstance(text.get("value"), str) and text["value"]:
                    parts.append(text["value"])

            created_at = item.get("created_at") or 0
            if isinstance(created_at, bool) or not isinstance(created_at, (int, float)):
                raise TransportError(f"Service message has a non-numeric created_at: {created_at!r}")

            messages.append(
                ServiceMessage(
                    role=str(item.get("role") or ""),
                    text="\n".join(parts),
                    created_at=int(created_at),
                )
            )
        return messages

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Perform one authenticated request and decode the JSON body.

        Raises:
            AuthError: On credential denial or HTTP 401/403.
            TransportError: On network failure or any other non-2xx response.
        """
        token = await self._credentials.get_credential()
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

        try:
            response = await self._client.request(
                method,
                f"{self._endpoint}{path}",
                params={"api-version": self._api_version},
                headers=headers,
                json=json,
            )
        except httpx.RequestError as e:
            logger.warning("Reasoning service unreachable", method=method, path=path, error=str(e))
            raise TransportError(f"{method} {path} failed: {e}", cause=e) from e

        if response.status_code in (401, 403):
            raise AuthError(f"Credential rejected ({response.status_code})")

        if not response.is_success:
            raise TransportError(
                f"{method} {path} returned {response.status_code}: {self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
                cause=e,
            ) from e

        if not isinstance(body, dict):
            raise TransportError(
                f"{method} {path} returned an unexpected body", status_code=response.status_code
            )
        return body

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            return str(response.json().get("error", {}).get("message") or "Unknown error")
        except (ValueError, AttributeError):
            return "Unknown error"

    @staticmethod
    def _require_id(data: dict[str, Any], kind: str) -> str:
        identifier = data.get("id")
        if not identifier:
            raise TransportError(f"Service response carries no {kind} id")
        return str(identifier)


def _field(data: dict[str, Any], name: str, kind: type) -> Any:
    """Read an optional response field, empty when absent.

    Raises:
        TransportError: If the field is present with the wrong JSON type.
    """
    value = data.get(name)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise TransportError(
            f"Service response field {name} is a {type(value).__name__}, expected {kind.__name__}"
        )
    return value
