"""Capability invocation models.

The reasoning service asks for capabilities by name while a run is in
``requires_action``; each request becomes a CapabilityInvocation and is
answered by exactly one CapabilityResult.
"""

import json
from typing import Any

from pydantic import BaseModel, Field


class CapabilityInvocation(BaseModel):
    """A single capability request produced by the reasoning service."""

    id: str = Field(..., description="Invocation (tool call) id assigned by the service")
    name: str = Field(..., description="Capability name")
    arguments: dict[str, Any] = Field(default_factory=dict)
    arguments_error: str | None = Field(
        default=None, description="Why the raw arguments could not be parsed, if they could not"
    )

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def from_raw_arguments(cls, invocation_id: str, name: str, raw: str | None) -> "CapabilityInvocation":
        """Build an invocation from the JSON-encoded argument string the service sends."""
        if not raw:
            return cls(id=invocation_id, name=name)
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            return cls(id=invocation_id, name=name, arguments_error=f"malformed JSON ({e.msg})")
        if not isinstance(parsed, dict):
            return cls(
                id=invocation_id,
                name=name,
                arguments_error=f"expected an object, got {type(parsed).__name__}",
            )
        return cls(id=invocation_id, name=name, arguments=parsed)


class CapabilityResult(BaseModel):
    """Outcome of one invocation: success with payload, or failure with reason."""

    invocation_id: str
    success: bool
    payload: Any = None
    error: str | None = None

    model_config = {"extra": "forbid", "frozen": True}

    @classmethod
    def ok(cls, invocation_id: str, payload: Any = None) -> "CapabilityResult":
        return cls(invocation_id=invocation_id, success=True, payload=payload)

    @classmethod
    def fail(cls, invocation_id: str, error: str) -> "CapabilityResult":
        return cls(invocation_id=invocation_id, success=False, error=error)

    def to_output(self) -> dict[str, str]:
        """Serialize into the service's tool-output entry."""
        body: dict[str, Any] = {"success": self.success}
        if self.success:
            body["payload"] = self.payload
        else:
            body["error"] = self.error
        return {
            "tool_call_id": self.invocation_id,
            "output": json.dumps(body, ensure_ascii=False, default=str),
        }


class CapabilitySpec(BaseModel):
    """Tool definition advertised to the reasoning service."""

    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )

    model_config = {"extra": "forbid"}

    def to_tool(self) -> dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }
