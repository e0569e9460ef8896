"""Admin API package."""

from .routes import api_router, get_orchestrator

__all__ = ["api_router", "get_orchestrator"]
