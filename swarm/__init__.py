"""Agent Swarm - independent agents thinking against a shared reasoning service."""

__version__ = "0.1.0"
