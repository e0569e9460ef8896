"""Agent Swarm - Main Application Entry Point.

This module builds the swarm from configuration and serves the admin API.
The swarm is started in the application lifespan and stopped, with a bounded
grace period for in-flight think cycles, on shutdown.
"""

import os
import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request

from swarm.agents import default_profiles, load_profiles
from swarm.api.routes import api_router
from swarm.core import (
    BroadcastBus,
    CapabilityDispatcher,
    CapabilityRegistry,
    Orchestrator,
    RunController,
    initial_task,
)
from swarm.core.registry import AgentRegistry
from swarm.environment import (
    EnvironmentBridge,
    EnvironmentCapabilities,
    VoiceOutput,
    create_bridge,
    create_voice,
)
from swarm.models import AgentProfile
from swarm.service import ReasoningService, ReasoningServiceClient, create_credential_provider
from swarm.utils.config import AppConfig, LogFormat, get_config, init_config
from swarm.utils.error_handlers import register_error_handlers
from swarm.utils.logging import (
    clear_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)

logger = get_logger(__name__)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_config_path() -> Path:
    """Get the path to the app.yaml configuration file."""
    return get_project_root() / "configs" / "app.yaml"


def get_agents_config_path() -> Path:
    """Get the path to the agent roster file."""
    return get_project_root() / "configs" / "agents.yaml"


def resolve_profiles(config: AppConfig) -> list[AgentProfile]:
    """Roster from the config, else ``configs/agents.yaml``, else the built-in one."""
    if config.agents:
        return list(config.agents)
    roster_path = get_agents_config_path()
    if roster_path.exists():
        return load_profiles(roster_path)
    return default_profiles()


async def build_orchestrator(
    config: AppConfig,
    service: ReasoningService | None = None,
    bridge: EnvironmentBridge | None = None,
    voice: VoiceOutput | None = None,
    rng: random.Random | None = None,
    profiles: list[AgentProfile] | None = None,
) -> Orchestrator:
    """Assemble a ready-to-start swarm.

    Args:
        config: Application configuration.
        service: Reasoning service; built from ``config.service`` when omitted.
        bridge: Environment bridge; built from ``config.environment`` when omitted.
        voice: Voice output; built from ``config.environment`` when omitted.
        rng: Source of style seeds.
        profiles: Agent roster; resolved from configuration when omitted.

    Raises:
        MissingConfigurationError: If no service is given and the endpoint or
            assistant is not configured.
    """
    if service is None:
        config.require_service()
        service = ReasoningServiceClient.from_config(
            config.service, create_credential_provider(config.credentials)
        )

    roster = profiles if profiles is not None else resolve_profiles(config)
    bus = BroadcastBus(max_history=config.broadcast.max_history)

    environment = EnvironmentCapabilities(
        bus,
        bridge=bridge or create_bridge(config.environment.bridge, config.environment.command_timeout),
        voice=voice or create_voice(config.environment.voice),
        workspace=config.capabilities.workspace,
        read_limit=config.capabilities.read_limit,
        output_limit=config.capabilities.output_limit,
        profiles={profile.role: profile for profile in roster},
        rng=rng,
    )
    capabilities = CapabilityRegistry()
    environment.register(capabilities)

    controller = RunController(
        service,
        CapabilityDispatcher(capabilities, handler_timeout=config.capabilities.handler_timeout),
        capabilities,
        poll_interval=config.polling.interval_seconds,
        max_attempts=config.polling.max_attempts,
    )

    orchestrator = Orchestrator(
        registry=AgentRegistry(),
        capabilities=capabilities,
        controller=controller,
        bus=bus,
        environment=environment,
        prompt_history=config.broadcast.prompt_history,
        thought_preview=config.broadcast.thought_preview,
        check_in_interval=config.scheduler.check_in_interval,
        shutdown_grace=config.scheduler.shutdown_grace,
        startup_task=initial_task(config.app.initial_task) if config.app.initial_task else None,
    )
    for profile in roster:
        await orchestrator.add_agent(profile)

    bus.subscribe(environment.relay, name="environment")
    return orchestrator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Builds and starts the swarm on startup; stops it on shutdown.
    """
    config: AppConfig = app.state.config
    service: ReasoningService | None = getattr(app.state, "service", None)

    logger.info(
        "Starting Agent Swarm",
        app_name=config.app.name,
        version=config.app.version,
        environment=config.app.env.value,
    )

    orchestrator = await build_orchestrator(
        config,
        service=service,
        bridge=getattr(app.state, "bridge", None),
        voice=getattr(app.state, "voice", None),
    )
    app.state.orchestrator = orchestrator
    await orchestrator.start()

    logger.info("Agent Swarm started", agents=len(orchestrator.registry))

    try:
        yield
    finally:
        logger.info("Shutting down Agent Swarm")
        await orchestrator.stop(config.scheduler.shutdown_grace)
        await orchestrator.controller.service.close()
        app.state.orchestrator = None
        logger.info("Agent Swarm shutdown complete")


def create_app(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
    config: AppConfig | None = None,
    service: ReasoningService | None = None,
    bridge: EnvironmentBridge | None = None,
    voice: VoiceOutput | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: Optional path to YAML configuration file.
        env_file: Optional path to .env file.
        config: Ready configuration; skips file and environment loading.
        service: Reasoning service to use instead of the HTTP client.
        bridge: Environment bridge override.
        voice: Voice output override.

    Returns:
        Configured FastAPI application instance.
    """
    if config is None:
        config_path = config_path or os.getenv("SWARM_CONFIG")
        env_file = env_file or os.getenv("SWARM_ENV_FILE")
        if config_path is None:
            default_config_path = get_config_path()
            if default_config_path.exists():
                config_path = default_config_path
        config = init_config(yaml_path=config_path, env_file=env_file)

    setup_logging(
        level=config.logging.level,
        json_format=config.logging.format == LogFormat.JSON,
    )

    app = FastAPI(
        title=config.app.name,
        description="Agent Swarm - independent agents thinking against a shared reasoning service",
        version=config.app.version,
        docs_url="/docs" if config.app.debug else None,
        redoc_url="/redoc" if config.app.debug else None,
        openapi_url="/openapi.json" if config.app.debug else None,
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.service = service
    app.state.bridge = bridge
    app.state.voice = voice
    app.state.orchestrator = None

    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Any:
        """Add request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id
        set_correlation_id(request_id)

        logger.info("Request received", method=request.method, path=str(request.url.path))
        response = await call_next(request)
        logger.info(
            "Response sent",
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
        )

        response.headers["X-Request-ID"] = request_id
        clear_correlation_id()
        return response

    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, Any]:
        """Root endpoint with basic information."""
        return {
            "name": config.app.name,
            "version": config.app.version,
            "status": "running",
            "docs": "/docs" if config.app.debug else "disabled",
        }

    return app


def run_server(reload: bool = False) -> None:
    """Serve the admin API (and thereby the swarm) with uvicorn."""
    import uvicorn

    try:
        config = get_config()
    except RuntimeError:
        config = init_config(get_config_path() if get_config_path().exists() else None)

    uvicorn.run(
        "swarm.main:create_app",
        factory=True,
        host=config.app.host,
        port=config.app.port,
        reload=reload,
        reload_dirs=["swarm"] if reload else None,
        log_level=config.logging.level.lower(),
    )


if __name__ == "__main__":
    run_server()
