"""Admin API routes.

Every route reads the orchestrator from ``app.state``; there are no module
globals.
"""

from fastapi import APIRouter, Depends, Query, Request, status

from swarm.core.orchestrator import Orchestrator
from swarm.core.registry import AgentNotFoundError
from swarm.models import Task
from swarm.utils.exceptions import ConflictError, NotFoundError, ServiceUnavailableError

from .schemas import (
    AgentResponse,
    APIResponse,
    BroadcastResponse,
    CapabilityResponse,
    HealthResponse,
    SubmitTaskRequest,
    TaskSubmissionResponse,
    ThinkResponse,
)

api_router = APIRouter(prefix="/api/v1")


def get_orchestrator(request: Request) -> Orchestrator:
    """Dependency returning the running orchestrator.

    Raises:
        ServiceUnavailableError: If the swarm has not been started.
    """
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise ServiceUnavailableError("swarm")
    return orchestrator


@api_router.get("/health", tags=["Health"])
async def health(
    request: Request,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> APIResponse:
    config = request.app.state.config
    health = HealthResponse(
        status="healthy" if orchestrator.running else "stopped",
        version=config.app.version,
        swarm=await orchestrator.status(),
    )
    return APIResponse(success=True, data=health.model_dump(mode="json"))


@api_router.get("/agents", tags=["Agents"])
async def list_agents(orchestrator: Orchestrator = Depends(get_orchestrator)) -> APIResponse:
    agents = [AgentResponse.from_info(info) for info in await orchestrator.registry.list_info()]
    return APIResponse(
        success=True,
        data=[agent.model_dump(mode="json") for agent in agents],
        metadata={"total": len(agents)},
    )


@api_router.get("/agents/{role}", tags=["Agents"])
async def get_agent(role: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> APIResponse:
    try:
        agent = await orchestrator.registry.get(role)
    except AgentNotFoundError as e:
        raise NotFoundError("Agent", role) from e
    return APIResponse(success=True, data=AgentResponse.from_info(agent.info()).model_dump(mode="json"))


@api_router.post("/agents/{role}/think", status_code=status.HTTP_202_ACCEPTED, tags=["Agents"])
async def trigger_think(role: str, orchestrator: Orchestrator = Depends(get_orchestrator)) -> APIResponse:
    if role not in orchestrator.registry:
        raise NotFoundError("Agent", role)
    if not orchestrator.running:
        raise ServiceUnavailableError("scheduler", "Scheduler is not running")
    if not orchestrator.trigger(role):
        raise ConflictError(f"Agent {role} is already thinking", details={"role": role})
    return APIResponse(success=True, data=ThinkResponse(role=role, triggered=True).model_dump())


@api_router.post("/tasks", status_code=status.HTTP_201_CREATED, tags=["Tasks"])
async def submit_task(
    request: SubmitTaskRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> APIResponse:
    task = Task(
        description=request.description,
        required_skills=tuple(request.required_skills),
        priority=request.priority,
    )
    agent = await orchestrator.submit_task(task)
    response = TaskSubmissionResponse(
        task_id=task.id,
        routed=agent is not None,
        assigned_to=agent.role if agent else None,
    )
    return APIResponse(success=True, data=response.model_dump())


@api_router.get("/broadcasts", tags=["Broadcasts"])
async def list_broadcasts(
    limit: int = Query(default=50, ge=1, le=1000),
    exclude_sender: str | None = Query(default=None),
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> APIResponse:
    messages = orchestrator.bus.history(limit=limit, exclude_sender=exclude_sender)
    return APIResponse(
        success=True,
        data=[BroadcastResponse.from_message(m).model_dump(mode="json") for m in messages],
        metadata={"total": orchestrator.bus.message_count},
    )


@api_router.get("/capabilities", tags=["Capabilities"])
async def list_capabilities(orchestrator: Orchestrator = Depends(get_orchestrator)) -> APIResponse:
    registry = orchestrator.capabilities
    capabilities = []
    for name in registry.names():
        spec = registry.get_spec(name)
        capabilities.append(
            CapabilityResponse(
                name=name,
                description=spec.description if spec else "",
                has_handler=registry.has_handler(name),
            ).model_dump()
        )
    return APIResponse(success=True, data=capabilities, metadata={"total": len(capabilities)})
