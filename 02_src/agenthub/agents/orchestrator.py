"""AgentOrchestrator: entry point of agent request processing."""

import time
from typing import Any, Iterable

from ..llm import IInferenceBackend
from ..logging_config import get_logger
from ..memory import IMemoryService
from ..models import (
    AgentRequest,
    AgentResponse,
    CollaborationState,
    CollaborationStatus,
    MemoryContext,
    Message,
    MemoryItem,
    Progress,
)
from ..storage import IStorage
from ..tracker import ITracker
from .context import build_context
from .defaults import DEFAULT_MODEL, KNOWN_AGENTS, default_model_for
from .mentions import parse_mentions
from .planner import CoordinationPlanner
from .resolver import AgentConfigResolver
from .status import (
    ICollaborationStatusStore,
    InMemoryCollaborationStatusStore,
    StatusClearScheduler,
)
from .workflows import WorkflowRunner

logger = get_logger(__name__)

ACTOR = "orchestrator"
MEMORY_SIMILARITY_THRESHOLD = 0.7
MEMORY_SEARCH_LIMIT = 5


def _now_ms() -> int:
    return int(time.time() * 1000)


class AgentOrchestrator:
    """Routes a request to one agent or coordinates several.

    ``process_agent_request`` never raises: failures come back as an
    AgentResponse with ``metadata["error"] = True``.
    """

    def __init__(
        self,
        storage: IStorage,
        memory_service: IMemoryService,
        backend: IInferenceBackend,
        tracker: ITracker | None = None,
        status_store: ICollaborationStatusStore | None = None,
        known_agents: Iterable[str] = KNOWN_AGENTS,
        default_model: str = DEFAULT_MODEL,
        max_response_tokens: int = 2000,
        status_clear_delay: float = 3.0,
        parallel_stagger: float = 0.5,
    ):
        self._storage = storage
        self._memory = memory_service
        self._backend = backend
        self._tracker = tracker
        self._known_agents = tuple(known_agents)
        self._default_model = default_model
        self._max_response_tokens = max_response_tokens

        self._status = status_store or InMemoryCollaborationStatusStore()
        self._clear_scheduler = StatusClearScheduler(self._status, status_clear_delay)
        self._resolver = AgentConfigResolver(storage)
        self._planner = CoordinationPlanner()
        self._workflows = WorkflowRunner(self.execute_agent, self._status, parallel_stagger)

    # Collaboration status
    def get_collaboration_status(self, conversation_id: str) -> CollaborationStatus | None:
        """Status of the request in flight, or None when idle."""
        return self._status.get(conversation_id)

    def set_collaboration_status(self, conversation_id: str, **fields: Any) -> None:
        """Shallow-merge fields onto the conversation's status."""
        self._status.set(conversation_id, **fields)

    def clear_collaboration_status(self, conversation_id: str) -> None:
        """Delete the conversation's status."""
        self._status.clear(conversation_id)

    async def close(self) -> None:
        """Cancel pending status clears."""
        await self._clear_scheduler.shutdown()

    async def reset(self) -> None:
        """Clear every status that is waiting for its delayed clear."""
        await self._clear_scheduler.flush()

    async def _track(self, event_type: str, request: AgentRequest, data: dict) -> None:
        if self._tracker:
            await self._tracker.track(
                event_type, ACTOR, data, conversation_id=request.conversation_id
            )

    # Entry point
    async def process_agent_request(self, request: AgentRequest) -> AgentResponse:
        """Process a chat request and always return a well-formed response."""
        conversation_id = request.conversation_id

        # The status belongs to the newest request; no clear runs while it is in flight.
        self._clear_scheduler.begin(conversation_id)
        self._status.clear(conversation_id)
        self._status.set(
            conversation_id,
            status=CollaborationState.PROCESSING,
            current_step="Processing your request",
            start_time=_now_ms(),
        )

        try:
            mentions = parse_mentions(request.content, self._known_agents)
            await self._track(
                "agent_request_started",
                request,
                {
                    "agent_type": request.agent_type,
                    "mentions": mentions,
                    "coordination": request.coordination,
                },
            )

            if len(mentions) > 1:
                response = await self._collaborate(request, mentions)
            else:
                target = request.with_changes(agent_type=mentions[0]) if mentions else request
                if mentions:
                    logger.info(
                        "Routing to mentioned agent %s", target.agent_type,
                        extra={"conversation_id": conversation_id},
                    )
                response = await self.execute_agent(target)

            self._status.set(
                conversation_id,
                status=CollaborationState.COMPLETED,
                current_step="Response ready",
                error=None,
            )
            await self._track(
                "agent_request_completed",
                request,
                {"agent_type": response.agent_type, "token_usage": response.token_usage},
            )
            return response

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(
                "Agent request failed: %s", message,
                exc_info=True,
                extra={"conversation_id": conversation_id},
            )
            self._status.set(conversation_id, status=CollaborationState.FAILED, error=message)
            await self._track("agent_request_failed", request, {"error": message})
            return AgentResponse(
                content="I encountered an error processing your request. Please try again.",
                agent_type=request.agent_type,
                token_usage=0,
                metadata={"error": True},
            )

        finally:
            self._clear_scheduler.end(conversation_id)

    async def _collaborate(self, request: AgentRequest, agents: list[str]) -> AgentResponse:
        """Plan and run a multi-agent workflow, degrading to one agent on failure."""
        conversation_id = request.conversation_id
        self._status.set(
            conversation_id,
            status=CollaborationState.ANALYZING,
            current_step="Planning agent coordination strategy",
            active_agents=list(agents),
            progress=Progress(current=0, total=len(agents) + 1),
        )

        plan = self._planner.plan(agents, request.content)
        logger.info(
            "Coordinating %s with %s strategy: %s",
            ", ".join(plan.agents),
            plan.strategy.value,
            plan.reasoning,
            extra={"conversation_id": conversation_id, "strategy": plan.strategy.value},
        )
        await self._track(
            "coordination_planned",
            request,
            {
                "strategy": plan.strategy.value,
                "agents": plan.agents,
                "dependencies": plan.dependencies,
                "estimated_time": plan.estimated_time,
                "reasoning": plan.reasoning,
            },
        )

        try:
            return await self._workflows.run(request, plan)
        except Exception as e:
            message = str(e) or "Collaboration failed"
            logger.error(
                "%s workflow failed, falling back to a single agent: %s",
                plan.strategy.value,
                message,
                exc_info=True,
                extra={"conversation_id": conversation_id},
            )
            self._status.set(conversation_id, status=CollaborationState.FAILED, error=message)
            await self._track(
                "workflow_failed",
                request,
                {"strategy": plan.strategy.value, "error": message},
            )
            return await self._workflows.run_enhanced_single(request, plan.agents)

    # Single agent
    async def execute_agent(self, request: AgentRequest) -> AgentResponse:
        """
        Run ``request.agent_type`` against the inference backend.

        Missing config, history or memories degrade the context; a backend
        failure propagates.
        """
        agent = request.agent_type
        config = await self._resolver.resolve(agent)
        model = request.model or default_model_for(agent, self._default_model)

        history: list[Message] = []
        try:
            history = await self._storage.get_messages_by_conversation_id(
                request.conversation_id
            )
        except Exception as e:
            logger.warning("Conversation history unavailable, proceeding without it: %s", e)

        memories: list[MemoryItem] = []
        try:
            memories = await self._memory.search_memories(
                request.user_id,
                request.content,
                MEMORY_SIMILARITY_THRESHOLD,
                MEMORY_SEARCH_LIMIT,
            )
        except Exception as e:
            logger.warning("Memory service unavailable, proceeding without context: %s", e)

        messages = build_context(config.system_prompt, history, memories, request.content)
        completion = await self._backend.chat(messages, model, self._max_response_tokens)

        try:
            await self._memory.store_memory(
                MemoryContext(
                    user_id=request.user_id,
                    content=f"User: {request.content}\nAgent ({agent}): {completion.content}",
                    conversation_id=request.conversation_id,
                    agent_type=agent,
                    metadata={"model": model, "token_usage": completion.token_usage},
                )
            )
        except Exception as e:
            logger.warning("Failed to store memory, continuing without persistence: %s", e)

        return AgentResponse(
            content=completion.content,
            agent_type=agent,
            token_usage=completion.token_usage,
            metadata={
                "relevant_context_count": len(memories),
                "conversation_length": len(history),
                "model": model,
            },
        )
