"""Parallel, sequential and enhanced-single agent workflows."""

import asyncio
from typing import Awaitable, Callable

from ..exceptions import WorkflowError
from ..logging_config import get_logger
from ..models import (
    AgentRequest,
    AgentResponse,
    CollaborationState,
    CoordinationPlan,
    Progress,
    Strategy,
)
from .status import ICollaborationStatusStore
from .synthesis import synthesize_parallel, synthesize_sequential

logger = get_logger(__name__)

# Runs one agent for one request; raises when the backend fails.
AgentExecutor = Callable[[AgentRequest], Awaitable[AgentResponse]]


class WorkflowRunner:
    """Executes a CoordinationPlan, reporting progress to the status store."""

    def __init__(
        self,
        execute: AgentExecutor,
        status: ICollaborationStatusStore,
        stagger: float = 0.5,
    ):
        self._execute = execute
        self._status = status
        self._stagger = stagger

    async def run(self, request: AgentRequest, plan: CoordinationPlan) -> AgentResponse:
        """Dispatch to the workflow named by ``plan.strategy``."""
        if plan.strategy is Strategy.PARALLEL:
            return await self.run_parallel(request, plan.agents)
        if plan.strategy is Strategy.SEQUENTIAL:
            return await self.run_sequential(request, plan.agents)
        return await self.run_enhanced_single(request, plan.agents)

    def _started_at(self, conversation_id: str) -> int | None:
        record = self._status.get(conversation_id)
        return record.start_time if record else None

    async def run_parallel(self, request: AgentRequest, agents: list[str]) -> AgentResponse:
        """
        Run every agent concurrently and keep whatever succeeds.

        Agent ``i`` starts after ``stagger * i`` seconds to spread backend
        load. Failures do not cancel the other agents.

        Raises:
            WorkflowError: If no agent succeeded.
        """
        conversation_id = request.conversation_id
        self._status.set(
            conversation_id,
            status=CollaborationState.PROCESSING,
            current_step="Executing parallel agent workflow",
            active_agents=list(agents),
            progress=Progress(current=1, total=len(agents) + 1),
        )

        async def run_one(index: int, agent: str) -> AgentResponse:
            if index and self._stagger:
                await asyncio.sleep(self._stagger * index)
            return await self._execute(request.with_changes(agent_type=agent))

        results = await asyncio.gather(
            *(run_one(i, agent) for i, agent in enumerate(agents)),
            return_exceptions=True,
        )

        outcomes: list[tuple[str, AgentResponse]] = []
        failed: list[str] = []
        for agent, result in zip(agents, results):
            if isinstance(result, BaseException):
                logger.warning("Parallel agent %s failed: %s", agent, result)
                failed.append(agent)
            else:
                outcomes.append((agent, result))

        if not outcomes:
            raise WorkflowError("All parallel agents failed")

        self._status.set(
            conversation_id,
            status=CollaborationState.SYNTHESIZING,
            current_step="Combining parallel analysis results",
        )
        return synthesize_parallel(
            outcomes, agents, failed, started_at=self._started_at(conversation_id)
        )

    async def run_sequential(self, request: AgentRequest, agents: list[str]) -> AgentResponse:
        """
        Run agents one after another, each seeing the previous answer.

        A failing agent aborts the chain; its exception propagates.
        """
        conversation_id = request.conversation_id
        content = request.content
        outcomes: list[tuple[str, AgentResponse]] = []

        for index, agent in enumerate(agents):
            self._status.set(
                conversation_id,
                status=CollaborationState.PROCESSING,
                current_step=f"{agent} processing ({index + 1}/{len(agents)})",
                active_agents=[agent],
                progress=Progress(current=index + 1, total=len(agents) + 1),
            )

            result = await self._execute(
                request.with_changes(agent_type=agent, content=content)
            )
            outcomes.append((agent, result))

            content = f"{request.content}\n\n**Previous {agent} Analysis:**\n{result.content}"

        self._status.set(
            conversation_id,
            status=CollaborationState.SYNTHESIZING,
            current_step="Combining sequential workflow results",
        )
        return synthesize_sequential(outcomes, started_at=self._started_at(conversation_id))

    async def run_enhanced_single(
        self, request: AgentRequest, agents: list[str]
    ) -> AgentResponse:
        """One agent answers on behalf of every requested specialty."""
        primary = agents[0] if agents else request.agent_type
        specialties = agents or [primary]

        self._status.set(
            request.conversation_id,
            status=CollaborationState.PROCESSING,
            current_step=f"{primary} processing with multi-agent context",
            active_agents=[primary],
            progress=None,
            error=None,
        )

        enhanced_content = (
            f"{request.content}\n\n**Multi-Agent Context:** This request involves "
            f"expertise from {', '.join(specialties)}. Provide comprehensive analysis "
            "covering all these perspectives."
        )
        response = await self._execute(
            request.with_changes(agent_type=primary, content=enhanced_content)
        )
        response.metadata.update(
            {
                "collaboration_mode": Strategy.ENHANCED_SINGLE.value,
                "requested_agents": list(specialties),
            }
        )
        return response
