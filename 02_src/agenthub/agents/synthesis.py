"""Merges multi-agent results into one response."""

import time

from ..models import MULTI_AGENT, AgentResponse

PREVIEW_LENGTH = 120


def _preview(text: str, limit: int = PREVIEW_LENGTH) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


def _elapsed_ms(started_at: int | None) -> int | None:
    if started_at is None:
        return None
    return int(time.time() * 1000) - started_at


def synthesize_parallel(
    outcomes: list[tuple[str, AgentResponse]],
    agents: list[str],
    failed_agents: list[str] | None = None,
    started_at: int | None = None,
) -> AgentResponse:
    """
    Combine parallel results under one heading per agent.

    Args:
        outcomes: (agent, response) pairs of the successful agents, in
            request order.
        agents: Every agent that was attempted, in request order.
        failed_agents: Attempted agents that produced no response.
        started_at: Request start in epoch ms, for processing_time.
    """
    sections = "\n\n---\n\n".join(
        f"## {agent} Analysis\n\n{response.content}" for agent, response in outcomes
    )
    content = (
        f"# Collaborative Analysis\n\n{sections}\n\n---\n\n"
        f"**Coordination:** Parallel processing by {', '.join(agents)}"
    )

    return AgentResponse(
        content=content,
        agent_type=MULTI_AGENT,
        token_usage=sum(response.token_usage for _, response in outcomes),
        metadata={
            "collaboration_mode": "parallel",
            "participating_agents": list(agents),
            "failed_agents": list(failed_agents or []),
            "models": {
                agent: response.metadata.get("model") for agent, response in outcomes
            },
            "processing_time": _elapsed_ms(started_at),
        },
    )


def synthesize_sequential(
    outcomes: list[tuple[str, AgentResponse]],
    started_at: int | None = None,
) -> AgentResponse:
    """Last agent's answer followed by a recap of the whole chain."""
    agents = [agent for agent, _ in outcomes]
    final = outcomes[-1][1]
    recap = "\n".join(
        f"**{agent}:** {_preview(response.content)}" for agent, response in outcomes
    )

    return AgentResponse(
        content=f"{final.content}\n\n---\n\n**Sequential Workflow:**\n{recap}",
        agent_type=MULTI_AGENT,
        token_usage=sum(response.token_usage for _, response in outcomes),
        metadata={
            "collaboration_mode": "sequential",
            "participating_agents": agents,
            "primary_result": agents[-1],
            "models": {
                agent: response.metadata.get("model") for agent, response in outcomes
            },
            "processing_time": _elapsed_ms(started_at),
        },
    )
