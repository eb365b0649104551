"""Chooses how several agents collaborate on one request."""

import re

from ..models import CoordinationPlan, Strategy

ANALYSIS_RE = re.compile(r"\b(?:analy[sz]e|review|assess|evaluate|examine)", re.IGNORECASE)
CREATIVE_RE = re.compile(r"\b(?:write|create|generate|design|compose)", re.IGNORECASE)
IMPLEMENTATION_RE = re.compile(r"\b(?:code|develop|implement|build|program)", re.IGNORECASE)

# Agent whose output the others build on.
LEAD_AGENT = "Analyst"


class CoordinationPlanner:
    """Stateless, deterministic strategy classification."""

    def plan(self, agents: list[str], content: str) -> CoordinationPlan:
        """
        Pick parallel, sequential or enhanced-single execution.

        Analysis that creative or implementation work depends on runs first
        (sequential, Analyst leading). Otherwise up to two agents without an
        analysis phase run in parallel. Everything else goes to one agent
        with multi-specialty context.
        """
        has_analysis = bool(ANALYSIS_RE.search(content))
        has_creative = bool(CREATIVE_RE.search(content))
        has_implementation = bool(IMPLEMENTATION_RE.search(content))

        if LEAD_AGENT in agents and len(agents) > 1 and (has_creative or has_implementation):
            ordered = [LEAD_AGENT] + [agent for agent in agents if agent != LEAD_AGENT]
            followers = "/".join(ordered[1:])
            return CoordinationPlan(
                strategy=Strategy.SEQUENTIAL,
                agents=ordered,
                dependencies=[f"{LEAD_AGENT} -> {followers}"],
                estimated_time=40,
                reasoning="Analysis required before creative/implementation work",
            )

        if len(agents) <= 2 and not has_analysis:
            return CoordinationPlan(
                strategy=Strategy.PARALLEL,
                agents=list(agents),
                estimated_time=25,
                reasoning="Independent tasks suitable for parallel processing",
            )

        return CoordinationPlan(
            strategy=Strategy.ENHANCED_SINGLE,
            agents=list(agents),
            estimated_time=20,
            reasoning="Single agent with multi-specialty context most efficient",
        )
