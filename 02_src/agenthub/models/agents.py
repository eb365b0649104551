"""Agent orchestration data models."""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Sentinel agent type of synthesized multi-agent responses.
MULTI_AGENT = "Multi-Agent"


@dataclass(frozen=True)
class AgentRequest:
    """A validated chat request addressed to an agent."""

    user_id: str
    conversation_id: str
    content: str
    agent_type: str
    model: str | None = None
    coordination: bool = False

    def with_changes(self, **changes: Any) -> "AgentRequest":
        """Copy of this request re-addressed to another agent or content."""
        return dataclasses.replace(self, **changes)


@dataclass
class AgentConfig:
    """Persona definition of an agent."""

    name: str
    system_prompt: str
    is_active: bool = True
    capabilities: list[str] = field(default_factory=list)
    description: str | None = None
    id: str | None = None


@dataclass
class AgentResponse:
    """Result of an agent execution, or of a multi-agent synthesis."""

    content: str
    agent_type: str
    token_usage: int = 0
    metadata: dict = field(default_factory=dict)


class Strategy(str, Enum):
    """Multi-agent execution strategies."""

    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"
    ENHANCED_SINGLE = "enhanced-single"


@dataclass
class CoordinationPlan:
    """Execution plan for a collaboration. Derived per request, never stored."""

    strategy: Strategy
    agents: list[str]  # execution order
    dependencies: list[str] = field(default_factory=list)
    estimated_time: int = 0  # seconds, informational
    reasoning: str = ""


class CollaborationState(str, Enum):
    """Phases reported to pollers. Absence of a record means idle."""

    IDLE = "idle"
    ANALYZING = "analyzing"
    COORDINATING = "coordinating"
    PROCESSING = "processing"
    SYNTHESIZING = "synthesizing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Progress:
    """Step counter of a collaboration."""

    current: int
    total: int


@dataclass
class CollaborationStatus:
    """Live progress of the request in flight for one conversation."""

    status: CollaborationState
    current_step: str | None = None
    active_agents: list[str] = field(default_factory=list)
    progress: Progress | None = None
    start_time: int | None = None  # epoch ms
    error: str | None = None

    def to_dict(self) -> dict:
        """Plain JSON-friendly representation."""
        return {
            "status": self.status.value,
            "current_step": self.current_step,
            "active_agents": list(self.active_agents),
            "progress": dataclasses.asdict(self.progress) if self.progress else None,
            "start_time": self.start_time,
            "error": self.error,
        }
