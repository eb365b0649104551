"""Observability data models."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class TraceEvent:
    """One recorded step of request handling, served by /api/trace-events."""

    id: str
    event_type: str  # e.g. "agent_request_started", "coordination_planned"
    actor: str  # "orchestrator", "conversation", ...
    timestamp: datetime
    data: dict = field(default_factory=dict)
    conversation_id: str | None = None
