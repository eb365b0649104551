"""Agent orchestration module."""

from .context import build_context
from .defaults import (
    DEFAULT_AGENTS,
    DEFAULT_MODEL,
    KNOWN_AGENTS,
    AgentDefinition,
    default_model_for,
    default_roster,
    fallback_config,
)
from .mentions import parse_mentions
from .orchestrator import AgentOrchestrator
from .planner import CoordinationPlanner
from .resolver import AgentConfigResolver
from .status import (
    ICollaborationStatusStore,
    InMemoryCollaborationStatusStore,
    StatusClearScheduler,
)
from .synthesis import synthesize_parallel, synthesize_sequential
from .workflows import WorkflowRunner

__all__ = [
    "AgentOrchestrator",
    "AgentConfigResolver",
    "CoordinationPlanner",
    "WorkflowRunner",
    "ICollaborationStatusStore",
    "InMemoryCollaborationStatusStore",
    "StatusClearScheduler",
    "AgentDefinition",
    "DEFAULT_AGENTS",
    "DEFAULT_MODEL",
    "KNOWN_AGENTS",
    "build_context",
    "default_model_for",
    "default_roster",
    "fallback_config",
    "parse_mentions",
    "synthesize_parallel",
    "synthesize_sequential",
]
