"""Agent Hub: multi-agent chat orchestration."""

from .agents import AgentOrchestrator
from .app import Application, IApplication
from .conversation import ConversationService, MessageCache
from .exceptions import AgentHubError, InferenceError, WorkflowError
from .health import HealthMonitor
from .llm import AnthropicBackend, IInferenceBackend, OpenRouterBackend
from .memory import IMemoryService, MemoryService
from .models import (
    AgentConfig,
    AgentRequest,
    AgentResponse,
    CollaborationState,
    CollaborationStatus,
    Conversation,
    CoordinationPlan,
    MemoryItem,
    Message,
    Strategy,
    TraceEvent,
)
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "AgentRequest",
    "AgentConfig",
    "AgentResponse",
    "Strategy",
    "CoordinationPlan",
    "CollaborationState",
    "CollaborationStatus",
    "Conversation",
    "Message",
    "MemoryItem",
    "TraceEvent",
    # Errors
    "AgentHubError",
    "InferenceError",
    "WorkflowError",
    # Components
    "AgentOrchestrator",
    "ConversationService",
    "MessageCache",
    "HealthMonitor",
    "IInferenceBackend",
    "OpenRouterBackend",
    "AnthropicBackend",
    "IMemoryService",
    "MemoryService",
    "IStorage",
    "Storage",
    "ITracker",
    "Tracker",
]
