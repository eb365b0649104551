"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from agenthub.llm import ChatCompletion  # noqa: E402


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from agenthub.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage."""
    from agenthub.tracker import Tracker

    return Tracker(storage)


@pytest.fixture
def mock_backend():
    """Create mock inference backend."""
    backend = Mock()
    backend.is_configured = True
    backend.chat = AsyncMock(return_value=ChatCompletion(content="Test response", token_usage=42))
    backend.close = AsyncMock()
    return backend


@pytest.fixture
def memory_service(storage):
    """Create MemoryService with storage."""
    from agenthub.memory import MemoryService

    return MemoryService(storage)


@pytest.fixture
def status_store():
    """Create empty collaboration status store."""
    from agenthub.agents import InMemoryCollaborationStatusStore

    return InMemoryCollaborationStatusStore()


@pytest_asyncio.fixture
async def orchestrator(storage, memory_service, mock_backend, tracker, status_store):
    """Create AgentOrchestrator with short delays."""
    from agenthub.agents import AgentOrchestrator

    orch = AgentOrchestrator(
        storage=storage,
        memory_service=memory_service,
        backend=mock_backend,
        tracker=tracker,
        status_store=status_store,
        status_clear_delay=0.05,
        parallel_stagger=0,
    )
    yield orch
    await orch.close()


@pytest.fixture
def conversation_service(orchestrator, storage, tracker):
    """Create ConversationService for testing."""
    from agenthub.conversation import ConversationService

    return ConversationService(orchestrator=orchestrator, storage=storage, tracker=tracker)


@pytest.fixture
def make_request():
    """Factory for AgentRequest with test defaults."""
    from agenthub.models import AgentRequest

    def _make(content: str = "Hello", agent_type: str = "Communication", **kwargs):
        kwargs.setdefault("user_id", "user1")
        kwargs.setdefault("conversation_id", "conv1")
        return AgentRequest(content=content, agent_type=agent_type, **kwargs)

    return _make

