"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .agents import AgentOrchestrator, KNOWN_AGENTS
from .config import Settings, load_settings, resolve_db_path
from .conversation import ConversationService
from .health import HealthMonitor
from .llm import IInferenceBackend, create_inference_backend
from .logging_config import get_logger
from .memory import IMemoryService, MemoryService
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...

    @property
    def storage(self) -> IStorage: ...

    @property
    def orchestrator(self) -> AgentOrchestrator: ...

    @property
    def conversations(self) -> ConversationService: ...

    @property
    def health(self) -> HealthMonitor: ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        settings: Settings | None = None,
        backend: IInferenceBackend | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._settings = settings or load_settings()
        self._injected_backend = backend

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._tracker: ITracker | None = None
        self._backend: IInferenceBackend | None = None
        self._memory: IMemoryService | None = None
        self._orchestrator: AgentOrchestrator | None = None
        self._conversations: ConversationService | None = None
        self._health: HealthMonitor | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Tracker (depends on Storage)
        self._tracker = Tracker(self._storage)

        # 3. Inference backend (no internal dependencies)
        self._backend = self._injected_backend or create_inference_backend(
            self._settings.inference_provider, site_url=self._settings.site_url
        )
        logger.info("Inference backend initialized: %s", type(self._backend).__name__)

        # 4. Memory (depends on Storage)
        self._memory = MemoryService(self._storage)

        # 5. Orchestrator (depends on Storage, Memory, backend, Tracker)
        self._orchestrator = AgentOrchestrator(
            storage=self._storage,
            memory_service=self._memory,
            backend=self._backend,
            tracker=self._tracker,
            known_agents=KNOWN_AGENTS,
            default_model=self._settings.default_model,
            max_response_tokens=self._settings.max_response_tokens,
            status_clear_delay=self._settings.status_clear_delay,
            parallel_stagger=self._settings.parallel_stagger,
        )

        # 6. Conversations (depends on Orchestrator, Storage, Tracker)
        self._conversations = ConversationService(
            orchestrator=self._orchestrator,
            storage=self._storage,
            tracker=self._tracker,
            default_agent=self._settings.default_agent,
        )
        self._health = HealthMonitor(self._backend, self._memory, self._storage)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._orchestrator:
            await self._orchestrator.close()
        if self._backend and not self._injected_backend:
            await self._backend.close()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

        self._conversations = None
        self._orchestrator = None
        self._memory = None
        self._backend = None
        self._tracker = None
        self._storage = None
        self._health = None

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._orchestrator:
            await self._orchestrator.reset()
        if self._conversations:
            self._conversations.clear_cache()
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")
        logger.info("Reset complete")

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def orchestrator(self) -> AgentOrchestrator:
        """Get orchestrator instance."""
        if not self._orchestrator:
            raise RuntimeError("Application not started")
        return self._orchestrator

    @property
    def conversations(self) -> ConversationService:
        """Get conversation service instance."""
        if not self._conversations:
            raise RuntimeError("Application not started")
        return self._conversations

    @property
    def health(self) -> HealthMonitor:
        if not self._health:
            raise RuntimeError("Application not started")
        return self._health
