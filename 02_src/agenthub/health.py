"""Service health monitoring."""

import time
from typing import Any

from .llm import IInferenceBackend
from .logging_config import get_logger
from .memory import IMemoryService
from .storage import IStorage

logger = get_logger(__name__)


class HealthMonitor:
    """Aggregates the state of the inference backend, memory and storage."""

    def __init__(
        self,
        backend: IInferenceBackend,
        memory_service: IMemoryService,
        storage: IStorage,
    ):
        self._backend = backend
        self._memory = memory_service
        self._storage = storage
        self._last_check: dict[str, Any] | None = None

    async def _storage_ok(self) -> bool:
        try:
            await self._storage.get_active_agent_configs()
            return True
        except Exception as e:
            logger.warning("Storage health probe failed: %s", e)
            return False

    async def check_health(self) -> dict[str, Any]:
        """
        Check every service.

        Returns:
            ``{"status": "healthy" | "degraded" | "down", "timestamp": <epoch ms>,
            "services": {"inference": bool, "memory": bool, "storage": bool}}``
        """
        timestamp = int(time.time() * 1000)
        try:
            services = {
                "inference": bool(self._backend.is_configured),
                "memory": self._memory.get_service_status().get("status") == "active",
                "storage": await self._storage_ok(),
            }
            status = "healthy" if all(services.values()) else "degraded"
        except Exception as e:
            logger.error("Health check failed: %s", e, exc_info=True)
            services = {"inference": False, "memory": False, "storage": False}
            status = "down"

        self._last_check = {"status": status, "timestamp": timestamp, "services": services}
        return self._last_check

    def get_last_status(self) -> dict[str, Any] | None:
        return self._last_check
