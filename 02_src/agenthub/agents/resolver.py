"""Agent config resolution with built-in fallbacks."""

from ..logging_config import get_logger
from ..models import AgentConfig
from ..storage import IStorage
from .defaults import fallback_config

logger = get_logger(__name__)


class AgentConfigResolver:
    """Looks up agent configs in storage; never raises."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def resolve(self, name: str) -> AgentConfig:
        """Stored config for ``name``, or a synthesized default."""
        try:
            config = await self._storage.get_agent_config_by_name(name)
        except Exception as e:
            logger.warning("Agent config lookup failed for %s, using default: %s", name, e)
            return fallback_config(name)

        if config is None:
            logger.debug("No stored config for %s, using default", name)
            return fallback_config(name)
        return config
