"""Tracker implementation for creating TraceEvents."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import TraceEvent
from ..storage import IStorage

logger = get_logger(__name__)


class ITracker(Protocol):
    """Records TraceEvents for the observability API."""

    async def track(
        self,
        event_type: str,
        actor: str,
        data: dict,
        conversation_id: str | None = None,
    ) -> None:
        """Create TraceEvent and save to Storage."""
        ...


class Tracker:
    """Creates TraceEvents on direct track() calls.

    Tracing is best-effort: a storage failure is logged and never reaches
    the request that produced the event.
    """

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def track(
        self,
        event_type: str,
        actor: str,
        data: dict,
        conversation_id: str | None = None,
    ) -> None:
        """Create TraceEvent and save to Storage."""
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            conversation_id=conversation_id,
            timestamp=datetime.now(timezone.utc),
        )
        try:
            await self._storage.save_trace_event(trace_event)
        except Exception as e:
            logger.warning("Failed to record trace event %s: %s", event_type, e)
