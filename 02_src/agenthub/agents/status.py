"""Per-conversation collaboration status for UI polling."""

import asyncio
import copy
import dataclasses
from typing import Any, Protocol

from ..logging_config import get_logger
from ..models import CollaborationState, CollaborationStatus

logger = get_logger(__name__)

_STATUS_FIELDS = frozenset(f.name for f in dataclasses.fields(CollaborationStatus))


class ICollaborationStatusStore(Protocol):
    """Status records keyed by conversation id. A missing record means idle.

    Implementations must apply each set() as one atomic shallow merge.
    """

    def get(self, conversation_id: str) -> CollaborationStatus | None:
        """Snapshot of the record, or None when idle."""
        ...

    def set(self, conversation_id: str, **fields: Any) -> None:
        """Shallow-merge ``fields`` onto the record, creating it if needed."""
        ...

    def clear(self, conversation_id: str) -> None:
        """Delete the record."""
        ...


class InMemoryCollaborationStatusStore:
    """Process-local status store.

    The event loop never preempts a synchronous method, so each set() is
    atomic with respect to other tasks. Concurrent requests on the same
    conversation overwrite each other's fields (last writer wins).
    """

    def __init__(self):
        self._records: dict[str, CollaborationStatus] = {}

    def get(self, conversation_id: str) -> CollaborationStatus | None:
        record = self._records.get(conversation_id)
        return copy.deepcopy(record) if record else None

    def set(self, conversation_id: str, **fields: Any) -> None:
        unknown = set(fields) - _STATUS_FIELDS
        if unknown:
            raise AttributeError(f"Unknown status fields: {sorted(unknown)}")

        if "status" in fields:
            fields["status"] = CollaborationState(fields["status"])

        record = self._records.get(conversation_id)
        if record is None:
            fields.setdefault("status", CollaborationState.IDLE)
            self._records[conversation_id] = CollaborationStatus(**fields)
            return

        for name, value in fields.items():
            setattr(record, name, value)

    def clear(self, conversation_id: str) -> None:
        self._records.pop(conversation_id, None)

    def __len__(self) -> int:
        return len(self._records)


class StatusClearScheduler:
    """Deletes a conversation's status a fixed delay after its last request ends.

    Requests bracket their work with begin() and end(). A clear is only
    scheduled once no request for the conversation is in flight, and begin()
    drops any pending clear, so a timer never wipes a live status.
    """

    def __init__(self, store: ICollaborationStatusStore, delay: float = 3.0):
        self._store = store
        self._delay = delay
        self._tasks: dict[str, asyncio.Task] = {}
        self._in_flight: dict[str, int] = {}

    def begin(self, conversation_id: str) -> None:
        """Mark a request for ``conversation_id`` as started."""
        self.cancel(conversation_id)
        self._in_flight[conversation_id] = self._in_flight.get(conversation_id, 0) + 1

    def end(self, conversation_id: str) -> None:
        """Mark a request as finished; schedule the clear if it was the last one."""
        remaining = self._in_flight.get(conversation_id, 0) - 1
        if remaining > 0:
            self._in_flight[conversation_id] = remaining
            logger.debug(
                "%d request(s) still in flight for %s, keeping status",
                remaining,
                conversation_id,
            )
            return
        self._in_flight.pop(conversation_id, None)
        self.schedule(conversation_id)

    def in_flight(self, conversation_id: str) -> int:
        return self._in_flight.get(conversation_id, 0)

    def schedule(self, conversation_id: str) -> None:
        """Clear the status of ``conversation_id`` after the delay."""
        self.cancel(conversation_id)
        task = asyncio.create_task(self._clear_later(conversation_id))
        self._tasks[conversation_id] = task
        task.add_done_callback(lambda t: self._forget(conversation_id, t))

    def cancel(self, conversation_id: str) -> bool:
        """Drop a pending clear. Returns True if one was pending."""
        task = self._tasks.pop(conversation_id, None)
        if task and not task.done():
            task.cancel()
            return True
        return False

    def is_pending(self, conversation_id: str) -> bool:
        task = self._tasks.get(conversation_id)
        return bool(task and not task.done())

    async def shutdown(self) -> None:
        """Cancel every pending clear."""
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def flush(self) -> None:
        """Cancel every pending clear and clear those statuses now."""
        conversation_ids = list(self._tasks)
        await self.shutdown()
        for conversation_id in conversation_ids:
            self._store.clear(conversation_id)

    async def _clear_later(self, conversation_id: str) -> None:
        await asyncio.sleep(self._delay)
        self._store.clear(conversation_id)
        logger.debug("Cleared collaboration status for %s", conversation_id)

    def _forget(self, conversation_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(conversation_id) is task:
            del self._tasks[conversation_id]
