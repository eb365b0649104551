"""Tests for Tracker."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest

from agenthub.tracker import Tracker


class TestTrackerTrack:
    """Tests for Tracker.track() method."""

    @pytest.mark.asyncio
    async def test_track_creates_event(self, tracker, storage):
        """Test that track() creates a TraceEvent."""
        await tracker.track(
            event_type="coordination_planned",
            actor="orchestrator",
            data={"strategy": "parallel"},
            conversation_id="conv1",
        )

        events = await storage.get_trace_events()
        assert len(events) == 1
        assert events[0].event_type == "coordination_planned"
        assert events[0].actor == "orchestrator"
        assert events[0].data == {"strategy": "parallel"}
        assert events[0].conversation_id == "conv1"

    @pytest.mark.asyncio
    async def test_track_generates_timestamp(self, tracker, storage):
        """Test that track() stamps the current time."""
        before = datetime.now(timezone.utc)
        await tracker.track(event_type="test_event", actor="test_actor", data={})
        after = datetime.now(timezone.utc)

        events = await storage.get_trace_events()
        assert events[0].id is not None
        assert before <= events[0].timestamp <= after

    @pytest.mark.asyncio
    async def test_track_multiple_events(self, tracker, storage):
        """Test tracking multiple events, newest first."""
        await tracker.track(event_type="event1", actor="actor1", data={})
        await tracker.track(event_type="event2", actor="actor2", data={})
        await tracker.track(event_type="event3", actor="actor3", data={})

        events = await storage.get_trace_events()
        assert [e.event_type for e in events] == ["event3", "event2", "event1"]

    @pytest.mark.asyncio
    async def test_storage_failure_swallowed(self):
        """Test a failing store never breaks the caller."""
        storage = Mock()
        storage.save_trace_event = AsyncMock(side_effect=RuntimeError("disk full"))

        await Tracker(storage).track(event_type="x", actor="y", data={})

        storage.save_trace_event.assert_awaited_once()
