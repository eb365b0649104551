"""In-memory message cache."""

from collections import defaultdict, deque

from ..models import Message

MAX_MESSAGES_PER_CONVERSATION = 100


class MessageCache:
    """Last messages of each conversation, kept when the database is unavailable."""

    def __init__(self, max_messages: int = MAX_MESSAGES_PER_CONVERSATION):
        self._max_messages = max_messages
        self._messages: dict[str, deque[Message]] = defaultdict(
            lambda: deque(maxlen=self._max_messages)
        )

    def add_message(self, message: Message) -> None:
        """Append a message, evicting the oldest beyond the bound."""
        self._messages[message.conversation_id].append(message)

    def get_messages(self, conversation_id: str, limit: int = 50) -> list[Message]:
        """Last ``limit`` cached messages in chronological order."""
        messages = self._messages.get(conversation_id)
        if not messages or limit <= 0:
            return []
        return list(messages)[-limit:]

    def clear(self, conversation_id: str | None = None) -> None:
        """Drop one conversation, or everything."""
        if conversation_id is None:
            self._messages.clear()
        else:
            self._messages.pop(conversation_id, None)

    def __len__(self) -> int:
        return sum(len(messages) for messages in self._messages.values())
