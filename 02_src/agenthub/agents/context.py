"""Builds the message list sent to the inference backend."""

from ..models import ChatMessage, MemoryItem, Message

HISTORY_WINDOW = 10
MEMORY_LIMIT = 3
MEMORY_PREAMBLE = "Relevant context from previous conversations:"


def build_context(
    system_prompt: str,
    history: list[Message],
    memories: list[MemoryItem],
    current_text: str,
) -> list[ChatMessage]:
    """
    Assemble system prompt, memories, recent history and the current message.

    Args:
        system_prompt: Persona prompt of the executing agent.
        history: Conversation messages in chronological order.
        memories: Memory search results, most relevant first.
        current_text: The user's current message.

    Returns:
        Ordered messages: one system message, up to HISTORY_WINDOW history
        turns, then the current user message. Input size is otherwise not
        bounded here; the backend caps the response length.
    """
    system_content = system_prompt
    if memories:
        excerpts = "\n\n".join(memory.content for memory in memories[:MEMORY_LIMIT])
        system_content = f"{system_prompt}\n\n{MEMORY_PREAMBLE}\n{excerpts}"

    messages: list[ChatMessage] = [{"role": "system", "content": system_content}]

    recent = [msg for msg in history if msg.content][-HISTORY_WINDOW:]
    for msg in recent:
        if msg.user_id:
            messages.append({"role": "user", "content": msg.content})
        elif msg.agent_type:
            messages.append({"role": "assistant", "content": msg.content})

    messages.append({"role": "user", "content": current_text})
    return messages
