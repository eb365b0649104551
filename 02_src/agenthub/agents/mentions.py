"""@mention parsing."""

import re
from typing import Iterable

# "@" followed by one or more words on the same line: "@Project Manager".
MENTION_RE = re.compile(r"@(\w+(?:[ \t]+\w+)*)")


def match_agent(raw: str, known_agents: Iterable[str]) -> str | None:
    """
    Resolve the text following an "@" to a known agent name.

    The longest run of leading words that equals an agent name
    (case-insensitively) wins. Otherwise the first agent, in roster order,
    whose name contains the text or is contained in it.
    """
    roster = list(known_agents)
    by_lower = {}
    for agent in roster:
        by_lower.setdefault(agent.lower(), agent)

    words = raw.split()
    for size in range(len(words), 0, -1):
        candidate = " ".join(words[:size]).lower()
        if candidate in by_lower:
            return by_lower[candidate]

    mention = " ".join(words).lower()
    if not mention:
        return None
    for agent in roster:
        name = agent.lower()
        if mention in name or name in mention:
            return agent
    return None


def parse_mentions(text: str, known_agents: Iterable[str]) -> list[str]:
    """Agents mentioned in ``text``, deduplicated in first-seen order."""
    roster = list(known_agents)
    mentioned: list[str] = []
    for match in MENTION_RE.finditer(text):
        agent = match_agent(match.group(1), roster)
        if agent and agent not in mentioned:
            mentioned.append(agent)
    return mentioned
