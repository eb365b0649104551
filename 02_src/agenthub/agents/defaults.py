"""Built-in agent roster.

This is the one lookup table for fallback prompts and default models. The
config resolver, the workflow runner and roster seeding all read from it.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..models import AgentConfig

DEFAULT_MODEL = "anthropic/claude-3.5-sonnet"


@dataclass(frozen=True)
class AgentDefinition:
    """Static description of a well-known agent."""

    name: str
    description: str
    system_prompt: str
    capabilities: tuple[str, ...]
    model: str = DEFAULT_MODEL


_DEFINITIONS = (
    AgentDefinition(
        name="Communication",
        description="Executive communication specialist",
        system_prompt=(
            "You are an executive communication specialist with an ESTJ personality. "
            "You help leaders craft clear, decisive, and professional messages. Your "
            "responses are concise, action-oriented, and maintain executive-level authority."
        ),
        capabilities=("writing", "editing", "tone"),
    ),
    AgentDefinition(
        name="Coder",
        description="Software development expert",
        system_prompt=(
            "You are an expert software engineer specializing in clean, efficient code. "
            "You provide practical solutions, explain technical concepts clearly, and "
            "follow best practices."
        ),
        capabilities=("coding", "debugging", "architecture"),
        model="qwen/qwen-2.5-coder-32b-instruct",
    ),
    AgentDefinition(
        name="Analyst",
        description="Data analysis and insights",
        system_prompt=(
            "You are a senior data analyst who transforms complex information into "
            "actionable insights. You focus on metrics, trends, and data-driven "
            "recommendations."
        ),
        capabilities=("analysis", "research", "metrics"),
        model="openai/gpt-4o",
    ),
    AgentDefinition(
        name="Writer",
        description="Content creation specialist",
        system_prompt=(
            "You are a professional content writer who creates compelling, "
            "well-structured content. You adapt your tone and style to the audience "
            "and purpose."
        ),
        capabilities=("writing", "content", "documentation"),
    ),
    AgentDefinition(
        name="Email",
        description="Email processing and automation",
        system_prompt=(
            "You are an email processing specialist who helps manage and organize "
            "email communications efficiently."
        ),
        capabilities=("email", "automation", "tasks"),
        model="openai/gpt-4o-mini",
    ),
    AgentDefinition(
        name="Project Manager",
        description="Turns developer changelogs into professional client updates",
        system_prompt=(
            "You are a project management specialist who processes changelogs and "
            "generates professional client updates."
        ),
        capabilities=("changelogs", "client-updates", "planning"),
    ),
)

DEFAULT_AGENTS: Mapping[str, AgentDefinition] = MappingProxyType(
    {definition.name: definition for definition in _DEFINITIONS}
)

# Mention matching walks the roster in this order.
KNOWN_AGENTS: tuple[str, ...] = tuple(DEFAULT_AGENTS)

# Agents with a preferred model but no built-in persona.
_EXTRA_MODELS = MappingProxyType({"Researcher": "openai/gpt-4o"})


def fallback_prompt(name: str) -> str:
    """Built-in prompt for ``name``, or a generic one for unknown agents."""
    definition = DEFAULT_AGENTS.get(name)
    if definition:
        return definition.system_prompt
    return f"You are a helpful {name.lower()} agent providing professional assistance."


def fallback_config(name: str) -> AgentConfig:
    """Synthesize a config when the store has none for ``name``."""
    definition = DEFAULT_AGENTS.get(name)
    return AgentConfig(
        name=name,
        system_prompt=fallback_prompt(name),
        is_active=True,
        capabilities=list(definition.capabilities) if definition else ["general"],
        description=definition.description if definition else None,
    )


def default_model_for(name: str, fallback: str = DEFAULT_MODEL) -> str:
    """Preferred model of an agent."""
    definition = DEFAULT_AGENTS.get(name)
    if definition:
        return definition.model
    return _EXTRA_MODELS.get(name, fallback)


def default_roster() -> list[AgentConfig]:
    """Configs of every built-in agent, in roster order."""
    return [fallback_config(name) for name in KNOWN_AGENTS]
