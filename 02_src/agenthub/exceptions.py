"""Exception hierarchy for Agent Hub."""


class AgentHubError(Exception):
    """Base exception for all Agent Hub errors."""


class InferenceError(AgentHubError):
    """The inference backend could not produce a completion."""


class WorkflowError(AgentHubError):
    """A multi-agent workflow failed as a whole.

    Raised by the workflow runner and caught by the orchestrator, which
    falls back to a single agent with multi-specialty context.
    """
