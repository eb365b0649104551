"""Tests for result synthesis."""

import time

from agenthub.agents import synthesize_parallel, synthesize_sequential
from agenthub.models import MULTI_AGENT, AgentResponse


def _response(agent: str, content: str, tokens: int = 10) -> AgentResponse:
    return AgentResponse(
        content=content,
        agent_type=agent,
        token_usage=tokens,
        metadata={"model": f"model-{agent.lower()}"},
    )


class TestSynthesizeParallel:
    """Tests for synthesize_parallel()."""

    def test_sections_per_agent(self):
        """Test each agent gets its own heading, separated by rules."""
        outcomes = [
            ("Coder", _response("Coder", "code answer", 10)),
            ("Writer", _response("Writer", "prose answer", 15)),
        ]
        result = synthesize_parallel(outcomes, ["Coder", "Writer"])

        assert result.content == (
            "# Collaborative Analysis\n\n"
            "## Coder Analysis\n\ncode answer"
            "\n\n---\n\n"
            "## Writer Analysis\n\nprose answer"
            "\n\n---\n\n"
            "**Coordination:** Parallel processing by Coder, Writer"
        )
        assert result.agent_type == MULTI_AGENT
        assert result.token_usage == 25
        assert result.metadata["collaboration_mode"] == "parallel"
        assert result.metadata["models"] == {
            "Coder": "model-coder",
            "Writer": "model-writer",
        }

    def test_failed_agent_attribution(self):
        """Test a surviving agent keeps its own heading when an earlier one fails."""
        outcomes = [("Writer", _response("Writer", "prose answer"))]
        result = synthesize_parallel(outcomes, ["Coder", "Writer"], failed_agents=["Coder"])

        assert "## Writer Analysis\n\nprose answer" in result.content
        assert "## Coder Analysis" not in result.content
        assert result.metadata["participating_agents"] == ["Coder", "Writer"]
        assert result.metadata["failed_agents"] == ["Coder"]

    def test_processing_time(self):
        """Test processing time is measured from the request start."""
        started = int(time.time() * 1000) - 500
        result = synthesize_parallel(
            [("Coder", _response("Coder", "x"))], ["Coder"], started_at=started
        )
        assert result.metadata["processing_time"] >= 500

    def test_processing_time_unknown(self):
        """Test processing time is None without a start."""
        result = synthesize_parallel([("Coder", _response("Coder", "x"))], ["Coder"])
        assert result.metadata["processing_time"] is None


class TestSynthesizeSequential:
    """Tests for synthesize_sequential()."""

    def test_final_result_with_recap(self):
        """Test the last response leads and every step is recapped."""
        outcomes = [
            ("Analyst", _response("Analyst", "the numbers are up", 20)),
            ("Writer", _response("Writer", "Final report", 30)),
        ]
        result = synthesize_sequential(outcomes)

        assert result.content == (
            "Final report\n\n---\n\n**Sequential Workflow:**\n"
            "**Analyst:** the numbers are up\n"
            "**Writer:** Final report"
        )
        assert result.agent_type == MULTI_AGENT
        assert result.token_usage == 50
        assert result.metadata["collaboration_mode"] == "sequential"
        assert result.metadata["participating_agents"] == ["Analyst", "Writer"]
        assert result.metadata["primary_result"] == "Writer"

    def test_long_step_truncated(self):
        """Test a recap line is cut to 120 characters with an ellipsis."""
        long_text = "a" * 200
        outcomes = [
            ("Analyst", _response("Analyst", long_text)),
            ("Writer", _response("Writer", "done")),
        ]
        result = synthesize_sequential(outcomes)

        assert f"**Analyst:** {'a' * 120}...\n" in result.content
        assert "a" * 121 not in result.content.split("---")[-1]
