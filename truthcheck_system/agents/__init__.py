"""Trust-scoring agents."""

from truthcheck_system.agents.base_agent import BaseAgent

__all__ = ["BaseAgent"]
