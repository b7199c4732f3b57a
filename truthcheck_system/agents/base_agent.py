"""Abstract base class for the pipeline's agents."""

import uuid
from abc import ABC, abstractmethod

from loguru import logger


class BaseAgent(ABC):
    """
    Common identity and logging for agents.

    Each instance gets a short random id and a loguru logger bound with
    ``component`` and ``agent_id`` so interleaved runs can be told apart.

    Attributes:
        agent_id: Short hex id for this instance
        name: Agent name, also used as the log component
        description: What the agent does, shown in capability listings
    """

    def __init__(self, name: str, description: str = ""):
        self.agent_id = uuid.uuid4().hex[:12]
        self.name = name
        self.description = description
        self.logger = logger.bind(component=name, agent_id=self.agent_id)
        self.logger.debug(f"{name} ready")

    @abstractmethod
    async def process(self, input_data: dict) -> dict:
        """Handle one request dict and return a result dict. Must not raise."""

    @abstractmethod
    def get_capabilities(self) -> list[str]:
        """Capability identifiers, e.g. ``["claim_extraction"]``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, agent_id={self.agent_id!r})"
