"""Base class for the text-to-claim sifters.

- ClaimExtractionAgent: {"text": ...} -> Claim dicts
- ClaimClassificationAgent: {"claims": [...]} -> ClassifiedClaim dicts

Subclasses implement sift(); process() adds the envelope, counters and timing.
"""

import time
from abc import abstractmethod

from truthcheck_system.agents.base_agent import BaseAgent


class BaseSifter(BaseAgent):
    """
    Abstract sifter with request counters.

    Attributes:
        processed_count: Requests that completed
        error_count: Requests whose sift() raised
        items_emitted: Output items across completed requests
        last_duration: Seconds spent in the most recent sift()
    """

    def __init__(self, name: str, description: str = ""):
        super().__init__(name=name, description=description)
        self.processed_count = 0
        self.error_count = 0
        self.items_emitted = 0
        self.last_duration = 0.0

    @abstractmethod
    async def sift(self, content: dict) -> list[dict]:
        """Turn one content dict into a list of JSON-ready output dicts."""

    async def process(self, input_data: dict) -> dict:
        """
        Run sift() on ``input_data["content"]``.

        Returns:
            {"success": True, "results": [...], "count": n} or
            {"success": False, "error": "...", "results": []}
        """
        start = time.monotonic()
        try:
            results = await self.sift(input_data.get("content", {}))
        except Exception as e:
            self.error_count += 1
            self.logger.opt(exception=True).error(f"{self.name} failed: {e}")
            return {"success": False, "error": str(e), "results": []}
        finally:
            self.last_duration = time.monotonic() - start

        self.processed_count += 1
        self.items_emitted += len(results)
        return {"success": True, "results": results, "count": len(results)}

    def get_capabilities(self) -> list[str]:
        return ["sifting"]

    def get_stats(self) -> dict:
        """Counters plus error rate over all requests."""
        total = self.processed_count + self.error_count
        return {
            "processed_count": self.processed_count,
            "error_count": self.error_count,
            "items_emitted": self.items_emitted,
            "error_rate": self.error_count / total if total else 0.0,
        }
