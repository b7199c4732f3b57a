"""Collaborator interfaces consumed by classification and scoring.

Any object with matching methods satisfies these protocols; tests pass
in-memory fakes, production wiring passes the Gemini and Serper clients.
"""

from typing import Any, Dict, List, Optional, Protocol, Union

from truthcheck_system.data_management.schemas import SourceRecord


class KeyValueCache(Protocol):
    """TTL-based, process-wide key/value cache."""

    def get(self, key: str) -> Optional[Any]:
        ...

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        ...


class RemoteClassifier(Protocol):
    """Batch claim classifier. Returns UNAVAILABLE when not configured."""

    async def batch_classify(
        self, items: List[Dict[str, Any]], instructions: str
    ) -> Union[List[Dict[str, Any]], str]:
        ...


class RemoteRater(Protocol):
    """0-10 rubric rater. Returns UNAVAILABLE when not configured."""

    async def rate(self, prompt: str) -> Union[float, str]:
        ...


class WebSearchProvider(Protocol):
    """General web search."""

    async def search(self, query: str, max_results: int) -> List[SourceRecord]:
        ...


class ScholarSearchProvider(Protocol):
    """Scholarly search."""

    async def search(self, query: str, max_results: int) -> List[SourceRecord]:
        ...
