"""Gemini-backed implementations of the remote classifier and rater.

Both report the UNAVAILABLE sentinel when no API key is configured.
GeminiBatchClassifier raises RemoteServiceError on transport or parse
failures so the caller's retry policy can act. GeminiRater never raises:
any failure or out-of-range reply is UNAVAILABLE.
"""

import json
import re
from typing import Any, Dict, List, Union

from truthcheck_system.config.prompts import CLAIM_CLASSIFICATION_USER_PROMPT
from truthcheck_system.data_management.schemas import UNAVAILABLE
from truthcheck_system.exceptions import RemoteServiceError
from truthcheck_system.llm.gemini_client import GeminiClient
from truthcheck_system.utils.logging import get_structured_logger

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def parse_rating(reply: str) -> Union[float, str]:
    """
    Parse the first number in a rating reply.

    Returns:
        The number if it lies in [0, 10], otherwise UNAVAILABLE
    """
    match = _NUMBER.search(reply or "")
    if match is None:
        return UNAVAILABLE
    value = float(match.group())
    if value < 0 or value > 10:
        return UNAVAILABLE
    return value


def parse_classifications(reply: str) -> List[Dict[str, Any]]:
    """
    Parse a classifier reply into {id, classification} dicts.

    Accepts {"classifications": [...]} or a bare list.

    Raises:
        RemoteServiceError: If the reply is not JSON of either shape
    """
    try:
        data = json.loads(reply)
    except (TypeError, ValueError) as e:
        raise RemoteServiceError(f"Classifier reply is not JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("classifications")
    if not isinstance(data, list):
        raise RemoteServiceError("Classifier reply has no classifications array")
    return [item for item in data if isinstance(item, dict)]


class GeminiBatchClassifier:
    """
    RemoteClassifier backed by Gemini JSON mode.

    batch_classify(items, instructions) returns the parsed
    {"id", "classification"} list, or UNAVAILABLE without an API key.
    """

    def __init__(self, client: GeminiClient):
        self.client = client
        self.logger = get_structured_logger("llm.batch_classifier")

    async def batch_classify(
        self, items: List[Dict[str, Any]], instructions: str
    ) -> Union[List[Dict[str, Any]], str]:
        if not self.client.available:
            return UNAVAILABLE

        prompt = CLAIM_CLASSIFICATION_USER_PROMPT.format(
            instructions=instructions,
            items_json=json.dumps(items, ensure_ascii=False),
        )
        reply = await self.client.generate(prompt, temperature=0.1, json_mode=True)
        results = parse_classifications(reply)
        self.logger.debug("batch_classified", requested=len(items), returned=len(results))
        return results


class GeminiRater:
    """RemoteRater backed by Gemini; rate(prompt) -> 0-10 or UNAVAILABLE."""

    def __init__(self, client: GeminiClient):
        self.client = client
        self.logger = get_structured_logger("llm.rater")

    async def rate(self, prompt: str) -> Union[float, str]:
        if not self.client.available:
            return UNAVAILABLE

        try:
            reply = await self.client.generate(
                prompt, temperature=0.3, max_output_tokens=10
            )
        except RemoteServiceError as e:
            self.logger.warning("rating_request_failed", error=str(e))
            return UNAVAILABLE

        value = parse_rating(reply)
        if value == UNAVAILABLE:
            self.logger.warning("rating_unparseable", reply=reply[:40])
        return value
