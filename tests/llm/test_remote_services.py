"""Tests for the Gemini-backed classifier and rater."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from truthcheck_system.data_management.schemas import UNAVAILABLE
from truthcheck_system.exceptions import RemoteServiceError
from truthcheck_system.llm import GeminiBatchClassifier, GeminiClient, GeminiRater
from truthcheck_system.llm.remote_services import parse_classifications, parse_rating


def make_client(reply="7", available=True):
    client = MagicMock()
    client.available = available
    client.generate = AsyncMock(return_value=reply)
    return client


class TestParseRating:
    @pytest.mark.parametrize(
        "reply, expected",
        [("7", 7.0), ("Rating: 8.5/10", 8.5), (" 0 ", 0.0), ("10", 10.0)],
    )
    def test_first_number(self, reply, expected):
        assert parse_rating(reply) == expected

    @pytest.mark.parametrize("reply", ["", "high", "11", "-2", None])
    def test_unavailable(self, reply):
        assert parse_rating(reply) == UNAVAILABLE


class TestParseClassifications:
    def test_wrapped_object(self):
        reply = json.dumps({"classifications": [{"id": 1, "classification": "current_news"}]})
        assert parse_classifications(reply) == [{"id": 1, "classification": "current_news"}]

    def test_bare_list_skips_non_dicts(self):
        reply = json.dumps([{"id": 2, "classification": "empirical_fact"}, "junk"])
        assert parse_classifications(reply) == [{"id": 2, "classification": "empirical_fact"}]

    @pytest.mark.parametrize("reply", ["not json", json.dumps({"other": []}), json.dumps(5)])
    def test_malformed(self, reply):
        with pytest.raises(RemoteServiceError):
            parse_classifications(reply)


class TestGeminiBatchClassifier:
    @pytest.mark.asyncio
    async def test_unavailable_without_key(self):
        client = make_client(available=False)
        classifier = GeminiBatchClassifier(client)
        assert await classifier.batch_classify([{"id": 1, "text": "x"}], "rules") == UNAVAILABLE
        client.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sends_items_in_json_mode(self):
        reply = json.dumps({"classifications": [{"id": 1, "classification": "current_news"}]})
        client = make_client(reply=reply)
        classifier = GeminiBatchClassifier(client)

        results = await classifier.batch_classify([{"id": 1, "text": "The vote passed."}], "RULES")

        assert results == [{"id": 1, "classification": "current_news"}]
        prompt = client.generate.await_args.args[0]
        assert "RULES" in prompt
        assert '"The vote passed."' in prompt
        assert client.generate.await_args.kwargs["json_mode"] is True

    @pytest.mark.asyncio
    async def test_malformed_reply_raises(self):
        classifier = GeminiBatchClassifier(make_client(reply="oops"))
        with pytest.raises(RemoteServiceError):
            await classifier.batch_classify([{"id": 1, "text": "x"}], "rules")


class TestGeminiRater:
    @pytest.mark.asyncio
    async def test_parses_reply(self):
        assert await GeminiRater(make_client(reply="6")).rate("prompt") == 6.0

    @pytest.mark.asyncio
    async def test_unavailable_without_key(self):
        assert await GeminiRater(make_client(available=False)).rate("prompt") == UNAVAILABLE

    @pytest.mark.asyncio
    async def test_request_failure_is_unavailable(self):
        client = make_client()
        client.generate.side_effect = RemoteServiceError("timeout")
        assert await GeminiRater(client).rate("prompt") == UNAVAILABLE

    @pytest.mark.asyncio
    async def test_out_of_range_is_unavailable(self):
        assert await GeminiRater(make_client(reply="15")).rate("prompt") == UNAVAILABLE


class TestGeminiClient:
    @pytest.mark.asyncio
    async def test_generate_without_key_raises(self):
        client = GeminiClient(api_key=None)
        assert client.available is False
        with pytest.raises(RemoteServiceError):
            await client.generate("hello")
