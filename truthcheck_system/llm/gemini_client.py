"""Async Gemini API client with rate limiting and timeouts."""

import asyncio
from typing import Any, Dict, Optional

import google.generativeai as genai
from google.generativeai.types.generation_types import BlockedPromptException

from truthcheck_system.exceptions import RemoteServiceError
from truthcheck_system.llm.rate_limiter import RateLimiter, RateLimitExceeded
from truthcheck_system.utils.logging import get_structured_logger


class GeminiClient:
    """
    Google Gemini API client for short, single-shot prompts.

    The blocking SDK call runs in a worker thread under asyncio.wait_for, so
    a slow response never blocks the event loop. Every failure surfaces as
    RemoteServiceError; callers decide whether to retry.

    Usage:
        client = GeminiClient(api_key="...", model_name="gemini-1.5-flash")
        text = await client.generate("Respond with a number", temperature=0.3)

    Attributes:
        model_name: Gemini model identifier
        request_timeout: Seconds allowed per request
        available: False when no API key is configured
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-1.5-flash",
        rate_limiter: Optional[RateLimiter] = None,
        request_timeout: float = 30.0,
    ):
        """
        Args:
            api_key: Gemini API key. None leaves the client unavailable.
            model_name: Model identifier
            rate_limiter: Shared limiter (a 60 RPM limiter is created if None)
            request_timeout: Per-request timeout in seconds
        """
        self.model_name = model_name
        self.request_timeout = request_timeout
        self.available = bool(api_key)
        self._rate_limiter = rate_limiter or RateLimiter(name="gemini")
        self.logger = get_structured_logger("llm.gemini", model=model_name)

        if self.available:
            genai.configure(api_key=api_key)
            self.logger.info("gemini_client_initialized")
        else:
            self.logger.warning("gemini_api_key_missing")

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.3,
        max_output_tokens: Optional[int] = None,
        json_mode: bool = False,
    ) -> str:
        """
        Generate a completion for prompt.

        Args:
            prompt: Full prompt text
            temperature: Sampling temperature
            max_output_tokens: Optional output cap
            json_mode: Request an application/json response

        Returns:
            Response text (may be empty)

        Raises:
            RemoteServiceError: If the client is unavailable, the prompt is
                blocked, the request times out or the API call fails
        """
        if not self.available:
            raise RemoteServiceError("Gemini API key not configured")

        generation_config: Dict[str, Any] = {"temperature": temperature}
        if max_output_tokens is not None:
            generation_config["max_output_tokens"] = max_output_tokens
        if json_mode:
            generation_config["response_mime_type"] = "application/json"

        try:
            await self._rate_limiter.acquire(timeout=self.request_timeout)
        except RateLimitExceeded as e:
            raise RemoteServiceError("Local rate limiter exhausted") from e

        model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config=generation_config,
        )

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(model.generate_content, prompt),
                timeout=self.request_timeout,
            )
        except BlockedPromptException as e:
            self.logger.warning("gemini_prompt_blocked", error=str(e))
            raise RemoteServiceError(f"Prompt blocked: {e}") from e
        except asyncio.TimeoutError as e:
            self.logger.warning("gemini_request_timeout", timeout=self.request_timeout)
            raise RemoteServiceError("Gemini request timed out") from e
        except Exception as e:
            self._rate_limiter.release()
            self.logger.warning("gemini_request_failed", error=str(e))
            raise RemoteServiceError(f"Gemini request failed: {e}") from e

        try:
            return response.text or ""
        except ValueError as e:
            # response.text raises when the candidate has no text parts
            self.logger.warning("gemini_empty_response", error=str(e))
            return ""
