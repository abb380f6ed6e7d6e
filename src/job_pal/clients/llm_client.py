"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from job_pal.exceptions import ModelUnavailable
from job_pal.utils.json_parser import ExtractionResult, extract_json_result

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"

# Transient upstream conditions worth another attempt; anything else fails fast.
RETRYABLE_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


def _response_text(message: anthropic.types.Message) -> str:
    return "".join(
        block.text for block in message.content if getattr(block, "type", "text") == "text"
    )


class LLMClient:
    """Async Claude API client with exponential-backoff retries.

    Two call shapes are supported: ``generate`` sends one flattened user
    payload, ``converse`` replays an ordered user/assistant history. Neither
    interprets the response; ``*_json`` variants hand the text to the
    structured result extractor.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        model: str = DEFAULT_MODEL,
    ):
        kwargs: dict = {}
        if api_key is not None:
            kwargs["api_key"] = api_key
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
        self.model = model
        self._token_log: list[tuple[str, int, int]] = []  # (model, input_tokens, output_tokens)

    @retry(
        retry=retry_if_exception_type(RETRYABLE_ERRORS),
        stop=stop_after_attempt(3),
        wait=wait_exponential(min=1, max=10),
        reraise=True,
    )
    async def _call_api(
        self,
        messages: list[dict],
        system: str,
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> anthropic.types.Message:
        """Make the actual API call with retry logic."""
        kwargs: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system
        return await self.client.messages.create(**kwargs)

    async def _complete(
        self,
        messages: list[dict],
        system: str,
        model: str | None,
        temperature: float,
        max_tokens: int,
    ) -> LLMResponse:
        model = model or self.model
        logger.debug("LLM call: model=%s, turns=%d", model, len(messages))
        try:
            message = await self._call_api(
                messages=messages,
                system=system,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except anthropic.APIError as e:
            logger.error("LLM call failed", exc_info=True)
            raise ModelUnavailable("Language model request failed", e) from e
        input_tokens = message.usage.input_tokens
        output_tokens = message.usage.output_tokens
        logger.debug("LLM response: %d input, %d output tokens", input_tokens, output_tokens)
        self._token_log.append((model, input_tokens, output_tokens))
        return LLMResponse(
            text=_response_text(message),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 4096,
    ) -> LLMResponse:
        """Send a single flattened prompt and return the text response with usage."""
        return await self._complete(
            [{"role": "user", "content": prompt}],
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def converse(
        self,
        messages: list[dict],
        system: str = "",
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ) -> LLMResponse:
        """Send an ordered multi-turn history (``role`` is "user" or "assistant")."""
        if not messages:
            raise ValueError("converse() needs at least one message")
        return await self._complete(
            messages,
            system=system,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    async def generate_json(self, prompt: str, system: str = "", **kwargs) -> ExtractionResult:
        """Send a prompt and extract the JSON object from the response."""
        response = await self.generate(prompt=prompt, system=system, **kwargs)
        return extract_json_result(response.text)

    async def converse_json(self, messages: list[dict], system: str = "", **kwargs) -> ExtractionResult:
        """Multi-turn variant of generate_json."""
        response = await self.converse(messages=messages, system=system, **kwargs)
        return extract_json_result(response.text)

    def get_token_summary(self) -> dict:
        """Return accumulated token usage and reset the log."""
        summary = {
            "input": sum(t[1] for t in self._token_log),
            "output": sum(t[2] for t in self._token_log),
            "calls": list(self._token_log),
        }
        self._token_log.clear()
        return summary
