"""LiteLLM adapter streaming the structured response as Fragments.

Requests JSON mode from any LiteLLM-routable model, decodes the growing
object after every token delta, and yields a Fragment whenever the
decoded object changes. Connection setup is retried with exponential
backoff; once the stream is open, errors propagate to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator

import litellm

# Suppress LiteLLM's "Give Feedback / Get Help" and "Provider List" banners
litellm.suppress_debug_info = True

from parley.errors import ProviderError
from parley.providers.base import FragmentProducer
from parley.providers.decoder import PartialJSONDecoder
from parley.schemas.config import ModelConfig
from parley.schemas.fragment import Fragment

logger = logging.getLogger(__name__)

# Max retries for transient failures
_MAX_RETRIES = 3
_BASE_BACKOFF = 1.0  # seconds


def _short_error_reason(error: Exception | None) -> str:
    """Extract a short, operator-friendly reason from a LiteLLM error."""
    error_str = str(error).lower()
    if "rate" in error_str or "429" in error_str:
        return "rate limit"
    if "overloaded" in error_str or "529" in error_str:
        return "overloaded"
    if "timeout" in error_str or isinstance(error, TimeoutError):
        return "timeout"
    if "503" in error_str or "unavailable" in error_str:
        return "service unavailable"
    if "500" in error_str or "internal" in error_str:
        return "server error"
    if "connection" in error_str:
        return "connection error"
    return str(error)[:80]


class LiteLLMProvider(FragmentProducer):
    """Fragment producer backed by litellm.acompletion(stream=True).

    All connection settings come from the injected ModelConfig; the API
    key is resolved from the configured environment variable once, at
    construction.
    """

    def __init__(self, config: ModelConfig) -> None:
        self._config = config
        self._api_key = os.environ.get(config.api_key_env, "")

    @property
    def model_id(self) -> str:
        """LiteLLM model identifier used for routing."""
        return self._config.model

    @property
    def config(self) -> ModelConfig:
        return self._config

    async def stream(
        self,
        messages: list[dict[str, str]],
        system: str,
    ) -> AsyncIterator[Fragment]:
        full_messages = [{"role": "system", "content": system}, *messages]
        kwargs = self._build_completion_kwargs(full_messages)

        response = await self._call_streaming_with_retry(kwargs)
        decoder = PartialJSONDecoder()

        async for chunk in response:
            delta = ""
            if chunk.choices and chunk.choices[0].delta:
                delta = chunk.choices[0].delta.content or ""
            if not delta:
                continue

            value = decoder.feed(delta)
            if value is not None:
                yield Fragment.from_partial(value)

        logger.debug(
            "Stream from %s finished (%d chars)", self._config.model, len(decoder.text)
        )

    def _build_completion_kwargs(self, messages: list[dict[str, str]]) -> dict:
        """Build the kwargs dict for litellm.acompletion."""
        kwargs: dict = {
            "model": self._config.model,
            "messages": messages,
            "timeout": float(self._config.timeout),
            "stream": True,
            "response_format": {"type": "json_object"},
        }

        if self._api_key:
            kwargs["api_key"] = self._api_key

        if self._config.api_base:
            kwargs["api_base"] = self._config.api_base

        return kwargs

    async def _call_streaming_with_retry(self, kwargs: dict):
        """Open the stream, retrying transient failures with backoff.

        Non-retryable errors (auth, bad request) raise immediately.

        Raises:
            TimeoutError: If all attempts time out.
            ProviderError: If the call fails for any other reason.
        """
        last_error: Exception | None = None

        for attempt in range(_MAX_RETRIES):
            try:
                return await litellm.acompletion(**kwargs)
            except TimeoutError:
                last_error = TimeoutError(
                    f"Streaming call timed out after {kwargs.get('timeout')}s "
                    f"(attempt {attempt + 1}/{_MAX_RETRIES})"
                )
            except litellm.AuthenticationError:
                raise ProviderError(
                    f"Authentication failed for {self._config.model}. "
                    f"Check that {self._config.api_key_env} is set correctly."
                ) from None
            except litellm.BadRequestError as e:
                raise ProviderError(
                    f"Bad request to {self._config.model}: {e}"
                ) from e
            except (
                litellm.RateLimitError,
                litellm.ServiceUnavailableError,
                litellm.InternalServerError,
                litellm.APIConnectionError,
            ) as e:
                last_error = e

            if attempt < _MAX_RETRIES - 1:
                backoff = _BASE_BACKOFF * (2**attempt)
                logger.warning(
                    "Streaming retry %d/%d for %s (%s, backoff: %.1fs)",
                    attempt + 1, _MAX_RETRIES, self._config.model,
                    _short_error_reason(last_error), backoff,
                )
                await asyncio.sleep(backoff)

        if isinstance(last_error, TimeoutError):
            raise last_error
        raise ProviderError(
            f"Streaming call to {self._config.model} failed after "
            f"{_MAX_RETRIES} retries: {last_error}"
        ) from last_error
