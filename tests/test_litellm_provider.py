"""Tests for parley.providers.litellm_provider: streaming LiteLLM adapter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from parley.errors import ProviderError
from parley.providers.litellm_provider import LiteLLMProvider, _short_error_reason
from parley.schemas.config import ModelConfig
from parley.schemas.fragment import Fragment

# Shorthand for the mock targets
_ACOMP = "parley.providers.litellm_provider.litellm.acompletion"
_SLEEP = "parley.providers.litellm_provider.asyncio.sleep"


# ── Helpers ───────────────────────────────────────────────────


def _make_config(**overrides) -> ModelConfig:
    defaults = {
        "model": "openai/test-model",
        "api_key_env": "TEST_API_KEY",
        "api_base": "https://api.example.com/v1",
        "timeout": 60,
    }
    defaults.update(overrides)
    return ModelConfig(**defaults)


def _chunk(content: str | None) -> MagicMock:
    chunk = MagicMock()
    chunk.choices = [MagicMock()]
    chunk.choices[0].delta = MagicMock()
    chunk.choices[0].delta.content = content
    return chunk


def _stream(*deltas: str | None):
    async def _aiter():
        for delta in deltas:
            yield _chunk(delta)

    return _aiter()


async def _collect(provider: LiteLLMProvider) -> list[Fragment]:
    return [
        fragment
        async for fragment in provider.stream(
            [{"role": "user", "content": "hi"}], "system prompt"
        )
    ]


@pytest.fixture()
def provider():
    with patch.dict("os.environ", {"TEST_API_KEY": "sk-test"}):
        return LiteLLMProvider(_make_config())


# ── Streaming ─────────────────────────────────────────────────


class TestStream:
    @pytest.mark.asyncio
    async def test_yields_fragments_as_object_grows(self, provider):
        response = _stream('{"content": "Hi', '", "followUpQuestions": ["Next?"]}')
        with patch.object(
            provider, "_call_streaming_with_retry",
            new_callable=AsyncMock, return_value=response,
        ):
            fragments = await _collect(provider)

        assert fragments[0].content == "Hi"
        assert fragments[-1].content == "Hi"
        assert fragments[-1].follow_up_questions == ["Next?"]

    @pytest.mark.asyncio
    async def test_empty_deltas_skipped(self, provider):
        response = _stream(None, "", '{"content": "x"}', None)
        with patch.object(
            provider, "_call_streaming_with_retry",
            new_callable=AsyncMock, return_value=response,
        ):
            fragments = await _collect(provider)

        assert fragments == [Fragment(content="x")]

    @pytest.mark.asyncio
    async def test_empty_stream(self, provider):
        with patch.object(
            provider, "_call_streaming_with_retry",
            new_callable=AsyncMock, return_value=_stream(),
        ):
            assert await _collect(provider) == []

    @pytest.mark.asyncio
    async def test_system_prompt_prepended(self, provider):
        with patch(_ACOMP, new_callable=AsyncMock, return_value=_stream()) as mock:
            await _collect(provider)

        kwargs = mock.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "system prompt"}
        assert kwargs["messages"][1] == {"role": "user", "content": "hi"}
        assert kwargs["stream"] is True
        assert kwargs["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_injected_config_used(self, provider):
        with patch(_ACOMP, new_callable=AsyncMock, return_value=_stream()) as mock:
            await _collect(provider)

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "openai/test-model"
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["api_base"] == "https://api.example.com/v1"
        assert kwargs["timeout"] == 60.0

    @pytest.mark.asyncio
    async def test_no_api_base_when_unset(self):
        with patch.dict("os.environ", {}, clear=True):
            provider = LiteLLMProvider(_make_config(api_base=""))
        with patch(_ACOMP, new_callable=AsyncMock, return_value=_stream()) as mock:
            await _collect(provider)

        kwargs = mock.call_args.kwargs
        assert "api_base" not in kwargs
        assert "api_key" not in kwargs

    @pytest.mark.asyncio
    async def test_mid_stream_error_propagates(self, provider):
        async def _broken():
            yield _chunk('{"content": "Hi"}')
            raise ConnectionError("dropped")

        with patch.object(
            provider, "_call_streaming_with_retry",
            new_callable=AsyncMock, return_value=_broken(),
        ), pytest.raises(ConnectionError):
            await _collect(provider)


# ── Retry ─────────────────────────────────────────────────────


class TestRetry:
    @pytest.mark.asyncio
    async def test_retries_on_rate_limit(self, provider):
        import litellm as litellm_mod

        mock_acomp = AsyncMock(side_effect=[
            litellm_mod.RateLimitError(
                message="rate limited", model="test",
                llm_provider="test",
            ),
            _stream('{"content": "ok"}'),
        ])
        with (
            patch(_ACOMP, mock_acomp),
            patch(_SLEEP, new_callable=AsyncMock),
        ):
            fragments = await _collect(provider)

        assert fragments == [Fragment(content="ok")]
        assert mock_acomp.call_count == 2

    @pytest.mark.asyncio
    async def test_auth_error_not_retried(self, provider):
        import litellm as litellm_mod

        mock_acomp = AsyncMock(
            side_effect=litellm_mod.AuthenticationError(
                message="bad key", model="test",
                llm_provider="test",
            ),
        )
        with patch(_ACOMP, mock_acomp), pytest.raises(
            ProviderError, match="Authentication failed",
        ):
            await _collect(provider)

        assert mock_acomp.call_count == 1

    @pytest.mark.asyncio
    async def test_bad_request_not_retried(self, provider):
        import litellm as litellm_mod

        mock_acomp = AsyncMock(
            side_effect=litellm_mod.BadRequestError(
                message="invalid params", model="test",
                llm_provider="test",
            ),
        )
        with patch(_ACOMP, mock_acomp), pytest.raises(
            ProviderError, match="Bad request",
        ):
            await _collect(provider)

        assert mock_acomp.call_count == 1

    @pytest.mark.asyncio
    async def test_all_retries_exhausted(self, provider):
        import litellm as litellm_mod

        mock_acomp = AsyncMock(
            side_effect=litellm_mod.ServiceUnavailableError(
                message="unavailable", model="test",
                llm_provider="test",
            ),
        )
        with (
            patch(_ACOMP, mock_acomp),
            patch(_SLEEP, new_callable=AsyncMock),
            pytest.raises(ProviderError, match="failed after 3"),
        ):
            await _collect(provider)

        assert mock_acomp.call_count == 3

    @pytest.mark.asyncio
    async def test_timeout_raises_timeout_error(self, provider):
        mock_acomp = AsyncMock(side_effect=TimeoutError())
        with (
            patch(_ACOMP, mock_acomp),
            patch(_SLEEP, new_callable=AsyncMock),
            pytest.raises(TimeoutError, match="timed out"),
        ):
            await _collect(provider)


class TestShortErrorReason:
    def test_known_reasons(self):
        assert _short_error_reason(Exception("429 Too Many")) == "rate limit"
        assert _short_error_reason(TimeoutError()) == "timeout"
        assert _short_error_reason(Exception("503")) == "service unavailable"
        assert _short_error_reason(Exception("connection reset")) == "connection error"

    def test_fallback_truncates(self):
        assert len(_short_error_reason(Exception("x" * 200))) == 80
