"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

import inspect
from unittest.mock import AsyncMock, MagicMock, create_autospec, patch

import pytest
from anthropic.resources import AsyncMessages

from resume_matcher.clients.llm_client import EmptyResponseError, LLMClient, LLMError, LLMResponse


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(text=text)]
    return message


@pytest.fixture
def api():
    """Patch AsyncAnthropic and yield the mocked messages.create."""
    with patch("resume_matcher.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
        mock_client = MagicMock()
        mock_client.messages.create = AsyncMock(return_value=_make_api_message("hello world"))
        mock_cls.return_value = mock_client
        yield mock_client.messages.create


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        with patch("resume_matcher.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_api_key_and_timeout(self):
        with patch("resume_matcher.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=30.0)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=30.0)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self, api):
        llm = LLMClient()
        result = await llm.generate("say hello")

        assert isinstance(result, LLMResponse)
        assert result.text == "hello world"
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_generate_uses_configured_defaults(self, api):
        llm = LLMClient(model="test-model", temperature=0.5, max_tokens=123)
        await llm.generate("prompt")

        kwargs = api.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.5
        assert kwargs["max_tokens"] == 123
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]
        assert "system" not in kwargs

    async def test_request_kwargs_bind_to_sdk_signature(self):
        llm = LLMClient(api_key="test-key")

        async def _reply(*args, **kwargs):
            return _make_api_message("ok")

        create = create_autospec(llm.client.messages.create, side_effect=_reply)
        with patch.object(llm.client.messages, "create", create):
            await llm.generate("prompt", system="be brief")

        sdk_create = inspect.signature(AsyncMessages.create)
        # raises TypeError on any keyword the installed SDK rejects
        sdk_create.bind(llm.client.messages, **create.call_args.kwargs)

    async def test_temperature_omitted_when_sdk_does_not_take_it(self):
        calls = []

        async def create(*, model, max_tokens, messages, system=None):
            calls.append({"model": model, "max_tokens": max_tokens, "system": system})
            return _make_api_message("ok")

        with patch("resume_matcher.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_cls.return_value.messages.create = create
            result = await LLMClient(temperature=0.7).generate("prompt")

        assert result.text == "ok"
        assert calls == [{"model": "claude-haiku-4-5-20251001", "max_tokens": 8192, "system": None}]

    async def test_generate_passes_system(self, api):
        await LLMClient().generate("prompt", system="be brief")
        assert api.call_args.kwargs["system"] == "be brief"

    async def test_token_log_stores_model_and_counts(self, api):
        api.return_value = _make_api_message("resp", input_tokens=20, output_tokens=8)
        llm = LLMClient()
        await llm.generate("one", model="claude-haiku-4-5-20251001")
        await llm.generate("two", model="claude-haiku-4-5-20251001")

        assert llm._token_log == [
            ("claude-haiku-4-5-20251001", 20, 8),
            ("claude-haiku-4-5-20251001", 20, 8),
        ]

    async def test_generate_retries_then_succeeds(self, api):
        api.side_effect = [RuntimeError("overloaded"), _make_api_message("ok")]
        llm = LLMClient(max_retries=2)
        with patch("asyncio.sleep", new=AsyncMock()):
            result = await llm.generate("prompt")

        assert result.text == "ok"
        assert api.await_count == 2

    async def test_generate_reraises_after_retries(self, api):
        api.side_effect = RuntimeError("down")
        llm = LLMClient(max_retries=2)
        with patch("asyncio.sleep", new=AsyncMock()):
            with pytest.raises(RuntimeError, match="down"):
                await llm.generate("prompt")
        assert api.await_count == 2


class TestLLMClientGenerateText:
    async def test_generate_text_strips(self, api):
        api.return_value = _make_api_message("  improved summary \n")
        assert await LLMClient().generate_text("prompt") == "improved summary"

    async def test_generate_text_empty_raises(self, api):
        api.return_value = _make_api_message("   ")
        with pytest.raises(EmptyResponseError):
            await LLMClient().generate_text("prompt")

    def test_empty_response_is_llm_error(self):
        assert issubclass(EmptyResponseError, LLMError)


class TestLLMClientGenerateJson:
    async def test_generate_json_parses_valid_json_text(self, api):
        api.return_value = _make_api_message('{"key": "value", "count": 3}')
        assert await LLMClient().generate_json("give me json") == {"key": "value", "count": 3}

    async def test_generate_json_raises_on_non_json_response(self, api):
        api.return_value = _make_api_message("this is plain text, not json")
        with pytest.raises(ValueError):
            await LLMClient().generate_json("give me json")


class TestLLMClientTokenSummary:
    def test_get_token_summary_returns_totals_and_clears(self):
        with patch("resume_matcher.clients.llm_client.anthropic.AsyncAnthropic"):
            llm = LLMClient()
        llm._token_log = [
            ("claude-haiku-4-5-20251001", 100, 50),
            ("claude-haiku-4-5-20251001", 200, 80),
        ]

        summary = llm.get_token_summary()
        assert summary["input"] == 300
        assert summary["output"] == 130
        assert len(summary["calls"]) == 2
        assert llm.get_token_summary() == {"input": 0, "output": 0, "calls": []}
