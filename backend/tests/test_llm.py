"""
Unit tests for the LLM module.
Tests LLMMessage, LLMResponse, providers, and factory.
"""

import pytest
from unittest.mock import AsyncMock, patch, MagicMock

from medico.llm.base import LLMMessage, LLMResponse, InlineImage
from medico.llm.gemini_provider import GeminiProvider
from medico.llm.openai_provider import OpenAIProvider, to_json_schema
from medico.llm.factory import create_llm_provider


def _mock_async_client(mock_client, response_json):
    mock_response = MagicMock()
    mock_response.json.return_value = response_json
    mock_response.raise_for_status = MagicMock()

    mock_instance = AsyncMock()
    mock_instance.post.return_value = mock_response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    mock_client.return_value = mock_instance
    return mock_instance


class TestLLMMessage:
    """Tests for LLMMessage dataclass."""

    def test_user_message(self):
        msg = LLMMessage.user("Hello")
        assert msg.role == "user"
        assert msg.text == "Hello"
        assert msg.images == []
        assert not msg.has_images

    def test_model_message(self):
        msg = LLMMessage.model("Hi there")
        assert msg.role == "model"

    def test_multimodal(self):
        msg = LLMMessage.multimodal("user", "What is this?", [InlineImage("image/png", "abc123")])
        assert msg.has_images
        assert msg.images[0].mime_type == "image/png"

    def test_multimodal_without_images(self):
        msg = LLMMessage.multimodal("user", "Just text")
        assert msg.images == []

    def test_inline_image_data_uri(self):
        assert InlineImage("image/jpeg", "abc").to_data_uri() == "data:image/jpeg;base64,abc"


class TestLLMResponse:

    def test_defaults(self):
        resp = LLMResponse(content="Hello!", model="gemini-2.5-flash")
        assert resp.usage == {}
        assert resp.finish_reason is None
        assert resp.raw is None


class TestGeminiProvider:
    """Tests for the Gemini provider."""

    def test_init_defaults(self):
        provider = GeminiProvider(api_key="test-key")
        assert provider.model == "gemini-2.5-flash"
        assert provider.base_url == "https://generativelanguage.googleapis.com/v1beta"

    def test_headers(self):
        headers = GeminiProvider(api_key="g-key")._get_headers()
        assert headers["x-goog-api-key"] == "g-key"
        assert headers["Content-Type"] == "application/json"

    def test_format_messages_puts_images_before_text(self):
        provider = GeminiProvider(api_key="k")
        contents = provider._format_messages([
            LLMMessage.model("Earlier reply"),
            LLMMessage.multimodal("user", "Look", [InlineImage("image/png", "AAAA")]),
        ])
        assert contents[0] == {"role": "model", "parts": [{"text": "Earlier reply"}]}
        assert contents[1]["role"] == "user"
        assert contents[1]["parts"][0] == {"inline_data": {"mime_type": "image/png", "data": "AAAA"}}
        assert contents[1]["parts"][1] == {"text": "Look"}

    def test_assistant_role_maps_to_model(self):
        contents = GeminiProvider(api_key="k")._format_messages([LLMMessage("assistant", "x")])
        assert contents[0]["role"] == "model"

    def test_payload_with_schema_and_system_instruction(self):
        provider = GeminiProvider(api_key="k")
        schema = {"type": "OBJECT", "properties": {"a": {"type": "STRING"}}}
        payload = provider._build_payload([LLMMessage.user("hi")], "Be brief", schema, 0.2, None)
        assert payload["systemInstruction"] == {"parts": [{"text": "Be brief"}]}
        assert payload["generationConfig"]["responseMimeType"] == "application/json"
        assert payload["generationConfig"]["responseSchema"] == schema
        assert payload["generationConfig"]["temperature"] == 0.2
        assert payload["generationConfig"]["maxOutputTokens"] == 2048

    def test_payload_plain(self):
        payload = GeminiProvider(api_key="k")._build_payload([LLMMessage.user("hi")], None, None, None, None)
        assert "systemInstruction" not in payload
        assert "responseSchema" not in payload["generationConfig"]
        assert payload["generationConfig"]["temperature"] == 0.7

    @pytest.mark.asyncio
    async def test_chat_completion_success(self):
        provider = GeminiProvider(api_key="test-key")
        with patch("httpx.AsyncClient") as mock_client:
            instance = _mock_async_client(mock_client, {
                "candidates": [{
                    "content": {"role": "model", "parts": [{"text": "Hello "}, {"text": "there"}]},
                    "finishReason": "STOP",
                }],
                "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 4, "totalTokenCount": 14},
                "modelVersion": "gemini-2.5-flash",
            })

            result = await provider.chat_completion([LLMMessage.user("Hello")], system_instruction="sys")

            assert result.content == "Hello there"
            assert result.finish_reason == "STOP"
            assert result.usage["total_tokens"] == 14
            url = instance.post.call_args[0][0]
            assert url.endswith("/models/gemini-2.5-flash:generateContent")

    @pytest.mark.asyncio
    async def test_blocked_prompt_returns_empty_content(self):
        provider = GeminiProvider(api_key="test-key")
        with patch("httpx.AsyncClient") as mock_client:
            _mock_async_client(mock_client, {"promptFeedback": {"blockReason": "SAFETY"}})
            result = await provider.chat_completion([LLMMessage.user("Hello")])
            assert result.content == ""
            assert result.finish_reason == "SAFETY"

    @pytest.mark.asyncio
    async def test_http_error_propagates(self):
        provider = GeminiProvider(api_key="test-key")
        with patch("httpx.AsyncClient") as mock_client:
            instance = _mock_async_client(mock_client, {})
            instance.post.side_effect = RuntimeError("connection refused")
            with pytest.raises(RuntimeError):
                await provider.chat_completion([LLMMessage.user("Hello")])


class TestOpenAIProvider:
    """Tests for the OpenAI-compatible provider."""

    def test_init_defaults(self):
        provider = OpenAIProvider(api_key="test-key")
        assert provider.model == "gpt-4o"
        assert provider.base_url == "https://api.openai.com/v1"

    def test_headers(self):
        headers = OpenAIProvider(api_key="sk-test123")._get_headers()
        assert headers["Authorization"] == "Bearer sk-test123"

    def test_format_messages(self):
        provider = OpenAIProvider(api_key="test")
        formatted = provider._format_messages(
            [
                LLMMessage.model("Earlier"),
                LLMMessage.multimodal("user", "Analyze", [InlineImage("image/jpeg", "abc123")]),
            ],
            system_instruction="sys prompt",
        )
        assert formatted[0] == {"role": "system", "content": "sys prompt"}
        assert formatted[1] == {"role": "assistant", "content": "Earlier"}
        assert formatted[2]["content"][0] == {
            "type": "image_url", "image_url": {"url": "data:image/jpeg;base64,abc123"}
        }
        assert formatted[2]["content"][1] == {"type": "text", "text": "Analyze"}

    def test_to_json_schema(self):
        schema = {
            "type": "OBJECT",
            "properties": {
                "scores": {"type": "ARRAY", "items": {"type": "INTEGER"}},
                "status": {"type": "STRING", "enum": ["Normal", "Critical"]},
            },
            "required": ["scores"],
        }
        converted = to_json_schema(schema)
        assert converted["type"] == "object"
        assert converted["properties"]["scores"] == {"type": "array", "items": {"type": "integer"}}
        assert converted["properties"]["status"]["enum"] == ["Normal", "Critical"]
        assert converted["required"] == ["scores"]

    @pytest.mark.asyncio
    async def test_chat_completion_with_schema(self):
        provider = OpenAIProvider(api_key="test-key")
        with patch("httpx.AsyncClient") as mock_client:
            instance = _mock_async_client(mock_client, {
                "choices": [{"message": {"content": "{\"a\": 1}"}, "finish_reason": "stop"}],
                "model": "gpt-4o",
                "usage": {"prompt_tokens": 10, "completion_tokens": 5},
            })

            result = await provider.chat_completion(
                [LLMMessage.user("Hello")],
                response_schema={"type": "OBJECT", "properties": {"a": {"type": "INTEGER"}}},
            )

            assert result.content == "{\"a\": 1}"
            payload = instance.post.call_args.kwargs["json"]
            assert payload["response_format"]["type"] == "json_schema"
            assert payload["response_format"]["json_schema"]["schema"]["type"] == "object"


class TestLLMFactory:
    """Tests for LLM provider factory."""

    def test_create_gemini_provider(self):
        provider = create_llm_provider(provider="gemini", api_key="test-key", model="gemini-2.5-pro")
        assert isinstance(provider, GeminiProvider)
        assert provider.model == "gemini-2.5-pro"

    def test_create_openai_provider(self):
        provider = create_llm_provider(provider="openai", api_key="test-key")
        assert isinstance(provider, OpenAIProvider)

    def test_no_api_key_returns_none(self):
        assert create_llm_provider(provider="gemini", api_key="") is None
        assert create_llm_provider(provider="gemini", api_key=None) is None

    def test_unsupported_provider_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_llm_provider(provider="unsupported", api_key="key")

    def test_custom_base_url_and_timeout(self):
        provider = create_llm_provider(
            provider="openai",
            api_key="key",
            base_url="https://custom.api.com/v1",
            timeout=5.0,
        )
        assert provider.base_url == "https://custom.api.com/v1"
        assert provider.timeout == 5.0
