"""
Tests for the provider clients.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from slidegen.config import Settings
from slidegen.schemas.generation import Attachment
from slidegen.services.errors import (
    AuthError,
    ConfigurationError,
    MalformedResponseError,
    ProviderError,
)
from slidegen.services.llm_client import (
    DECK_RESPONSE_SCHEMA,
    DeckModelClient,
    GeminiClient,
    GroqClient,
    XAIClient,
    create_model_client,
)
from slidegen.services.prompt_builder import Prompt

GROQ_URL = "https://api.groq.com/openai/v1"


def _completion(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _groq(handler, **kwargs) -> GroqClient:
    return GroqClient(
        api_key="gsk-test",
        base_url=GROQ_URL,
        text_model="text-model",
        vision_model="vision-model",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


TEXT_PROMPT = Prompt(system_instruction="system", user_text="user")
IMAGE_PROMPT = Prompt(
    system_instruction="system",
    user_text="user",
    images=[Attachment(mime_type="image/png", data="aGVsbG8=")],
)


class TestConfiguration:
    """Keys are injected and checked before any request."""

    @pytest.mark.parametrize("cls", [GroqClient, XAIClient])
    def test_missing_key_fails_fast(self, cls):
        with pytest.raises(AuthError):
            cls(api_key="", base_url=GROQ_URL, text_model="t", vision_model="v")

    def test_missing_gemini_key(self):
        with pytest.raises(AuthError):
            GeminiClient(api_key="")

    def test_client_without_complete_cannot_be_built(self):
        class Incomplete(DeckModelClient):
            provider = "Incomplete"

        with pytest.raises(TypeError):
            Incomplete("key", "t", "v")

    def test_auth_error_is_configuration_error(self):
        assert issubclass(AuthError, ConfigurationError)

    def test_factory_selects_provider(self):
        settings = Settings(_env_file=None, llm_provider="xai", xai_api_key="xai-test")
        client = create_model_client(settings)
        assert isinstance(client, XAIClient)
        assert client.api_key == "xai-test"

    def test_factory_unknown_provider(self):
        settings = Settings(_env_file=None, llm_provider="mystery")
        with pytest.raises(ConfigurationError, match="Unknown LLM provider"):
            create_model_client(settings)

    def test_factory_missing_key(self):
        settings = Settings(_env_file=None, llm_provider="groq", groq_api_key="")
        with pytest.raises(AuthError):
            create_model_client(settings)


class TestModelSelection:
    """Vision models only when images are attached."""

    def test_select_model(self):
        client = _groq(lambda r: httpx.Response(200))
        assert client.select_model(False) == "text-model"
        assert client.select_model(True) == "vision-model"

    @pytest.mark.asyncio
    async def test_text_request_uses_text_model(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers["Authorization"]
            seen["url"] = str(request.url)
            return httpx.Response(200, json=_completion('{"title": "T", "slides": []}'))

        text = await _groq(handler).complete(TEXT_PROMPT)

        assert text == '{"title": "T", "slides": []}'
        body = seen["body"]
        assert body["model"] == "text-model"
        assert body["response_format"] == {"type": "json_object"}
        assert body["temperature"] == 0.6
        assert [m["role"] for m in body["messages"]] == ["system", "user"]
        assert body["messages"][1]["content"] == "user"
        assert seen["auth"] == "Bearer gsk-test"
        assert seen["url"] == f"{GROQ_URL}/chat/completions"

    @pytest.mark.asyncio
    async def test_image_request_uses_vision_model(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_completion("{}"))

        await _groq(handler).complete(IMAGE_PROMPT)

        body = seen["body"]
        assert body["model"] == "vision-model"
        parts = body["messages"][1]["content"]
        assert parts[0] == {"type": "text", "text": "user"}
        assert parts[1]["image_url"]["url"] == "data:image/png;base64,aGVsbG8="


class TestProviderErrors:
    """Non-success statuses are classified, never retried."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_rejected_key(self, status):
        client = _groq(lambda r: httpx.Response(status, json={"error": {"message": "Invalid API Key"}}))
        with pytest.raises(AuthError) as exc:
            await client.complete(TEXT_PROMPT)
        assert exc.value.status_code == status

    @pytest.mark.asyncio
    async def test_server_error_carries_status_and_message(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        with pytest.raises(ProviderError) as exc:
            await _groq(handler).complete(TEXT_PROMPT)
        assert exc.value.status_code == 429
        assert "Rate limit reached" in exc.value.message
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_error_without_body_uses_reason(self):
        client = _groq(lambda r: httpx.Response(500, text="oops"))
        with pytest.raises(ProviderError) as exc:
            await client.complete(TEXT_PROMPT)
        assert exc.value.status_code == 500
        assert "Internal Server Error" in exc.value.message

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(ProviderError) as exc:
            await _groq(handler).complete(TEXT_PROMPT)
        assert exc.value.status_code is None

    @pytest.mark.asyncio
    async def test_unexpected_envelope(self):
        client = _groq(lambda r: httpx.Response(200, json={"id": "x"}))
        with pytest.raises(MalformedResponseError):
            await client.complete(TEXT_PROMPT)


class TestGeminiClient:
    """Gemini goes through the google-genai SDK."""

    def _client(self, response=None, side_effect=None) -> GeminiClient:
        client = GeminiClient(api_key="gemini-test", text_model="g-text", vision_model="g-vision")
        client.client = MagicMock()
        client.client.aio.models.generate_content = AsyncMock(
            return_value=response, side_effect=side_effect
        )
        return client

    @pytest.mark.asyncio
    async def test_requests_json(self):
        client = self._client(SimpleNamespace(text=' {"title": "T"} ', candidates=[]))
        text = await client.complete(TEXT_PROMPT)

        assert text == '{"title": "T"}'
        kwargs = client.client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "g-text"
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].system_instruction == "system"

        schema = kwargs["config"].response_schema
        assert schema is DECK_RESPONSE_SCHEMA
        assert schema.required == ["title", "slides"]
        slide = schema.properties["slides"].items
        assert slide.properties["layout"].enum == ["TITLE", "CONTENT", "TWO_COLUMN", "QUOTE", "BIG_IMAGE"]
        assert slide.properties["content"].required == ["title"]
        assert "theme" not in schema.properties

    @pytest.mark.asyncio
    async def test_images_become_inline_parts(self):
        client = self._client(SimpleNamespace(text="{}", candidates=[]))
        await client.complete(IMAGE_PROMPT)

        kwargs = client.client.aio.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "g-vision"
        parts = kwargs["contents"][0].parts
        assert parts[1].inline_data.data == b"hello"
        assert parts[1].inline_data.mime_type == "image/png"

    @pytest.mark.asyncio
    async def test_api_errors(self):
        from google.genai import errors

        client = self._client(
            side_effect=errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})
        )
        with pytest.raises(ProviderError) as exc:
            await client.complete(TEXT_PROMPT)
        assert exc.value.status_code == 503

        client = self._client(
            side_effect=errors.ClientError(403, {"error": {"code": 403, "message": "denied", "status": "PERMISSION_DENIED"}})
        )
        with pytest.raises(AuthError):
            await client.complete(TEXT_PROMPT)


class TestClaudeClient:
    """Claude goes through the anthropic SDK."""

    def _client(self, response=None, side_effect=None):
        from slidegen.services.claude_client import ClaudeClient

        client = ClaudeClient(api_key="sk-ant-test", text_model="c-text", vision_model="c-vision")
        client.client = MagicMock()
        client.client.messages.create = AsyncMock(return_value=response, side_effect=side_effect)
        return client

    @pytest.mark.asyncio
    async def test_joins_text_blocks(self):
        response = SimpleNamespace(
            content=[SimpleNamespace(type="text", text='{"title": '), SimpleNamespace(type="text", text='"T"}')],
            stop_reason="end_turn",
        )
        client = self._client(response)
        assert await client.complete(IMAGE_PROMPT) == '{"title": "T"}'

        kwargs = client.client.messages.create.call_args.kwargs
        assert kwargs["model"] == "c-vision"
        assert kwargs["system"] == "system"
        content = kwargs["messages"][0]["content"]
        assert content[0]["source"] == {"type": "base64", "media_type": "image/png", "data": "aGVsbG8="}
        assert content[-1] == {"type": "text", "text": "user"}

    @pytest.mark.asyncio
    async def test_authentication_error(self):
        import anthropic

        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = anthropic.AuthenticationError(
            "invalid x-api-key", response=httpx.Response(401, request=request), body=None
        )
        with pytest.raises(AuthError) as exc:
            await self._client(side_effect=error).complete(TEXT_PROMPT)
        assert exc.value.status_code == 401
