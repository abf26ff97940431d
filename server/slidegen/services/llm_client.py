import base64
import binascii
import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from slidegen.schemas.deck import SlideLayout
from slidegen.services.errors import (
    AuthError,
    ConfigurationError,
    InputError,
    MalformedResponseError,
    ProviderError,
)
from slidegen.services.prompt_builder import Prompt

logger = logging.getLogger(__name__)

AUTH_STATUS_CODES = (401, 403)

_STRING = types.Schema(type=types.Type.STRING)
_STRING_LIST = types.Schema(type=types.Type.ARRAY, items=_STRING)

# Deck shape for Gemini structured output; theme is stamped on afterwards
DECK_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "title": _STRING,
        "slides": types.Schema(
            type=types.Type.ARRAY,
            items=types.Schema(
                type=types.Type.OBJECT,
                properties={
                    "id": _STRING,
                    "layout": types.Schema(
                        type=types.Type.STRING,
                        enum=[layout.value for layout in SlideLayout],
                    ),
                    "content": types.Schema(
                        type=types.Type.OBJECT,
                        properties={
                            "title": _STRING,
                            "subtitle": _STRING,
                            "points": _STRING_LIST,
                            "leftColumn": _STRING_LIST,
                            "rightColumn": _STRING_LIST,
                            "speakerNotes": _STRING,
                            "imagePrompt": _STRING,
                            "imageDescription": _STRING,
                        },
                        required=["title"],
                    ),
                },
                required=["id", "layout", "content"],
            ),
        ),
    },
    required=["title", "slides"],
)


def decode_image(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputError(f"Attached image is not valid base64: {e}")


class DeckModelClient(ABC):
    """One provider capable of turning a deck prompt into raw JSON text.

    Subclasses implement ``complete``; they make exactly one request per call
    and never retry.
    """

    provider = "LLM"

    def __init__(
        self,
        api_key: str,
        text_model: str,
        vision_model: str,
        timeout: float = 120.0,
    ):
        if not api_key:
            raise AuthError(
                f"{self.provider} API key is missing. Please check your .env file."
            )
        self.api_key = api_key
        self.text_model = text_model
        self.vision_model = vision_model
        self.timeout = timeout

    def select_model(self, has_images: bool) -> str:
        """Vision variant only when an image is attached; text models are cheaper."""
        return self.vision_model if has_images else self.text_model

    @abstractmethod
    async def complete(self, prompt: Prompt) -> str:
        """Send one request and return the raw response text."""


class OpenAICompatibleClient(DeckModelClient):
    """Chat-completions client for OpenAI-compatible endpoints (Groq, xAI)."""

    temperature = 0.7

    def __init__(
        self,
        api_key: str,
        base_url: str,
        text_model: str,
        vision_model: str,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, text_model, vision_model, timeout)
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def build_messages(self, prompt: Prompt) -> list[dict]:
        if prompt.images:
            user_content = [{"type": "text", "text": prompt.user_text}]
            user_content.extend(
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{img.mime_type};base64,{img.data}"},
                }
                for img in prompt.images
            )
        else:
            user_content = prompt.user_text

        return [
            {"role": "system", "content": prompt.system_instruction},
            {"role": "user", "content": user_content},
        ]

    def build_body(self, prompt: Prompt) -> dict:
        return {
            "model": self.select_model(bool(prompt.images)),
            "messages": self.build_messages(prompt),
            "response_format": {"type": "json_object"},
            "temperature": self.temperature,
        }

    async def complete(self, prompt: Prompt) -> str:
        body = self.build_body(prompt)
        logger.info(
            f"{self.provider} request: model={body['model']}, "
            f"images={len(prompt.images)}, prompt_len={len(prompt.user_text)}"
        )

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=body,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
        except httpx.HTTPError as e:
            raise ProviderError(None, f"{self.provider} request failed: {e}")

        if response.status_code in AUTH_STATUS_CODES:
            raise AuthError(
                f"{self.provider} rejected the API key: {_error_message(response)}",
                status_code=response.status_code,
            )
        if not response.is_success:
            raise ProviderError(response.status_code, f"{self.provider} API Error: {_error_message(response)}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            raise MalformedResponseError("syntax_error", "unexpected completion envelope")

        text = content or ""
        logger.debug(f"{self.provider} response: len={len(text)}, text='{text[:300]}'")
        return text


def _error_message(response: httpx.Response) -> str:
    try:
        message = response.json().get("error", {}).get("message")
    except (ValueError, AttributeError):
        message = None
    return message or response.reason_phrase or "Unknown error"


class GroqClient(OpenAICompatibleClient):
    provider = "Groq"
    temperature = 0.6


class XAIClient(OpenAICompatibleClient):
    provider = "xAI"
    temperature = 0.7


class GeminiClient(DeckModelClient):
    """Wrapper for the Google Gemini API."""

    provider = "Gemini"
    temperature = 0.7

    def __init__(
        self,
        api_key: str,
        text_model: str = "gemini-2.5-flash",
        vision_model: str = "gemini-2.5-flash",
        timeout: float = 120.0,
    ):
        super().__init__(api_key, text_model, vision_model, timeout)
        self.client = genai.Client(api_key=api_key)

    def build_parts(self, prompt: Prompt) -> list[types.Part]:
        parts = [types.Part.from_text(text=prompt.user_text)]
        for img in prompt.images:
            parts.append(
                types.Part.from_bytes(data=decode_image(img.data), mime_type=img.mime_type)
            )
        return parts

    async def complete(self, prompt: Prompt) -> str:
        model = self.select_model(bool(prompt.images))
        logger.info(
            f"Gemini request: model={model}, images={len(prompt.images)}, "
            f"prompt_len={len(prompt.user_text)}"
        )

        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[types.Content(role="user", parts=self.build_parts(prompt))],
                config=types.GenerateContentConfig(
                    system_instruction=prompt.system_instruction,
                    response_mime_type="application/json",
                    response_schema=DECK_RESPONSE_SCHEMA,
                    temperature=self.temperature,
                ),
            )
        except genai_errors.APIError as e:
            if e.code in AUTH_STATUS_CODES:
                raise AuthError(f"Gemini rejected the API key: {e.message}", status_code=e.code)
            raise ProviderError(e.code, f"Gemini API Error: {e.message}")
        except httpx.HTTPError as e:
            raise ProviderError(None, f"Gemini request failed: {e}")

        text = (response.text or "").strip()
        finish = getattr(
            response.candidates[0], "finish_reason", None
        ) if response.candidates else None
        logger.debug(f"Gemini response: finish_reason={finish}, len={len(text)}, text='{text[:300]}'")
        return text


def create_model_client(settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> DeckModelClient:
    """Build the configured provider client, injecting its key from settings."""
    provider = settings.llm_provider.lower()

    if provider == "groq":
        return GroqClient(
            api_key=settings.groq_api_key,
            base_url=settings.groq_base_url,
            text_model=settings.groq_model,
            vision_model=settings.groq_vision_model,
            timeout=settings.request_timeout_secs,
            transport=transport,
        )
    if provider == "xai":
        return XAIClient(
            api_key=settings.xai_api_key,
            base_url=settings.xai_base_url,
            text_model=settings.xai_model,
            vision_model=settings.xai_vision_model,
            timeout=settings.request_timeout_secs,
            transport=transport,
        )
    if provider == "gemini":
        return GeminiClient(
            api_key=settings.gemini_api_key,
            text_model=settings.gemini_model,
            vision_model=settings.gemini_vision_model,
            timeout=settings.request_timeout_secs,
        )
    if provider == "claude":
        from slidegen.services.claude_client import ClaudeClient

        return ClaudeClient(
            api_key=settings.anthropic_api_key,
            text_model=settings.claude_model,
            vision_model=settings.claude_vision_model,
            timeout=settings.request_timeout_secs,
        )

    raise ConfigurationError(f"Unknown LLM provider: {settings.llm_provider}")
