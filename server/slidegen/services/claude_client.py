import logging

from slidegen.services.errors import AuthError, ProviderError
from slidegen.services.llm_client import DeckModelClient
from slidegen.services.prompt_builder import Prompt

logger = logging.getLogger(__name__)


class ClaudeClient(DeckModelClient):
    """Wrapper for the Anthropic Claude API."""

    provider = "Claude"
    temperature = 0.7

    def __init__(
        self,
        api_key: str,
        text_model: str = "claude-sonnet-4-20250514",
        vision_model: str = "claude-sonnet-4-20250514",
        timeout: float = 120.0,
        max_tokens: int = 8000,
    ):
        super().__init__(api_key, text_model, vision_model, timeout)
        from anthropic import AsyncAnthropic

        self.client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self.max_tokens = max_tokens

    def build_content(self, prompt: Prompt) -> list[dict]:
        content = [
            {
                "type": "image",
                "source": {"type": "base64", "media_type": img.mime_type, "data": img.data},
            }
            for img in prompt.images
        ]
        content.append({"type": "text", "text": prompt.user_text})
        return content

    async def complete(self, prompt: Prompt) -> str:
        import anthropic

        model = self.select_model(bool(prompt.images))
        logger.info(
            f"Claude request: model={model}, images={len(prompt.images)}, "
            f"prompt_len={len(prompt.user_text)}"
        )

        try:
            response = await self.client.messages.create(
                model=model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=prompt.system_instruction,
                messages=[{"role": "user", "content": self.build_content(prompt)}],
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise AuthError(f"Claude rejected the API key: {e.message}", status_code=e.status_code)
        except anthropic.APIStatusError as e:
            raise ProviderError(e.status_code, f"Claude API Error: {e.message}")
        except anthropic.APIConnectionError as e:
            raise ProviderError(None, f"Claude request failed: {e}")

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        logger.debug(f"Claude response: stop_reason={response.stop_reason}, len={len(text)}")
        return text
