import logging
from collections.abc import Sequence

from slidegen.schemas.deck import Deck
from slidegen.schemas.generation import Attachment, InputMode
from slidegen.services.input_normalizer import normalize_request
from slidegen.services.llm_client import DeckModelClient
from slidegen.services.prompt_builder import build_prompt
from slidegen.services.response_validator import parse_deck

logger = logging.getLogger(__name__)


class DeckGenerator:
    def __init__(self, client: DeckModelClient):
        self.client = client

    async def generate(
        self,
        raw_text: str,
        theme: str,
        requested_slide_count: int,
        attachments: Sequence[Attachment] = (),
        input_mode: InputMode | str = InputMode.TOPIC,
    ) -> Deck:
        """Full pipeline: normalize input, build prompt, call the model once, validate.

        Errors from every stage propagate unchanged; nothing is retried.
        """
        request = normalize_request(
            raw_text, theme, requested_slide_count, attachments, input_mode
        )
        prompt = build_prompt(request)

        logger.info(
            f"Generating deck: provider={self.client.provider}, "
            f"mode={request.input_mode.value}, theme={request.theme}, "
            f"slides={request.requested_slide_count}, "
            f"documents={len(request.documents)}, images={len(request.images)}"
        )

        raw = await self.client.complete(prompt)
        deck = parse_deck(raw, request.theme)

        logger.info(f"Generated deck '{deck.title}' with {len(deck.slides)} slides")
        return deck
