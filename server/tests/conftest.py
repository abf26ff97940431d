"""
Pytest configuration and shared fixtures.
"""

import json
from copy import deepcopy
from typing import Any, Dict

import pytest

from slidegen.services.llm_client import DeckModelClient
from slidegen.services.prompt_builder import Prompt


FIVE_SLIDE_DECK: Dict[str, Any] = {
    "title": "Photosynthesis Basics",
    "slides": [
        {
            "id": "s1",
            "layout": "TITLE",
            "content": {
                "title": "How Plants Make Food",
                "subtitle": "A journey into photosynthesis",
                "speakerNotes": "Welcome everyone. Today we learn how plants eat sunlight.",
                "imagePrompt": "sunlit green leaf close-up, soft morning light",
            },
        },
        {
            "id": "s2",
            "layout": "CONTENT",
            "content": {
                "title": "What Plants Need",
                "points": ["Sunlight", "Water", "Carbon dioxide"],
            },
        },
        {
            "id": "s3",
            "layout": "TWO_COLUMN",
            "content": {
                "title": "In and Out",
                "leftColumn": ["Water goes in", "Air goes in"],
                "rightColumn": ["Sugar is made", "Oxygen comes out"],
            },
        },
        {
            "id": "s4",
            "layout": "QUOTE",
            "content": {"title": "The leaf is a tiny kitchen.", "subtitle": "Ms. Rivera"},
        },
        {
            "id": "s5",
            "layout": "CONTENT",
            "content": {
                "title": "Let's Review",
                "points": ["Plants use light", "Plants give us oxygen"],
                "speakerNotes": "Ask the class to name one thing plants need.",
            },
        },
    ],
}


@pytest.fixture
def five_slide_deck() -> Dict[str, Any]:
    return deepcopy(FIVE_SLIDE_DECK)


@pytest.fixture
def five_slide_json(five_slide_deck) -> str:
    return json.dumps(five_slide_deck)


class FakeModelClient(DeckModelClient):
    """Records prompts and answers with a canned response."""

    provider = "Fake"

    def __init__(self, response: str = "", error: Exception | None = None):
        super().__init__("test-key", "fake-text", "fake-vision")
        self.response = response
        self.error = error
        self.prompts: list[Prompt] = []

    async def complete(self, prompt: Prompt) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_client_factory():
    return FakeModelClient
