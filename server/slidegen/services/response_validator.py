"""Turn raw model output into a validated Deck.

Every response is classified into exactly one outcome: ``ok`` (a Deck),
``syntax_error`` (not a JSON object) or ``schema_error`` (JSON that violates
the deck shape). Required fields are never invented; a handful of minor
omissions are repaired (missing slide ids, lowercase layouts, nulls).
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from slidegen.schemas.deck import Deck, Slide, SlideContent, SlideLayout
from slidegen.services.errors import MalformedResponseError

logger = logging.getLogger(__name__)

OK = "ok"
SYNTAX_ERROR = "syntax_error"
SCHEMA_ERROR = "schema_error"

# A whole response wrapped in one ```json ... ``` fence
_FENCED = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


@dataclass
class ParseOutcome:
    kind: str
    deck: Optional[Deck] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.kind == OK


class _SchemaViolation(Exception):
    pass


def _strip_fence(text: str) -> str:
    m = _FENCED.match(text)
    return m.group(1) if m else text


def _require_str(obj: dict, key: str, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value.strip():
        raise _SchemaViolation(f"{where}: missing required string field '{key}'")
    return value


def _coerce_layout(value: Any, where: str) -> SlideLayout:
    if not isinstance(value, str):
        raise _SchemaViolation(f"{where}: missing layout")
    try:
        return SlideLayout(value.strip().upper())
    except ValueError:
        raise _SchemaViolation(f"{where}: unknown layout '{value}'")


def _coerce_slide(raw: Any, position: int) -> Slide:
    where = f"slides[{position}]"
    if not isinstance(raw, dict):
        raise _SchemaViolation(f"{where}: expected an object")

    layout = _coerce_layout(raw.get("layout"), where)

    content = raw.get("content")
    if not isinstance(content, dict):
        raise _SchemaViolation(f"{where}: missing content object")
    _require_str(content, "title", f"{where}.content")

    # null optionals are the same as absent ones
    cleaned = {k: v for k, v in content.items() if v is not None}

    slide_id = raw.get("id")
    if isinstance(slide_id, (int, float)) and not isinstance(slide_id, bool):
        slide_id = str(slide_id)
    if not isinstance(slide_id, str) or not slide_id.strip():
        slide_id = f"slide-{position + 1}"

    try:
        slide_content = SlideContent.model_validate(cleaned)
    except ValidationError as e:
        raise _SchemaViolation(f"{where}.content: {e.errors()[0]['msg']}")

    return Slide(id=slide_id, layout=layout, content=slide_content)


def _coerce_deck(data: Any, theme: str) -> Deck:
    if not isinstance(data, dict):
        raise _SchemaViolation("top-level value is not an object")

    title = _require_str(data, "title", "deck")

    raw_slides = data.get("slides")
    if raw_slides is None:
        raw_slides = []
    if not isinstance(raw_slides, list):
        raise _SchemaViolation("deck: 'slides' is not a list")

    slides = [_coerce_slide(raw, i) for i, raw in enumerate(raw_slides)]
    return Deck(title=title, slides=slides, theme=theme)


def classify_response(raw_text: Optional[str], theme: str) -> ParseOutcome:
    """Classify raw model output without raising."""
    text = (raw_text or "").strip()
    if not text:
        return ParseOutcome(kind=SYNTAX_ERROR, detail="empty response")

    text = _strip_fence(text)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseOutcome(kind=SYNTAX_ERROR, detail=f"invalid JSON: {e.msg} at position {e.pos}")
    except RecursionError:
        return ParseOutcome(kind=SYNTAX_ERROR, detail="invalid JSON: nesting too deep")

    if not isinstance(data, dict):
        return ParseOutcome(kind=SYNTAX_ERROR, detail=f"expected a JSON object, got {type(data).__name__}")

    try:
        deck = _coerce_deck(data, theme)
    except _SchemaViolation as e:
        return ParseOutcome(kind=SCHEMA_ERROR, detail=str(e))

    return ParseOutcome(kind=OK, deck=deck)


def parse_deck(raw_text: Optional[str], theme: str) -> Deck:
    """Parse model output into a Deck, forcing ``theme`` onto the result.

    Raises MalformedResponseError on syntax and schema errors alike.
    """
    outcome = classify_response(raw_text, theme)
    if not outcome.ok:
        logger.warning(
            f"Malformed model response ({outcome.kind}): {outcome.detail}; "
            f"text='{(raw_text or '')[:200]}'"
        )
        raise MalformedResponseError(outcome.kind, outcome.detail)
    return outcome.deck
