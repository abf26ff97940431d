"""Render a Deck to a .pptx file with python-pptx.

Each layout places its text boxes on a 16:9 canvas; fields the model left
out are skipped so a sparse slide still exports.
"""

import io
import logging
import re
from typing import Optional

from pptx import Presentation
from pptx.enum.text import PP_ALIGN
from pptx.util import Inches, Pt

from slidegen.schemas.deck import Deck, Slide, SlideLayout

logger = logging.getLogger(__name__)

SLIDE_WIDTH = Inches(10)
SLIDE_HEIGHT = Inches(5.625)
BLANK_LAYOUT = 6
BULLET = "• "


def export_filename(deck: Deck) -> str:
    stem = re.sub(r"\s+", "_", deck.title.strip()) or "presentation"
    stem = re.sub(r"[^\w\-.]", "", stem) or "presentation"
    return f"{stem}.pptx"


def _add_text(
    slide,
    text: str,
    x: float,
    y: float,
    w: float,
    h: float,
    size: int,
    bold: bool = False,
    italic: bool = False,
    align: Optional[PP_ALIGN] = None,
):
    box = slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
    frame = box.text_frame
    frame.word_wrap = True
    para = frame.paragraphs[0]
    run = para.add_run()
    run.text = text
    run.font.size = Pt(size)
    run.font.bold = bold
    run.font.italic = italic
    if align is not None:
        para.alignment = align
    return box


def _add_bullets(slide, items: list[str], x: float, y: float, w: float, h: float, size: int):
    box = slide.shapes.add_textbox(Inches(x), Inches(y), Inches(w), Inches(h))
    frame = box.text_frame
    frame.word_wrap = True
    for i, item in enumerate(items):
        para = frame.paragraphs[0] if i == 0 else frame.add_paragraph()
        run = para.add_run()
        run.text = BULLET + item
        run.font.size = Pt(size)
    return box


def _render_slide(pptx_slide, slide: Slide) -> None:
    content = slide.content

    if slide.layout == SlideLayout.TITLE:
        _add_text(pptx_slide, content.title, 1, 1.6, 8, 1.5, 44, bold=True, align=PP_ALIGN.CENTER)
        if content.subtitle:
            _add_text(pptx_slide, content.subtitle, 1, 3.1, 8, 1, 24, align=PP_ALIGN.CENTER)

    elif slide.layout == SlideLayout.CONTENT:
        _add_text(pptx_slide, content.title, 0.5, 0.4, 9, 1, 32, bold=True)
        if content.points:
            _add_bullets(pptx_slide, content.points, 0.5, 1.4, 9, 3.8, 18)

    elif slide.layout == SlideLayout.TWO_COLUMN:
        _add_text(pptx_slide, content.title, 0.5, 0.4, 9, 1, 32, bold=True)
        if content.left_column:
            _add_bullets(pptx_slide, content.left_column, 0.5, 1.4, 4.25, 3.8, 16)
        if content.right_column:
            _add_bullets(pptx_slide, content.right_column, 5.25, 1.4, 4.25, 3.8, 16)

    elif slide.layout == SlideLayout.QUOTE:
        _add_text(pptx_slide, f"“{content.title}”", 1, 1.4, 8, 2, 36, italic=True, align=PP_ALIGN.CENTER)
        if content.subtitle:
            _add_text(pptx_slide, f"— {content.subtitle}", 1, 3.6, 8, 0.5, 20, align=PP_ALIGN.RIGHT)

    elif slide.layout == SlideLayout.BIG_IMAGE:
        _add_text(pptx_slide, content.title, 0.5, 0.4, 9, 1, 32, bold=True)
        caption = content.image_description or content.image_prompt
        if caption:
            _add_text(pptx_slide, caption, 0.5, 4.5, 9, 0.8, 14, italic=True, align=PP_ALIGN.CENTER)

    if content.speaker_notes:
        pptx_slide.notes_slide.notes_text_frame.text = content.speaker_notes


def export_pptx(deck: Deck) -> bytes:
    """Write every slide of ``deck`` into a new presentation and return its bytes."""
    prs = Presentation()
    prs.slide_width = SLIDE_WIDTH
    prs.slide_height = SLIDE_HEIGHT
    prs.core_properties.title = deck.title

    layout = prs.slide_layouts[BLANK_LAYOUT]
    for slide in deck.slides:
        _render_slide(prs.slides.add_slide(layout), slide)

    buf = io.BytesIO()
    prs.save(buf)
    logger.info(f"Exported deck '{deck.title}' ({len(deck.slides)} slides, theme={deck.theme})")
    return buf.getvalue()
