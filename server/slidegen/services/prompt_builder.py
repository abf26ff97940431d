"""Prompt templates for deck generation.

The system instruction fixes the output contract (JSON shape, layouts, tone);
the user text carries the material to turn into slides. Images travel next
to the text as inline parts and are never inlined into the prompt body.
"""

from dataclasses import dataclass, field

from slidegen.schemas.generation import Attachment, GenerationRequest, InputMode

THEME_DIRECTIVES = {
    "school": (
        "Use simple, engaging, and child-friendly language suitable for elementary "
        "school students (ages 6-11). Focus on being educational, fun, and clear. "
        "Prefer short sentences and everyday words."
    ),
    "corporate": "Use professional, punchy business language.",
    "minimal": "Use concise, high-impact text. Fewer words per slide, no filler.",
    "academic": (
        "Use a precise, formal register. Define terms before using them and "
        "attribute claims to their sources where the input provides them."
    ),
    "creative": "Use vivid, imaginative language with a storytelling flow.",
}

DEFAULT_THEME_DIRECTIVE = "Use clear, professional language suited to a general audience."

# Tone used when the caller sent no theme; the Deck keeps the requested value
DEFAULT_THEME = "modern"

REQUESTED_LAYOUTS = ("TITLE", "CONTENT", "TWO_COLUMN", "QUOTE")

SYSTEM_PROMPT = """You are a professional presentation designer and content creator.
You must respond in valid JSON format. Respond ONLY with the JSON object. No markdown, no filler.

Theme style requested: {theme}
Tone: {theme_directive}

{count_instruction}

Structure the response as a Presentation object with "title" (string) and "slides" (array).
The first slide MUST be a TITLE slide.
Each slide has "id" (string, unique), "layout" (one of {layouts}), and "content" (object).
Use a variety of layouts.
"content" MUST include:
- "title": (string)
- "subtitle": (string, optional) For QUOTE slides, the person being quoted.
- "points": (string array, optional) For CONTENT slides.
- "leftColumn": (string array, optional) For TWO_COLUMN slides.
- "rightColumn": (string array, optional) For TWO_COLUMN slides.
- "speakerNotes": (string) A detailed script for the presenter (3-4 sentences).
- "imagePrompt": (string) A highly descriptive prompt for a cinematic background image. Be specific about style, lighting, and elements (e.g. "aerial view of a lush rainforest at sunrise, hyper-realistic, 8k, soft lighting"). Avoid text in images.

Example:
{{
  "title": "string",
  "slides": [
    {{
      "id": "slide-1",
      "layout": "TITLE",
      "content": {{"title": "string", "subtitle": "string", "speakerNotes": "string", "imagePrompt": "string"}}
    }}
  ]
}}
"""

SOURCE_INSTRUCTIONS = {
    InputMode.TOPIC: (
        "Generate the presentation from the short topic below. "
        "Research the topic from your own knowledge and cover it logically."
    ),
    InputMode.CONTENT: (
        "Transform the content below into a presentation. Extract the key "
        "information and structure it logically into slides. Keep every "
        "important idea from the content."
    ),
    InputMode.FILE: (
        "Generate the presentation primarily from the attached documents and "
        "images. Treat the user text as secondary guidance on focus and emphasis."
    ),
}

EMPTY_TEXT_FALLBACK = "Please extract content from the attached files."


@dataclass
class Prompt:
    system_instruction: str
    user_text: str
    images: list[Attachment] = field(default_factory=list)


def count_instruction(request: GenerationRequest) -> str:
    n = request.requested_slide_count
    if request.input_mode == InputMode.TOPIC:
        return f"Generate exactly {n} slides. Not more, not fewer."
    if request.input_mode == InputMode.FILE:
        return f"Aim for about {n} slides, covering all the key points of the attached material."
    # content mode: depth of the material decides
    return (
        "Decide the number of slides from the depth of the content: do not pad "
        "thin material and do not compress rich material. There is no fixed slide count."
    )


def build_system_instruction(request: GenerationRequest) -> str:
    theme = request.theme.strip() or DEFAULT_THEME
    return SYSTEM_PROMPT.format(
        theme=theme,
        theme_directive=THEME_DIRECTIVES.get(theme.lower(), DEFAULT_THEME_DIRECTIVE),
        count_instruction=count_instruction(request),
        layouts=", ".join(REQUESTED_LAYOUTS),
    )


def build_user_text(request: GenerationRequest) -> str:
    parts = [SOURCE_INSTRUCTIONS[request.input_mode]]

    label = "Topic" if request.input_mode == InputMode.TOPIC else "User Text"
    context = request.context_text
    if request.raw_text.strip():
        parts.append(f"{label}: {context}")
    else:
        parts.append(f"{label}: {EMPTY_TEXT_FALLBACK}")
        if context:
            parts.append(context)

    if request.input_mode == InputMode.TOPIC:
        parts.append(f"The presentation must have exactly {request.requested_slide_count} slides.")

    if request.images:
        parts.append(f"{len(request.images)} image(s) are attached. Use what they show.")

    parts.append("Respond ONLY with the JSON object.")
    return "\n\n".join(parts)


def build_prompt(request: GenerationRequest) -> Prompt:
    """Build the (system instruction, user content) pair for one request."""
    return Prompt(
        system_instruction=build_system_instruction(request),
        user_text=build_user_text(request),
        images=request.images,
    )
