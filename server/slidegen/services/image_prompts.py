import random
from typing import Optional
from urllib.parse import quote

from slidegen.schemas.deck import Slide

IMAGE_SERVICE_URL = "https://image.pollinations.ai/prompt"


def image_url(
    prompt: str,
    width: int = 1280,
    height: int = 720,
    seed: Optional[int] = None,
) -> str:
    """Text-to-image URL for a slide background prompt."""
    if seed is None:
        seed = random.randint(0, 999_999)
    clean = quote(prompt.strip(), safe="")
    return f"{IMAGE_SERVICE_URL}/{clean}?width={width}&height={height}&nologo=true&seed={seed}"


def slide_image_url(slide: Slide, width: int = 1280, height: int = 720) -> Optional[str]:
    prompt = slide.content.image_prompt
    if not prompt or not prompt.strip():
        return None
    return image_url(prompt, width, height)
