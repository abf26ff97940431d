import logging
from collections.abc import Sequence

from slidegen.schemas.generation import Attachment, GenerationRequest, InputMode
from slidegen.services.errors import InputError

logger = logging.getLogger(__name__)


def normalize_request(
    raw_text: str,
    theme: str,
    requested_slide_count: int,
    attachments: Sequence[Attachment] = (),
    input_mode: InputMode | str = InputMode.TOPIC,
) -> GenerationRequest:
    """Merge user text and attachments into a single GenerationRequest.

    Refuses empty input (blank text and no attachments) before anything is
    sent to a provider. Attachment order is preserved; images stay separate
    and are forwarded as-is.
    """
    raw_text = raw_text or ""
    attachments = list(attachments)

    if not raw_text.strip() and not attachments:
        raise InputError("Please enter some text or attach at least one file.")

    try:
        mode = InputMode(input_mode)
    except ValueError:
        raise InputError(f"Invalid input mode: {input_mode}")

    if requested_slide_count < 1:
        raise InputError(f"Slide count must be at least 1, got {requested_slide_count}")

    for attachment in attachments:
        if not attachment.is_image and not attachment.extracted_text:
            logger.debug(
                f"Attachment {attachment.filename or attachment.mime_type} has no "
                f"extracted text and will not contribute to the prompt"
            )

    return GenerationRequest(
        raw_text=raw_text,
        input_mode=mode,
        theme=theme or "",
        requested_slide_count=requested_slide_count,
        attachments=attachments,
    )
