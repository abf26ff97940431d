import base64
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from slidegen.config import settings
from slidegen.schemas.deck import Deck, ExportResponse
from slidegen.schemas.generation import Attachment, GenerateRequestBody
from slidegen.services.deck_generator import DeckGenerator
from slidegen.services.errors import (
    ConfigurationError,
    GenerationError,
    InputError,
    MalformedResponseError,
    ProviderError,
)
from slidegen.services.llm_client import DeckModelClient, create_model_client

logger = logging.getLogger(__name__)

router = APIRouter()


def get_model_client() -> DeckModelClient:
    try:
        return create_model_client(settings)
    except ConfigurationError as e:
        logger.error(f"LLM provider not configured: {e}")
        raise HTTPException(status_code=503, detail=str(e))


def _to_http_error(e: GenerationError) -> HTTPException:
    if isinstance(e, InputError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, ConfigurationError):
        logger.error(f"Provider configuration error: {e}")
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, ProviderError):
        logger.error(f"Provider error: {e}")
        return HTTPException(status_code=502, detail=str(e))
    if isinstance(e, MalformedResponseError):
        return HTTPException(status_code=502, detail=MalformedResponseError.user_message)
    logger.error(f"Generation failed: {e}")
    return HTTPException(status_code=500, detail=str(e))


async def _run_generation(
    client: DeckModelClient,
    text: str,
    theme: str,
    slide_count: int,
    attachments: list[Attachment],
    input_mode: str,
) -> dict:
    generator = DeckGenerator(client)
    try:
        deck = await generator.generate(text, theme, slide_count, attachments, input_mode)
    except GenerationError as e:
        raise _to_http_error(e)
    return deck.to_wire()


@router.post("/generate")
async def generate_presentation(
    payload: GenerateRequestBody,
    client: DeckModelClient = Depends(get_model_client),
):
    return await _run_generation(
        client,
        payload.text,
        payload.theme,
        payload.slide_count,
        payload.attachments,
        payload.input_mode,
    )


@router.post("/generate/upload")
async def generate_presentation_from_upload(
    text: str = Form(""),
    theme: str = Form("modern"),
    slide_count: int = Form(8),
    input_mode: str = Form("file"),
    files: list[UploadFile] = File(default=[]),
    client: DeckModelClient = Depends(get_model_client),
):
    from slidegen.services.document_extractor import extract_text

    attachments: list[Attachment] = []
    for upload in files:
        file_bytes = await upload.read()
        if len(file_bytes) > settings.max_upload_bytes:
            logger.warning(
                f"Skipping {upload.filename}: {len(file_bytes)} bytes exceeds "
                f"{settings.max_upload_bytes} byte limit"
            )
            continue

        mime_type = upload.content_type or "application/octet-stream"
        try:
            extracted = extract_text(upload.filename, mime_type, file_bytes)
        except InputError as e:
            raise _to_http_error(e)

        attachments.append(
            Attachment(
                mime_type=mime_type,
                data=base64.b64encode(file_bytes).decode("ascii"),
                extracted_text=extracted,
                filename=upload.filename,
            )
        )

    return await _run_generation(client, text, theme, slide_count, attachments, input_mode)


@router.post("/export", response_model=ExportResponse, status_code=201)
async def export_presentation(deck: Deck):
    from slidegen.services.pptx_exporter import export_filename, export_pptx
    from slidegen.services.storage_service import ExportStorage

    data = export_pptx(deck)
    filename = export_filename(deck)

    storage = ExportStorage()
    key = await storage.save(filename, data)
    return ExportResponse(filename=filename, url=storage.url_for(key))


@router.get("/image-url")
async def get_image_url(prompt: str, width: int = 1280, height: int = 720):
    from slidegen.services.image_prompts import image_url

    if not prompt.strip():
        raise HTTPException(status_code=400, detail="Prompt must not be empty")
    return {"url": image_url(prompt, width, height)}
