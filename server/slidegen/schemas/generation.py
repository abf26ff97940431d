import enum
from typing import Optional

from pydantic import BaseModel, Field


class InputMode(str, enum.Enum):
    TOPIC = "topic"
    CONTENT = "content"
    FILE = "file"


class Attachment(BaseModel):
    mime_type: str = Field(alias="mimeType")
    data: str = ""  # base64, no data-URL prefix
    extracted_text: Optional[str] = Field(default=None, alias="extractedText")
    filename: Optional[str] = None

    model_config = {"populate_by_name": True}

    @property
    def is_image(self) -> bool:
        return self.mime_type.lower().startswith("image/")


class GenerationRequest(BaseModel):
    raw_text: str
    input_mode: InputMode
    theme: str
    requested_slide_count: int = Field(ge=1)
    attachments: list[Attachment] = []

    @property
    def images(self) -> list[Attachment]:
        return [a for a in self.attachments if a.is_image]

    @property
    def documents(self) -> list[Attachment]:
        """Non-image attachments that carry extracted text, in upload order."""
        return [
            a for a in self.attachments
            if not a.is_image and a.extracted_text and a.extracted_text.strip()
        ]

    @property
    def context_text(self) -> str:
        """User text followed by each document's extracted text, labelled, in upload order.

        Images never appear here; they travel as separate parts.
        """
        parts = [self.raw_text.strip()] if self.raw_text.strip() else []
        for i, doc in enumerate(self.documents, start=1):
            label = doc.filename or f"Document {i}"
            parts.append(f"--- Context from {label} ---\n{doc.extracted_text.strip()}")
        return "\n\n".join(parts)


class GenerateRequestBody(BaseModel):
    """JSON body for POST /api/presentations/generate."""

    text: str = ""
    theme: str = "modern"
    slide_count: int = Field(default=8, alias="slideCount")
    input_mode: str = Field(default="topic", alias="inputMode")
    attachments: list[Attachment] = []

    model_config = {"populate_by_name": True}
