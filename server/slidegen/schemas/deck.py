import enum
from typing import Optional

from pydantic import BaseModel, Field


class SlideLayout(str, enum.Enum):
    TITLE = "TITLE"
    CONTENT = "CONTENT"
    TWO_COLUMN = "TWO_COLUMN"
    QUOTE = "QUOTE"
    BIG_IMAGE = "BIG_IMAGE"


class SlideContent(BaseModel):
    title: str
    subtitle: Optional[str] = None
    points: Optional[list[str]] = None
    left_column: Optional[list[str]] = Field(default=None, alias="leftColumn")
    right_column: Optional[list[str]] = Field(default=None, alias="rightColumn")
    speaker_notes: Optional[str] = Field(default=None, alias="speakerNotes")
    image_prompt: Optional[str] = Field(default=None, alias="imagePrompt")
    image_description: Optional[str] = Field(default=None, alias="imageDescription")

    model_config = {"populate_by_name": True}


class Slide(BaseModel):
    id: str
    layout: SlideLayout
    content: SlideContent


class Deck(BaseModel):
    title: str
    slides: list[Slide]
    theme: str

    def to_wire(self) -> dict:
        """Serialize with camelCase keys, omitting absent optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ExportResponse(BaseModel):
    filename: str
    url: str
