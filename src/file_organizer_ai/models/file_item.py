"""File metadata model."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ContentMetadata(BaseModel):
    """Content extracted by deep scanning (document text, OCR, EXIF)."""

    text_preview: str | None = Field(default=None, description="First chars of text content")
    document_title: str | None = Field(default=None)
    exif_data: dict[str, str] | None = Field(default=None, description="camera, dateTime, ...")
    page_count: int | None = Field(default=None)
    author: str | None = Field(default=None)
    keywords: list[str] | None = Field(default=None)
    ocr_text: str | None = Field(default=None)
    detected_keywords: list[str] | None = Field(default=None)

    @property
    def is_empty(self) -> bool:
        return (
            self.text_preview is None
            and self.document_title is None
            and self.exif_data is None
            and self.ocr_text is None
        )

    @property
    def summary(self) -> str:
        """Bracketed one-line summary for AI prompts."""
        parts: list[str] = []
        if self.document_title:
            parts.append(f'Title: "{self.document_title}"')
        if self.text_preview:
            trimmed = self.text_preview[:300].replace("\n", " ")
            parts.append(f'Content: "{trimmed}..."')
        if self.ocr_text:
            trimmed = self.ocr_text[:200].replace("\n", " ")
            parts.append(f'OCR: "{trimmed}..."')
        if self.detected_keywords:
            parts.append(f"Detected: {', '.join(self.detected_keywords)}")
        if self.exif_data:
            if camera := self.exif_data.get("camera"):
                parts.append(f"Camera: {camera}")
            if taken := self.exif_data.get("dateTime"):
                parts.append(f"Taken: {taken}")
        if self.page_count is not None:
            parts.append(f"{self.page_count} pages")
        return f"[{', '.join(parts)}]" if parts else ""


class FileItem(BaseModel):
    """A file offered to the model for organization."""

    id: UUID = Field(default_factory=uuid4)
    path: str = Field(..., description="Absolute path on disk")
    name: str = Field(..., description="Base name without extension")
    extension: str = Field(default="", description="Extension without the dot")
    size: int = Field(default=0, ge=0, description="Size in bytes")
    is_directory: bool = Field(default=False)
    creation_date: datetime | None = Field(default=None)
    modification_date: datetime | None = Field(default=None)
    content_metadata: ContentMetadata | None = Field(default=None)

    @property
    def display_name(self) -> str:
        if not self.extension:
            return self.name
        return f"{self.name}.{self.extension}"

    @property
    def formatted_size(self) -> str:
        """Human-readable size, decimal units."""
        if self.size < 1000:
            return f"{self.size} bytes"
        size = float(self.size)
        for unit in ("KB", "MB", "GB"):
            size /= 1000
            if size < 1000:
                return f"{size:.1f} {unit}"
        return f"{size / 1000:.1f} TB"
