"""Organization plan data model."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from file_organizer_ai.models.file_item import FileItem


class GenerationStats(BaseModel):
    """Timing and throughput for one completed call.

    ``total_tokens`` is an estimate (content length // 4), not a tokenizer count.
    """

    model_config = ConfigDict(frozen=True)

    duration: float = Field(..., description="Wall-clock seconds, start to end")
    tps: float = Field(..., description="Estimated tokens per second")
    ttft: float = Field(..., description="Seconds until first content was observable")
    total_tokens: int = Field(..., description="Estimated token count")
    model: str = Field(...)


class FileRenameMapping(BaseModel):
    """A file with an AI-suggested new name."""

    original_file: FileItem
    suggested_name: str | None = None
    rename_reason: str | None = None

    @property
    def final_filename(self) -> str:
        return self.suggested_name or self.original_file.display_name

    @property
    def has_rename(self) -> bool:
        return self.suggested_name is not None and self.suggested_name != self.original_file.display_name


class FileTagMapping(BaseModel):
    """Finder-style tags suggested for a file."""

    original_file: FileItem
    tags: list[str] = Field(default_factory=list)


class FolderSuggestion(BaseModel):
    """One suggested folder, possibly nested."""

    id: UUID = Field(default_factory=uuid4)
    folder_name: str
    description: str = ""
    files: list[FileItem] = Field(default_factory=list)
    subfolders: list["FolderSuggestion"] = Field(default_factory=list)
    reasoning: str = ""
    file_rename_mappings: list[FileRenameMapping] = Field(default_factory=list)
    file_tag_mappings: list[FileTagMapping] = Field(default_factory=list)
    semantic_tags: list[str] = Field(default_factory=list)
    confidence_score: float | None = None

    @property
    def total_file_count(self) -> int:
        return len(self.files) + sum(s.total_file_count for s in self.subfolders)


class UnorganizedFile(BaseModel):
    """A file the model chose not to place, with its reason."""

    filename: str
    reason: str


class OrganizationPlan(BaseModel):
    """Complete organization proposal returned by the response parser."""

    id: UUID = Field(default_factory=uuid4)
    suggestions: list[FolderSuggestion] = Field(default_factory=list)
    unorganized_files: list[FileItem] = Field(default_factory=list)
    unorganized_details: list[UnorganizedFile] = Field(default_factory=list)
    notes: str = ""
    timestamp: datetime = Field(default_factory=datetime.now)
    version: int = 1
    generation_stats: GenerationStats | None = None

    @property
    def total_files(self) -> int:
        return sum(s.total_file_count for s in self.suggestions) + len(self.unorganized_files)

    @property
    def total_folders(self) -> int:
        def count(folders: list[FolderSuggestion]) -> int:
            return len(folders) + sum(count(f.subfolders) for f in folders)

        return count(self.suggestions)
