"""Data models."""

from file_organizer_ai.models.ai_config import AIConfig, AIProvider
from file_organizer_ai.models.file_item import ContentMetadata, FileItem
from file_organizer_ai.models.organization_plan import (
    FileRenameMapping,
    FileTagMapping,
    FolderSuggestion,
    GenerationStats,
    OrganizationPlan,
    UnorganizedFile,
)

__all__ = [
    "AIConfig",
    "AIProvider",
    "ContentMetadata",
    "FileItem",
    "FileRenameMapping",
    "FileTagMapping",
    "FolderSuggestion",
    "GenerationStats",
    "OrganizationPlan",
    "UnorganizedFile",
]
