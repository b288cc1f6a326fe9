"""Parses model JSON output into an OrganizationPlan."""

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from file_organizer_ai.errors import MalformedResponse
from file_organizer_ai.models import (
    FileItem,
    FileRenameMapping,
    FileTagMapping,
    FolderSuggestion,
    OrganizationPlan,
    UnorganizedFile,
)

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
FOLDER_NAME_RE = re.compile(r'"name"\s*:\s*"([^"]+)"')
FOLDER_FILES_RE = re.compile(r'"files"\s*:\s*\[([^\]]+)\]')
QUOTED_RE = re.compile(r'"([^"]+)"')


class ResponseParseError(MalformedResponse):
    """Model output could not be turned into a plan."""


def _clean_json(raw: str) -> str:
    """Strip markdown fences and surrounding prose down to the outer object."""
    text = raw.strip()
    if "```" in text:
        match = FENCE_RE.search(text)
        if match:
            text = match.group(1).strip()
    start, end = text.find("{"), text.rfind("}")
    if start != -1 and end > start:
        text = text[start : end + 1]
    return text


def _text(value: Any, default: str | None = "") -> str | None:
    """String values pass through; anything else the model emitted becomes default."""
    return value if isinstance(value, str) else default


def _items(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def find_file(filename: str, files: list[FileItem]) -> FileItem | None:
    """Match by display name, bare name, case-insensitively, then by containment."""
    if not filename:
        return None
    for f in files:
        if f.display_name == filename:
            return f
    for f in files:
        if f.name == filename:
            return f
    lowered = filename.lower()
    for f in files:
        if f.display_name.lower() == lowered:
            return f
    for f in files:
        if filename in f.display_name or f.display_name in filename:
            return f
    return None


class ResponseParser:
    """Turns raw model text into an OrganizationPlan."""

    def parse_response(self, content: str, original_files: list[FileItem]) -> OrganizationPlan:
        if not content.strip():
            raise ResponseParseError("Empty response from AI")
        try:
            data = json.loads(_clean_json(content))
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse plan JSON: %s. Raw: %s", e, content[:200])
            raise ResponseParseError("Invalid JSON response from AI") from e
        if not isinstance(data, dict):
            raise ResponseParseError("Invalid JSON response from AI")

        try:
            if isinstance(data.get("f"), list):
                return self._parse_compact(data["f"], original_files)
            return self._parse_full(data, original_files)
        except ValidationError as e:
            logger.warning("Plan JSON has unexpected field types: %s", e)
            raise ResponseParseError("Response fields have unexpected types") from e

    def _parse_full(self, data: dict[str, Any], original_files: list[FileItem]) -> OrganizationPlan:
        folders = data.get("folders")
        if not isinstance(folders, list):
            raise ResponseParseError("Response missing required fields")

        suggestions = [
            self._convert_folder(folder, original_files)
            for folder in folders
            if isinstance(folder, dict) and isinstance(folder.get("name"), str)
        ]
        details = [
            UnorganizedFile(filename=u["filename"], reason=_text(u.get("reason")))
            for u in _items(data.get("unorganized"))
            if isinstance(u, dict) and isinstance(u.get("filename"), str)
        ]
        unorganized = [
            f for f in (find_file(d.filename, original_files) for d in details) if f is not None
        ]
        return OrganizationPlan(
            suggestions=suggestions,
            unorganized_files=unorganized,
            unorganized_details=details,
            notes=_text(data.get("notes")),
        )

    def _parse_compact(self, folders: list[Any], original_files: list[FileItem]) -> OrganizationPlan:
        """Compact format: {"f": [{"n": "Folder", "files": [...]}]}."""
        suggestions: list[FolderSuggestion] = []
        for entry in folders:
            if not isinstance(entry, dict):
                continue
            name, names = entry.get("n"), entry.get("files")
            if not isinstance(name, str) or not isinstance(names, list):
                continue
            matched = [
                f
                for f in (find_file(n, original_files) for n in names if isinstance(n, str))
                if f
            ]
            suggestions.append(
                FolderSuggestion(
                    folder_name=name,
                    files=matched,
                    reasoning="Generated from ultra-compact format",
                )
            )
        organized = {f.id for s in suggestions for f in s.files}
        return OrganizationPlan(
            suggestions=suggestions,
            unorganized_files=[f for f in original_files if f.id not in organized],
            notes="Processed via ultra-compact strategy",
        )

    def _convert_folder(self, folder: dict[str, Any], original_files: list[FileItem]) -> FolderSuggestion:
        files: list[FileItem] = []
        renames: list[FileRenameMapping] = []
        tags: list[FileTagMapping] = []

        for entry in _items(folder.get("files")):
            # Entries are either bare filenames or objects
            if isinstance(entry, str):
                entry = {"filename": entry}
            if not isinstance(entry, dict) or not isinstance(entry.get("filename"), str):
                continue
            file = find_file(entry["filename"], original_files)
            if file is None:
                continue
            files.append(file)
            if suggested := _text(entry.get("suggested_name"), None):
                renames.append(
                    FileRenameMapping(
                        original_file=file,
                        suggested_name=suggested,
                        rename_reason=_text(entry.get("rename_reason"), None),
                    )
                )
            if file_tags := [t for t in _items(entry.get("tags")) if isinstance(t, str)]:
                tags.append(FileTagMapping(original_file=file, tags=file_tags))

        subfolders = [
            self._convert_folder(sub, original_files)
            for sub in _items(folder.get("subfolders"))
            if isinstance(sub, dict) and isinstance(sub.get("name"), str)
        ]
        description = _text(folder.get("description"))
        confidence = folder.get("confidence")
        # bool is an int subclass; true/false is not a score
        if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
            confidence = None
        return FolderSuggestion(
            folder_name=folder["name"],
            description=description,
            files=files,
            subfolders=subfolders,
            reasoning=_text(folder.get("reasoning")) or description,
            file_rename_mappings=renames,
            file_tag_mappings=tags,
            semantic_tags=[t for t in _items(folder.get("semantic_tags")) if isinstance(t, str)],
            confidence_score=float(confidence) if confidence is not None else None,
        )

    def validate_structure(self, content: str) -> bool:
        """True if content decodes to the full folders format."""
        try:
            data = json.loads(_clean_json(content))
        except json.JSONDecodeError:
            return False
        return isinstance(data, dict) and isinstance(data.get("folders"), list)

    def extract_partial_results(
        self, content: str, original_files: list[FileItem]
    ) -> OrganizationPlan | None:
        """Regex fallback for truncated or malformed JSON. None if nothing usable."""
        suggestions: list[FolderSuggestion] = []
        assigned: set = set()
        file_lists = FOLDER_FILES_RE.findall(content)
        for i, folder_name in enumerate(FOLDER_NAME_RE.findall(content)):
            if i >= len(file_lists):
                break
            matched: list[FileItem] = []
            for name in QUOTED_RE.findall(file_lists[i]):
                file = find_file(name, original_files)
                if file is not None and file.id not in assigned:
                    matched.append(file)
                    assigned.add(file.id)
            if matched:
                suggestions.append(
                    FolderSuggestion(
                        folder_name=folder_name,
                        files=matched,
                        reasoning="Extracted from partial response",
                    )
                )
        if not suggestions:
            return None
        return OrganizationPlan(
            suggestions=suggestions,
            unorganized_files=[f for f in original_files if f.id not in assigned],
            notes="Partial extraction - some organization data may be missing",
        )
