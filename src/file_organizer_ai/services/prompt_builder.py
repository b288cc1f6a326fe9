"""Prompt construction for file organization requests."""

from collections import defaultdict

from file_organizer_ai.models import FileItem

MAX_FILES_PER_GROUP = 50

SYSTEM_PROMPT = """You are an intelligent file organization assistant. Your task is to analyze a list of files in a directory and suggest a logical folder structure to organize them.

## Core Principles:

1. **Hierarchy Depth**: Create a maximum 3-level deep folder structure. Avoid overly nested hierarchies.

2. **Naming Conventions**:
  - Use clear, descriptive folder names (e.g., "Documents", "Media", "Code Projects", "Archives")
  - Avoid generic names like "Misc" or "Other" unless absolutely necessary
  - Keep folder names concise (2-4 words max)

3. **Categorization Strategy**:
  - **Primary**: Group by file type/category (Documents, Media, Code, Archives, etc.)
  - **Secondary**: Group by purpose/project within each category
  - **Tertiary**: Use content patterns, filenames, and metadata to infer relationships
  - **Tagging**: Assign 1-3 short, meaningful tags to EVERY file (e.g. "Invoice", "Work", "Archive")

4. **Smart Grouping Rules**:
  - Group files with similar prefixes/suffixes (e.g., "project_v1", "project_v2" -> "Project")
  - Recognize date patterns (YYYY-MM-DD) and group chronologically if relevant
  - Don't create folders for single files unless they're part of a clear project
  - Flag files with unclear purpose in the "unorganized" section

5. **Output Format**:
   Return ONLY valid JSON with this exact structure:
   {
     "folders": [
       {
         "name": "folder_name",
         "description": "brief purpose description",
         "subfolders": [
           {"name": "subfolder_name", "description": "brief description", "files": ["filename.ext"]}
         ],
         "files": [
           {"filename": "filename.ext", "tags": ["tag1", "tag2"]}
         ]
       }
     ],
     "unorganized": [
       {"filename": "name.ext", "reason": "explanation for why it's unorganized"}
     ],
     "notes": "Any additional recommendations or observations"
   }

Return ONLY the JSON object, no additional text, explanations, or markdown formatting.
"""

REASONING_PROMPT = """
## IMPORTANT: Detailed Reasoning Mode Enabled

For EACH folder in your response, you MUST include a "reasoning" field of 3-5 sentences covering:
1. **Pattern Recognition**: which naming patterns, file types or metadata led to the grouping.
2. **Semantic Grouping**: what the files have in common beyond file type.
3. **Alternative Consideration**: 1-2 alternative structures you rejected, and why.
4. **User Benefit**: how this organization improves findability.

Shallow, one-sentence explanations are NOT acceptable.
"""


class PromptBuilder:
    """Builds system and user prompts for an organization request."""

    def __init__(self, max_top_level_folders: int | None = None, enable_reasoning: bool = False) -> None:
        self._max_top_level_folders = max_top_level_folders
        self._enable_reasoning = enable_reasoning

    def build_system_prompt(self, persona_info: str) -> str:
        prompt = SYSTEM_PROMPT
        if self._max_top_level_folders:
            prompt += (
                f"\n## Folder Limit\nCreate at most {self._max_top_level_folders} "
                "top-level folders. Merge smaller categories if needed.\n"
            )
        if persona_info:
            prompt += "\n" + persona_info
        if self._enable_reasoning:
            prompt += REASONING_PROMPT
        return prompt

    def build_organization_prompt(
        self,
        files: list[FileItem],
        enable_reasoning: bool = False,
        include_content_metadata: bool = False,
        custom_instructions: str | None = None,
    ) -> str:
        """
        User prompt listing files grouped by extension, at most 50 per group.
        """
        lines = ["Organize the following files into a logical folder structure:", ""]
        if custom_instructions:
            lines += [f"USER INSTRUCTIONS: {custom_instructions}", ""]
        lines += [f"Files to organize ({len(files)} total):", ""]

        grouped: dict[str, list[FileItem]] = defaultdict(list)
        for f in files:
            grouped[f.extension.lower()].append(f)

        for ext in sorted(grouped):
            group = grouped[ext]
            label = f".{ext}" if ext else "no extension"
            lines.append(f"{label.upper()} files ({len(group)}):")
            for f in group[:MAX_FILES_PER_GROUP]:
                desc = f"  - {f.display_name} ({f.formatted_size})"
                meta = f.content_metadata
                if include_content_metadata and meta is not None and not meta.is_empty:
                    desc += f" {meta.summary}"
                lines.append(desc)
            if len(group) > MAX_FILES_PER_GROUP:
                lines.append(f"  ... and {len(group) - MAX_FILES_PER_GROUP} more {label} files")

        lines.append("")
        if enable_reasoning:
            lines.append(
                "Provide detailed reasoning for each folder. "
                "Include the organization structure in JSON format."
            )
        else:
            lines.append("Provide the organization structure in JSON format.")
        return "\n".join(lines)
