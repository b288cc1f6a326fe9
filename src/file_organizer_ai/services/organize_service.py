"""Organize service - business logic between transport and the AI client."""

import logging
from typing import Any

from file_organizer_ai.config import get_personas
from file_organizer_ai.llm.base import AIClient, StreamingDelegate
from file_organizer_ai.models import FileItem, OrganizationPlan

logger = logging.getLogger(__name__)

DEFAULT_PERSONA = "general"


class UnknownPersona(ValueError):
    """Persona id not present in the persona presets."""


class OrganizeService:
    """Resolves personas and runs one organization request."""

    def __init__(self, client: AIClient, personas: dict[str, Any] | None = None) -> None:
        self._client = client
        self._personas = personas if personas is not None else get_personas()

    def persona_prompt(self, persona: str | None) -> str:
        """Prompt text for a persona id. Empty when no presets are configured."""
        persona_id = (persona or DEFAULT_PERSONA).strip().lower()
        if not self._personas:
            return ""
        entry = self._personas.get(persona_id)
        if entry is None:
            raise UnknownPersona(persona_id)
        return str(entry.get("prompt", ""))

    def list_personas(self) -> list[dict[str, str]]:
        return [
            {
                "id": persona_id,
                "name": str(entry.get("name", persona_id)),
                "description": str(entry.get("description", "")),
            }
            for persona_id, entry in self._personas.items()
        ]

    async def organize(
        self,
        files: list[FileItem],
        *,
        custom_instructions: str | None = None,
        persona: str | None = None,
        temperature: float | None = None,
        delegate: StreamingDelegate | None = None,
    ) -> OrganizationPlan:
        """Errors from the client propagate unchanged; the caller decides on retries."""
        plan = await self._client.analyze(
            files,
            custom_instructions=custom_instructions,
            persona_prompt=self.persona_prompt(persona),
            temperature=temperature,
            delegate=delegate,
        )
        stats = plan.generation_stats
        if stats is not None:
            logger.info(
                "Plan ready: %d folders, %d files, %.2fs (~%d tokens)",
                plan.total_folders,
                plan.total_files,
                stats.duration,
                stats.total_tokens,
            )
        return plan
