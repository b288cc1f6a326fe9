import asyncio

import pytest

from file_organizer_ai.models import GenerationStats, OrganizationPlan
from file_organizer_ai.services.organize_service import OrganizeService, UnknownPersona

PERSONAS = {
    "general": {"name": "General", "prompt": "Be sensible"},
    "developer": {"name": "Developer", "description": "Code first", "prompt": "Group by language"},
}


class StubClient:
    def __init__(self) -> None:
        self.calls: list[dict] = []

    async def analyze(self, files, **kwargs) -> OrganizationPlan:
        self.calls.append(kwargs)
        return OrganizationPlan(
            generation_stats=GenerationStats(duration=1.0, tps=5.0, ttft=0.2, total_tokens=5, model="m")
        )


def test_persona_prompt_defaults_to_general():
    service = OrganizeService(StubClient(), PERSONAS)
    assert service.persona_prompt(None) == "Be sensible"
    assert service.persona_prompt(" Developer ") == "Group by language"


def test_unknown_persona_raises():
    with pytest.raises(UnknownPersona):
        OrganizeService(StubClient(), PERSONAS).persona_prompt("pirate")


def test_no_presets_means_no_persona_prompt():
    assert OrganizeService(StubClient(), {}).persona_prompt("anything") == ""


def test_list_personas():
    assert OrganizeService(StubClient(), PERSONAS).list_personas() == [
        {"id": "general", "name": "General", "description": ""},
        {"id": "developer", "name": "Developer", "description": "Code first"},
    ]


def test_organize_passes_persona_prompt_through(sample_files):
    client = StubClient()
    service = OrganizeService(client, PERSONAS)

    plan = asyncio.run(
        service.organize(sample_files, persona="developer", custom_instructions="flat", temperature=0.2)
    )

    assert plan.generation_stats.model == "m"
    assert client.calls == [
        {
            "custom_instructions": "flat",
            "persona_prompt": "Group by language",
            "temperature": 0.2,
            "delegate": None,
        }
    ]
