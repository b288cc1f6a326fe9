import pytest

from file_organizer_ai.errors import InvalidConfiguration, InvalidURL
from file_organizer_ai.llm.request_builder import (
    build_endpoint_url,
    build_request,
    construct_endpoint,
)
from file_organizer_ai.models import AIConfig

CANONICAL = "https://api.example.com/v1/chat/completions"


class StubPrompts:
    def __init__(self) -> None:
        self.system_calls: list[str] = []
        self.org_calls: list[dict] = []

    def build_system_prompt(self, persona_info: str) -> str:
        self.system_calls.append(persona_info)
        return f"SYSTEM[{persona_info}]"

    def build_organization_prompt(
        self, files, enable_reasoning=False, include_content_metadata=False, custom_instructions=None
    ) -> str:
        self.org_calls.append(
            {
                "files": files,
                "enable_reasoning": enable_reasoning,
                "include_content_metadata": include_content_metadata,
                "custom_instructions": custom_instructions,
            }
        )
        return "USER"


@pytest.mark.parametrize(
    "base",
    [
        "https://api.example.com",
        "https://api.example.com/",
        "https://api.example.com/v1",
        "https://api.example.com/v1/",
        "https://api.example.com/v1/chat/completions",
    ],
)
def test_construct_endpoint_normalizes_every_base_form(base):
    assert construct_endpoint(base) == CANONICAL


def test_construct_endpoint_keeps_path_prefix():
    assert (
        construct_endpoint("https://api.groq.com/openai")
        == "https://api.groq.com/openai/v1/chat/completions"
    )


def test_build_endpoint_url_requires_base_url():
    with pytest.raises(InvalidConfiguration):
        build_endpoint_url(AIConfig(api_url=None, api_key="k"))
    with pytest.raises(InvalidConfiguration):
        build_endpoint_url(AIConfig(api_url="   ", api_key="k"))


def test_build_endpoint_url_requires_key_when_configured():
    with pytest.raises(InvalidConfiguration):
        build_endpoint_url(AIConfig(api_url="https://api.example.com", api_key=None))
    with pytest.raises(InvalidConfiguration):
        build_endpoint_url(AIConfig(api_url="https://api.example.com", api_key=""))


def test_build_endpoint_url_allows_missing_key_when_not_required():
    config = AIConfig(api_url="http://localhost:11434", requires_api_key=False)
    assert str(build_endpoint_url(config)) == "http://localhost:11434/v1/chat/completions"


@pytest.mark.parametrize("base", ["not a url", "ftp://files.example.com", "localhost:11434"])
def test_build_endpoint_url_rejects_non_http_urls(base):
    with pytest.raises(InvalidURL):
        build_endpoint_url(AIConfig(api_url=base, requires_api_key=False))


def test_build_request_uses_persona_prompt_and_config_defaults(sample_files):
    prompts = StubPrompts()
    config = AIConfig(api_url="https://x", model="m", temperature=0.3, enable_reasoning=True)

    request = build_request(
        config, sample_files, prompts, custom_instructions="by year", persona_prompt="DEV"
    )
    payload = request.to_payload()

    assert prompts.system_calls == ["DEV"]
    assert prompts.org_calls[0]["include_content_metadata"] is True
    assert prompts.org_calls[0]["enable_reasoning"] is True
    assert prompts.org_calls[0]["custom_instructions"] == "by year"
    assert payload["model"] == "m"
    assert payload["temperature"] == 0.3
    assert payload["messages"] == [
        {"role": "system", "content": "SYSTEM[DEV]"},
        {"role": "user", "content": "USER"},
    ]
    assert payload["response_format"] == {"type": "json_object"}
    assert "max_tokens" not in payload
    assert "stream" not in payload


def test_build_request_system_override_is_verbatim(sample_files):
    prompts = StubPrompts()
    config = AIConfig(api_url="https://x", system_prompt_override="Only JSON please.")

    payload = build_request(config, sample_files, prompts, persona_prompt="DEV").to_payload()

    assert prompts.system_calls == []
    assert payload["messages"][0]["content"] == "Only JSON please."


def test_build_request_temperature_override_and_max_tokens(sample_files):
    config = AIConfig(api_url="https://x", temperature=0.7, max_tokens=4096)

    payload = build_request(config, sample_files, StubPrompts(), temperature=0.0).to_payload()

    assert payload["temperature"] == 0.0
    assert payload["max_tokens"] == 4096
