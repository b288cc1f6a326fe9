import pydantic
import pytest

from file_organizer_ai.config import Settings, get_personas
from file_organizer_ai.errors import InvalidConfiguration
from file_organizer_ai.llm import OpenAIClient, create_client
from file_organizer_ai.models import AIConfig, AIProvider


def test_from_settings_fills_provider_defaults():
    settings = Settings(_env_file=None, llm_provider="ollama")

    config = AIConfig.from_settings(settings)

    assert config.provider is AIProvider.OLLAMA
    assert config.api_url == "http://localhost:11434"
    assert config.model == "llama3"
    assert config.requires_api_key is False
    assert config.api_key is None
    assert config.enable_streaming is True


def test_from_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "groq")
    monkeypatch.setenv("LLM_API_KEY", "gsk-test")
    monkeypatch.setenv("LLM_MODEL", "mixtral")
    monkeypatch.setenv("LLM_MAX_TOKENS", "2048")
    monkeypatch.setenv("LLM_ENABLE_STREAMING", "false")

    config = AIConfig.from_settings(Settings(_env_file=None))

    assert config.api_url == "https://api.groq.com/openai"
    assert config.api_key == "gsk-test"
    assert config.model == "mixtral"
    assert config.max_tokens == 2048
    assert config.enable_streaming is False
    assert config.requires_api_key is True


def test_config_is_immutable():
    config = AIConfig(api_url="https://x")
    with pytest.raises(pydantic.ValidationError):
        config.model = "other"


def test_api_key_not_in_repr():
    assert "secret-value" not in repr(AIConfig(api_key="secret-value"))


def test_for_provider_overrides():
    config = AIConfig.for_provider(AIProvider.OPEN_ROUTER, api_key="k", temperature=0.1)
    assert config.api_url == "https://openrouter.ai/api/v1"
    assert config.model == "openai/gpt-4o"
    assert config.temperature == 0.1


def test_create_client_rejects_non_openai_provider():
    with pytest.raises(InvalidConfiguration):
        create_client(AIConfig.for_provider(AIProvider.ANTHROPIC, api_key="k"))


def test_create_client_builds_openai_client():
    client = create_client(AIConfig.for_provider(AIProvider.OLLAMA))
    assert isinstance(client, OpenAIClient)


def test_personas_load_from_yaml(tmp_path):
    (tmp_path / "personas.yaml").write_text(
        "personas:\n  tiny:\n    name: Tiny\n    prompt: Keep it small\n"
    )
    assert get_personas(str(tmp_path)) == {"tiny": {"name": "Tiny", "prompt": "Keep it small"}}


def test_missing_persona_file_is_empty(tmp_path):
    assert get_personas(str(tmp_path / "nowhere")) == {}


def test_default_personas_ship_with_repo():
    personas = get_personas()
    assert {"general", "developer", "photographer", "office"} <= set(personas)
