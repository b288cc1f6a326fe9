"""Client factory - picks the client implementation for a provider."""

from file_organizer_ai.config import get_settings
from file_organizer_ai.errors import InvalidConfiguration
from file_organizer_ai.llm.base import AIClient
from file_organizer_ai.llm.openai_client import OpenAIClient
from file_organizer_ai.models import AIConfig


def create_client(config: AIConfig | None = None) -> AIClient:
    """
    Create a client for config, or for the environment settings when omitted.
    Only OpenAI-compatible providers are served here.
    """
    config = config or AIConfig.from_settings(get_settings())
    if not config.provider.is_openai_compatible:
        raise InvalidConfiguration(
            f"{config.provider.display_name} is not an OpenAI-compatible provider"
        )
    return OpenAIClient(config)
