"""Chat-completion request construction - endpoint URL and payload."""

from typing import Protocol

import httpx

from file_organizer_ai.errors import InvalidConfiguration, InvalidURL
from file_organizer_ai.llm.schemas import ChatCompletionRequest, ChatMessage
from file_organizer_ai.models import AIConfig, FileItem

CHAT_COMPLETIONS_PATH = "/v1/chat/completions"


class PromptSource(Protocol):
    def build_system_prompt(self, persona_info: str) -> str:
        ...

    def build_organization_prompt(
        self,
        files: list[FileItem],
        enable_reasoning: bool = False,
        include_content_metadata: bool = False,
        custom_instructions: str | None = None,
    ) -> str:
        ...


def construct_endpoint(api_url: str) -> str:
    """Normalize a base URL so it ends at /v1/chat/completions."""
    if api_url.endswith(CHAT_COMPLETIONS_PATH):
        return api_url
    if api_url.endswith("/v1"):
        return f"{api_url}/chat/completions"
    if api_url.endswith("/v1/"):
        return f"{api_url}chat/completions"
    if api_url.endswith("/"):
        return f"{api_url}v1/chat/completions"
    return f"{api_url}{CHAT_COMPLETIONS_PATH}"


def validate_config(config: AIConfig) -> str:
    """Return the configured base URL or raise InvalidConfiguration."""
    api_url = (config.api_url or "").strip()
    if not api_url:
        raise InvalidConfiguration("API URL is required")
    if config.requires_api_key and not config.api_key:
        raise InvalidConfiguration(
            "API key is required. Set one or disable 'requires API key' for local models."
        )
    return api_url


def parse_url(url: str) -> httpx.URL:
    """Parse an absolute http(s) URL or raise InvalidURL."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError) as e:
        raise InvalidURL(url) from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidURL(url)
    return parsed


def build_endpoint_url(config: AIConfig) -> httpx.URL:
    """Validated chat-completions endpoint for config."""
    return parse_url(construct_endpoint(validate_config(config)))


def build_request(
    config: AIConfig,
    files: list[FileItem],
    prompt_builder: PromptSource,
    *,
    custom_instructions: str | None = None,
    persona_prompt: str | None = None,
    temperature: float | None = None,
) -> ChatCompletionRequest:
    """
    Build the organization request body.
    System prompt override wins over the persona-derived prompt; a per-call
    temperature wins over the configured default.
    """
    if config.system_prompt_override is not None:
        system_prompt = config.system_prompt_override
    else:
        system_prompt = prompt_builder.build_system_prompt(persona_prompt or "")
    user_prompt = prompt_builder.build_organization_prompt(
        files,
        enable_reasoning=config.enable_reasoning,
        include_content_metadata=True,
        custom_instructions=custom_instructions,
    )
    return ChatCompletionRequest(
        model=config.model,
        messages=[
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=user_prompt),
        ],
        temperature=temperature if temperature is not None else config.temperature,
        max_tokens=config.max_tokens,
    )
