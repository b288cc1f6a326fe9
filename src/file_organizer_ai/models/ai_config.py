"""AI provider configuration model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from file_organizer_ai.config import Settings


class AIProvider(str, Enum):
    """Supported chat-completion providers."""

    OPENAI = "openai"
    GITHUB_COPILOT = "github_copilot"
    GROQ = "groq"
    OPENAI_COMPATIBLE = "openai_compatible"
    OPEN_ROUTER = "open_router"
    OLLAMA = "ollama"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def default_api_url(self) -> str:
        return _DEFAULT_URLS[self]

    @property
    def default_model(self) -> str:
        return _DEFAULT_MODELS[self]

    @property
    def typically_requires_api_key(self) -> bool:
        """Local runtimes such as Ollama usually run without auth."""
        return self is not AIProvider.OLLAMA

    @property
    def is_openai_compatible(self) -> bool:
        return self is not AIProvider.ANTHROPIC


_DISPLAY_NAMES = {
    AIProvider.OPENAI: "OpenAI",
    AIProvider.GITHUB_COPILOT: "GitHub Copilot",
    AIProvider.GROQ: "Groq",
    AIProvider.OPENAI_COMPATIBLE: "OpenAI-Compatible API",
    AIProvider.OPEN_ROUTER: "OpenRouter",
    AIProvider.OLLAMA: "Ollama (Local)",
    AIProvider.ANTHROPIC: "Anthropic (Claude)",
    AIProvider.GEMINI: "Google Gemini",
}

_DEFAULT_URLS = {
    AIProvider.OPENAI: "https://api.openai.com",
    AIProvider.GITHUB_COPILOT: "https://api.githubcopilot.com",
    AIProvider.GROQ: "https://api.groq.com/openai",
    AIProvider.OPENAI_COMPATIBLE: "https://api.openai.com",
    AIProvider.OPEN_ROUTER: "https://openrouter.ai/api/v1",
    AIProvider.OLLAMA: "http://localhost:11434",
    AIProvider.ANTHROPIC: "https://api.anthropic.com/v1/messages",
    AIProvider.GEMINI: "https://generativelanguage.googleapis.com/v1beta/openai",
}

_DEFAULT_MODELS = {
    AIProvider.OPENAI: "gpt-4o",
    AIProvider.GITHUB_COPILOT: "gpt-4o",
    AIProvider.GROQ: "llama-3.3-70b-versatile",
    AIProvider.OPENAI_COMPATIBLE: "gpt-4",
    AIProvider.OPEN_ROUTER: "openai/gpt-4o",
    AIProvider.OLLAMA: "llama3",
    AIProvider.ANTHROPIC: "claude-3-5-sonnet-20240620",
    AIProvider.GEMINI: "gemini-1.5-flash",
}


class AIConfig(BaseModel):
    """Immutable client configuration. Built once, read-only afterwards."""

    model_config = ConfigDict(frozen=True)

    provider: AIProvider = Field(default=AIProvider.OPENAI_COMPATIBLE)
    api_url: str | None = Field(default=None, description="Provider base URL")
    api_key: str | None = Field(default=None, repr=False)
    model: str = Field(default="gpt-4")
    temperature: float = Field(default=0.7)
    max_tokens: int | None = Field(default=None, description="Omitted from requests when None")
    requires_api_key: bool = Field(default=True)
    request_timeout: float = Field(default=120.0, description="Idle timeout per request (s)")
    resource_timeout: float = Field(default=600.0, description="Whole-exchange timeout (s)")
    enable_streaming: bool = Field(default=True)
    system_prompt_override: str | None = Field(default=None)
    enable_reasoning: bool = Field(default=False)
    max_top_level_folders: int = Field(default=10, ge=3, le=20)

    @classmethod
    def for_provider(cls, provider: AIProvider, **overrides) -> "AIConfig":
        """Config pre-filled with the provider's default URL, model and key policy."""
        values = {
            "provider": provider,
            "api_url": provider.default_api_url,
            "model": provider.default_model,
            "requires_api_key": provider.typically_requires_api_key,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIConfig":
        """Build from environment settings; unset values fall back to provider defaults."""
        provider = AIProvider(settings.llm_provider.strip().lower())
        requires_key = settings.llm_requires_api_key
        if requires_key is None:
            requires_key = provider.typically_requires_api_key
        return cls(
            provider=provider,
            api_url=settings.llm_base_url or provider.default_api_url,
            api_key=settings.llm_api_key or None,
            model=settings.llm_model or provider.default_model,
            temperature=settings.llm_temperature,
            max_tokens=settings.llm_max_tokens,
            requires_api_key=requires_key,
            request_timeout=settings.llm_request_timeout,
            resource_timeout=settings.llm_resource_timeout,
            enable_streaming=settings.llm_enable_streaming,
            system_prompt_override=settings.llm_system_prompt_override,
            enable_reasoning=settings.llm_enable_reasoning,
            max_top_level_folders=settings.max_top_level_folders,
        )
