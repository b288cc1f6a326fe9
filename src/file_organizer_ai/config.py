"""Configuration management - env-driven settings plus YAML persona presets."""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment and .env."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    log_level: str = Field(default="INFO", description="Root log level")

    # LLM (OpenAI-compatible)
    llm_provider: str = Field(default="openai_compatible", description="Provider identifier")
    llm_base_url: str | None = Field(default=None, description="OpenAI-compatible API base URL")
    llm_api_key: str = Field(default="", description="API key for LLM provider")
    llm_model: str | None = Field(default=None, description="Model name")
    llm_temperature: float = Field(default=0.7, description="Sampling temperature")
    llm_max_tokens: int | None = Field(default=None, description="Completion token cap")
    llm_requires_api_key: bool | None = Field(
        default=None,
        description="Force API key requirement; defaults to the provider's norm",
    )
    llm_request_timeout: float = Field(default=120.0, description="Per-request idle timeout (s)")
    llm_resource_timeout: float = Field(default=600.0, description="Whole-exchange timeout (s)")
    llm_enable_streaming: bool = Field(default=True, description="Use SSE streaming")
    llm_enable_reasoning: bool = Field(default=False, description="Ask for per-folder reasoning")
    llm_system_prompt_override: str | None = Field(default=None)

    # Organization
    max_top_level_folders: int = Field(default=10, ge=3, le=20)
    config_dir: Path | None = Field(default=None, description="Directory holding personas.yaml")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML config file."""
    if not config_path.exists():
        return {}
    with config_path.open() as f:
        return yaml.safe_load(f) or {}


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


@lru_cache
def get_personas(config_dir_str: str = "") -> dict[str, Any]:
    """Load persona presets (id -> {name, description, prompt}) from config."""
    if not config_dir_str:
        config_dir = Path(__file__).parent.parent.parent / "config"
    else:
        config_dir = Path(config_dir_str)
    data = load_yaml_config(config_dir / "personas.yaml")
    return data.get("personas", {})
