"""LLM abstraction - OpenAI-compatible."""

from file_organizer_ai.llm.base import AIClient, StreamingDelegate
from file_organizer_ai.llm.factory import create_client
from file_organizer_ai.llm.openai_client import OpenAIClient

__all__ = ["AIClient", "OpenAIClient", "StreamingDelegate", "create_client"]
