"""Prompt and response collaborators."""

from file_organizer_ai.services.prompt_builder import PromptBuilder
from file_organizer_ai.services.response_parser import ResponseParseError, ResponseParser

__all__ = ["PromptBuilder", "ResponseParseError", "ResponseParser"]
