"""File organization planning over OpenAI-compatible chat-completion APIs."""

__version__ = "0.1.0"
