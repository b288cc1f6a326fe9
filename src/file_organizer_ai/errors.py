"""Typed errors raised by AI clients."""

import json
import re

KEY_PATTERNS = [
    re.compile(r"sk-[a-zA-Z0-9]{20,}"),
    re.compile(r"ant-api-[a-zA-Z0-9-]{20,}"),
    re.compile(r"[a-zA-Z0-9]{32,}"),
]

STATUS_EXPLANATIONS = {
    401: "Authentication failed. Your API key may be invalid or expired. Please check your credentials.",
    403: "Access denied. Your API key doesn't have permissions for this model or feature.",
    404: "Model or endpoint not found. Please verify the model name and API URL in settings.",
    429: "Rate limit exceeded. You've sent too many requests. Please wait a moment before trying again.",
    500: "Internal server error. The AI provider is experiencing technical difficulties.",
    501: "Not supported. This provider or feature is not available in your current environment.",
    503: "Service unavailable. The AI provider's servers are overloaded or undergoing maintenance.",
}

MAX_DETAIL_CHARS = 300


def redact_keys(text: str) -> str:
    """Replace anything that looks like an API key."""
    for pattern in KEY_PATTERNS:
        text = pattern.sub("[REDACTED KEY]", text)
    return text


class AIClientError(RuntimeError):
    """Base class for every failure surfaced by an AI client."""


class InvalidConfiguration(AIClientError):
    """Base URL missing, or API key required but absent."""


class InvalidURL(AIClientError):
    """Endpoint does not parse as an http(s) URL after normalization."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid API URL: {url!r}. Ensure it starts with http:// or https://.")
        self.url = url


class TransportFailure(AIClientError):
    """Lower-level network fault (connect, read, timeout, ...)."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Connection Failed: {cause}")
        self.cause = cause


NetworkError = TransportFailure


class ProviderError(AIClientError):
    """Provider answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"API Error ({status_code}): {self.explain(status_code)}")
        self.status_code = status_code
        self.body = body

    @staticmethod
    def explain(status_code: int) -> str:
        return STATUS_EXPLANATIONS.get(
            status_code, "The request failed with an unexpected status code."
        )

    @property
    def explanation(self) -> str:
        return self.explain(self.status_code)

    @property
    def detail(self) -> str:
        """Provider message pulled out of the body, keys redacted."""
        parsed = _extract_message(self.body)
        raw = redact_keys(self.body)
        if parsed != self.body and self.body:
            return f"Error: {redact_keys(parsed)}\n\nRaw Response:\n{raw}"
        return raw


class MalformedResponse(AIClientError):
    """Response body present but not in the expected shape."""


def _extract_message(body: str) -> str:
    """Pull a human message out of common provider error formats."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        # {"error": {"message": "..."}} (OpenAI and most compatibles)
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        if isinstance(data.get("message"), str):
            return data["message"]
        # {"error": "..."} (Ollama)
        if isinstance(error, str):
            return error
    if "<html>" in body:
        return (
            "The server returned an HTML error page instead of JSON. "
            "This often happens with proxy or DNS issues."
        )
    if len(body) > MAX_DETAIL_CHARS:
        return body[:MAX_DETAIL_CHARS] + "..."
    return body
