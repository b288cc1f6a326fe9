import httpx

from file_organizer_ai.errors import (
    AIClientError,
    InvalidConfiguration,
    InvalidURL,
    MalformedResponse,
    NetworkError,
    ProviderError,
    TransportFailure,
    redact_keys,
)


def test_taxonomy_shares_base_class():
    for cls in (InvalidConfiguration, InvalidURL, TransportFailure, ProviderError, MalformedResponse):
        assert issubclass(cls, AIClientError)
    assert NetworkError is TransportFailure


def test_provider_error_message_explains_status():
    error = ProviderError(401, "")
    assert "API Error (401)" in str(error)
    assert "Authentication failed" in error.explanation
    assert "unexpected status code" in ProviderError(418, "").explanation


def test_provider_error_detail_extracts_openai_message():
    body = '{"error": {"message": "model not found", "type": "invalid_request_error"}}'
    detail = ProviderError(404, body).detail
    assert detail.startswith("Error: model not found")
    assert "Raw Response:" in detail


def test_provider_error_detail_other_formats():
    assert ProviderError(500, '{"error": "ollama down"}').detail.startswith("Error: ollama down")
    assert ProviderError(500, '{"message": "plain"}').detail.startswith("Error: plain")
    assert "HTML error page" in ProviderError(502, "<html>bad gateway</html>").detail
    assert ProviderError(500, "short text").detail == "short text"


def test_detail_redacts_keys():
    body = '{"error": {"message": "Incorrect API key provided: sk-abcdefghijklmnopqrstuvwx"}}'
    detail = ProviderError(401, body).detail
    assert "sk-abcdefghijklmnopqrstuvwx" not in detail
    assert "[REDACTED KEY]" in detail
    assert redact_keys("token " + "a" * 40) == "token [REDACTED KEY]"


def test_transport_failure_keeps_cause():
    cause = httpx.ConnectError("refused")
    error = TransportFailure(cause)
    assert error.cause is cause
    assert "refused" in str(error)
