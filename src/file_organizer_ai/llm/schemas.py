"""Wire schemas for the OpenAI-compatible chat-completions API."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class ChatCompletionRequest(BaseModel):
    """Request body. None fields are omitted on the wire."""

    model: str
    messages: list[ChatMessage]
    temperature: float
    response_format: dict[str, str] | None = Field(default_factory=lambda: {"type": "json_object"})
    max_tokens: int | None = None
    stream: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# Responses: every field optional so absence is checked explicitly by the client.


class ResponseMessage(BaseModel):
    content: str | None = None


class ResponseDelta(BaseModel):
    content: str | None = None


class Choice(BaseModel):
    message: ResponseMessage | None = None
    delta: ResponseDelta | None = None


class ChatCompletionResponse(BaseModel):
    """Full (non-streaming) response."""

    choices: list[Choice] = Field(default_factory=list)

    def first_message_content(self) -> str | None:
        if not self.choices or self.choices[0].message is None:
            return None
        return self.choices[0].message.content


class ChatCompletionChunk(BaseModel):
    """One SSE ``data:`` payload."""

    choices: list[Choice] = Field(default_factory=list)

    def first_delta_content(self) -> str | None:
        if not self.choices or self.choices[0].delta is None:
            return None
        return self.choices[0].delta.content
