"""FastAPI application - organize endpoints and health."""

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from file_organizer_ai.config import get_personas, get_settings
from file_organizer_ai.errors import (
    AIClientError,
    InvalidConfiguration,
    InvalidURL,
    ProviderError,
    TransportFailure,
)
from file_organizer_ai.llm import AIClient, create_client
from file_organizer_ai.models import FileItem, OrganizationPlan
from file_organizer_ai.services.organize_service import OrganizeService, UnknownPersona

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Dependency injection - created at startup
_client: AIClient | None = None
_service: OrganizeService | None = None


class OrganizeRequest(BaseModel):
    files: list[FileItem] = Field(..., min_length=1)
    custom_instructions: str | None = None
    persona: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup."""
    global _client, _service
    settings = get_settings()
    _client = create_client()
    _service = OrganizeService(_client, get_personas(str(settings.config_dir or "")))
    yield
    await _client.aclose()
    _client = None
    _service = None


app = FastAPI(
    title="File Organizer AI",
    description="Ask an OpenAI-compatible model to organize files into a folder plan",
    version="0.1.0",
    lifespan=lifespan,
)


def _error_status(error: AIClientError) -> int:
    if isinstance(error, (InvalidConfiguration, InvalidURL)):
        return 503
    if isinstance(error, TransportFailure):
        return 504
    return 502


def _error_body(error: AIClientError) -> dict[str, Any]:
    body: dict[str, Any] = {"error": type(error).__name__, "message": str(error)}
    if isinstance(error, ProviderError):
        body["status_code"] = error.status_code
        body["detail"] = error.detail
    return body


@app.exception_handler(AIClientError)
async def ai_client_error_handler(request: Request, exc: AIClientError) -> JSONResponse:
    logger.warning("%s failed: %s", request.url.path, exc)
    return JSONResponse(_error_body(exc), status_code=_error_status(exc))


@app.exception_handler(UnknownPersona)
async def unknown_persona_handler(request: Request, exc: UnknownPersona) -> JSONResponse:
    return JSONResponse({"error": "UnknownPersona", "message": f"Unknown persona: {exc}"}, status_code=400)


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check for load balancers."""
    return {"status": "ok"}


@app.get("/health/provider")
async def provider_health() -> dict[str, str]:
    """Check the configured provider answers GET /models."""
    await _client.check_health()
    return {"status": "ok", "model": _client.config.model}


@app.get("/personas")
async def personas() -> list[dict[str, str]]:
    return _service.list_personas()


@app.post("/organize")
async def organize(body: OrganizeRequest) -> OrganizationPlan:
    """Run one organization request and return the plan with generation stats."""
    return await _service.organize(
        body.files,
        custom_instructions=body.custom_instructions,
        persona=body.persona,
        temperature=body.temperature,
    )


class QueueDelegate:
    """Forwards streamed fragments into a queue for the SSE relay."""

    def __init__(self, queue: asyncio.Queue) -> None:
        self._queue = queue

    async def did_receive_chunk(self, chunk: str) -> None:
        await self._queue.put({"chunk": chunk})

    def did_complete(self, content: str) -> None:
        logger.debug("Stream complete (%d chars)", len(content))

    def did_fail(self, error: Exception) -> None:
        logger.debug("Stream failed: %s", error)


def _sse(data: Any) -> str:
    return f"data: {json.dumps(data)}\n\n"


@app.post("/organize/stream")
async def organize_stream(body: OrganizeRequest) -> StreamingResponse:
    """
    Relay fragments as SSE: data: {"chunk"}..., then {"plan"} or {"error"}, then [DONE].
    """
    service = _service
    service.persona_prompt(body.persona)

    async def events() -> AsyncIterator[str]:
        queue: asyncio.Queue = asyncio.Queue()
        task = asyncio.create_task(
            service.organize(
                body.files,
                custom_instructions=body.custom_instructions,
                persona=body.persona,
                temperature=body.temperature,
                delegate=QueueDelegate(queue),
            )
        )
        task.add_done_callback(lambda _: queue.put_nowait(None))
        try:
            while (item := await queue.get()) is not None:
                yield _sse(item)
            try:
                plan = task.result()
            except AIClientError as e:
                yield _sse({"error": _error_body(e)})
            except Exception as e:
                logger.exception("Streaming organize failed: %s", e)
                yield _sse({"error": {"error": "InternalError", "message": "Organization failed"}})
            else:
                yield _sse({"plan": plan.model_dump(mode="json")})
            yield "data: [DONE]\n\n"
        finally:
            # Client went away: cancel the in-flight request
            task.cancel()

    return StreamingResponse(events(), media_type="text/event-stream")
