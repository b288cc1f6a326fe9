"""OpenAI-compatible chat-completions client with SSE streaming support."""

import asyncio
import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from file_organizer_ai.errors import (
    AIClientError,
    MalformedResponse,
    ProviderError,
    TransportFailure,
)
from file_organizer_ai.llm.base import AIClient, StreamingDelegate, notify
from file_organizer_ai.llm.request_builder import (
    build_endpoint_url,
    build_request,
    construct_endpoint,
    parse_url,
    validate_config,
)
from file_organizer_ai.llm.schemas import (
    ChatCompletionChunk,
    ChatCompletionRequest,
    ChatCompletionResponse,
    ChatMessage,
)
from file_organizer_ai.models import AIConfig, FileItem, GenerationStats, OrganizationPlan
from file_organizer_ai.services.prompt_builder import PromptBuilder
from file_organizer_ai.services.response_parser import ResponseParser

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "
SSE_DONE = "[DONE]"
CHARS_PER_TOKEN = 4
HEALTH_CHECK_TIMEOUT = 10.0
DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."

# Lower-level faults that get wrapped as TransportFailure
TRANSPORT_ERRORS = (httpx.HTTPError, httpx.StreamError, OSError, TimeoutError)


def estimate_tokens(content: str) -> int:
    """Token estimate: ~4 characters per token."""
    return len(content) // CHARS_PER_TOKEN


def build_stats(content: str, duration: float, ttft: float, model: str) -> GenerationStats:
    """Stats for one call. tps is 0 when duration is not positive."""
    tokens = estimate_tokens(content)
    tps = tokens / duration if duration > 0 else 0.0
    return GenerationStats(duration=duration, tps=tps, ttft=ttft, total_tokens=tokens, model=model)


def decode_body(body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return "Unknown error"


class OpenAIClient(AIClient):
    """Client for OpenAI or compatible endpoints (Groq, OpenRouter, Ollama, ...)."""

    def __init__(
        self,
        config: AIConfig,
        *,
        prompt_builder: PromptBuilder | None = None,
        response_parser: ResponseParser | None = None,
        streaming_delegate: StreamingDelegate | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.streaming_delegate = streaming_delegate
        self._prompts = prompt_builder or PromptBuilder(
            max_top_level_folders=config.max_top_level_folders,
            enable_reasoning=config.enable_reasoning,
        )
        self._parser = response_parser or ResponseParser()
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(config.request_timeout),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def analyze(
        self,
        files: list[FileItem],
        *,
        custom_instructions: str | None = None,
        persona_prompt: str | None = None,
        temperature: float | None = None,
        delegate: StreamingDelegate | None = None,
    ) -> OrganizationPlan:
        url = build_endpoint_url(self.config)
        request = build_request(
            self.config,
            files,
            self._prompts,
            custom_instructions=custom_instructions,
            persona_prompt=persona_prompt,
            temperature=temperature,
        )
        logger.info(
            "Organizing %d files with %s (streaming=%s)",
            len(files),
            self.config.model,
            self.config.enable_streaming,
        )
        if self.config.enable_streaming:
            return await self._analyze_streaming(
                url, request, files, delegate or self.streaming_delegate
            )
        return await self._analyze_non_streaming(url, request, files)

    async def _analyze_non_streaming(
        self,
        url: httpx.URL,
        request: ChatCompletionRequest,
        files: list[FileItem],
    ) -> OrganizationPlan:
        start = time.perf_counter()
        content = await self._complete(url, request.to_payload())
        duration = time.perf_counter() - start
        # Blocking call: nothing is observable before the full body
        stats = build_stats(content, duration, duration, self.config.model)
        plan = self._parser.parse_response(content, files)
        plan.generation_stats = stats
        return plan

    async def _complete(self, url: httpx.URL, payload: dict[str, Any]) -> str:
        """POST once and return choices[0].message.content."""
        try:
            async with asyncio.timeout(self.config.resource_timeout):
                response = await self._http.post(url, json=payload, headers=self._headers())
        except TRANSPORT_ERRORS as e:
            raise TransportFailure(e) from e

        if not response.is_success:
            body = decode_body(response.content)
            logger.error("Provider returned %s: %s", response.status_code, body[:200])
            raise ProviderError(response.status_code, body)

        try:
            parsed = ChatCompletionResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise MalformedResponse(
                "Invalid response format (JSON mode might be unsupported)"
            ) from e
        content = parsed.first_message_content()
        if content is None:
            raise MalformedResponse("Response has no choices[0].message.content")
        return content

    async def _analyze_streaming(
        self,
        url: httpx.URL,
        request: ChatCompletionRequest,
        files: list[FileItem],
        delegate: StreamingDelegate | None,
    ) -> OrganizationPlan:
        payload = request.model_copy(update={"stream": True}).to_payload()
        start = time.perf_counter()
        first_token_at: float | None = None
        chunks: list[str] = []

        try:
            async with asyncio.timeout(self.config.resource_timeout):
                async with self._http.stream(
                    "POST", url, json=payload, headers=self._headers()
                ) as response:
                    if not response.is_success:
                        body = decode_body(await response.aread())
                        logger.error("Provider returned %s: %s", response.status_code, body[:200])
                        raise ProviderError(response.status_code, body)

                    async for line in response.aiter_lines():
                        if not line.startswith(SSE_DATA_PREFIX):
                            continue
                        data = line[len(SSE_DATA_PREFIX):]
                        if data.strip() == SSE_DONE:
                            break
                        try:
                            chunk = ChatCompletionChunk.model_validate_json(data)
                        except ValidationError:
                            logger.debug("Skipping malformed SSE chunk: %s", data[:100])
                            continue
                        text = chunk.first_delta_content()
                        if not text:
                            continue
                        if first_token_at is None:
                            first_token_at = time.perf_counter()
                        chunks.append(text)
                        if delegate is not None:
                            await notify(delegate.did_receive_chunk, text)
        except AIClientError as e:
            await self._notify_failure(delegate, e)
            raise
        except TRANSPORT_ERRORS as e:
            error = TransportFailure(e)
            await self._notify_failure(delegate, error)
            raise error from e

        end = time.perf_counter()
        duration = end - start
        ttft = first_token_at - start if first_token_at is not None else duration
        content = "".join(chunks)
        stats = build_stats(content, duration, ttft, self.config.model)
        logger.info(
            "Stream finished: %d chunks, %.2fs, ttft %.2fs, ~%.1f tok/s",
            len(chunks),
            stats.duration,
            stats.ttft,
            stats.tps,
        )

        if delegate is not None:
            await notify(delegate.did_complete, content)
        try:
            plan = self._parser.parse_response(content, files)
        except AIClientError as e:
            # Parse failures reach the observer too
            await self._notify_failure(delegate, e)
            raise
        plan.generation_stats = stats
        return plan

    @staticmethod
    async def _notify_failure(delegate: StreamingDelegate | None, error: AIClientError) -> None:
        if delegate is not None:
            await notify(delegate.did_fail, error)

    async def generate_text(self, prompt: str, system_prompt: str | None = None) -> str:
        """Free-form completion, no JSON mode, always non-streaming."""
        url = build_endpoint_url(self.config)
        request = ChatCompletionRequest(
            model=self.config.model,
            messages=[
                ChatMessage(role="system", content=system_prompt or DEFAULT_SYSTEM_PROMPT),
                ChatMessage(role="user", content=prompt),
            ],
            temperature=0.7,
            response_format=None,
            max_tokens=self.config.max_tokens,
        )
        return await self._complete(url, request.to_payload())

    async def check_health(self) -> None:
        """GET {base}/models. Raises ProviderError on a non-2xx answer."""
        endpoint = construct_endpoint(validate_config(self.config).rstrip("/"))
        url = parse_url(endpoint[: -len("/chat/completions")] + "/models")

        headers: dict[str, str] = {}
        if self.config.requires_api_key and self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        try:
            response = await self._http.get(url, headers=headers, timeout=HEALTH_CHECK_TIMEOUT)
        except TRANSPORT_ERRORS as e:
            raise TransportFailure(e) from e
        if not response.is_success:
            raise ProviderError(response.status_code, "Health check failed")
