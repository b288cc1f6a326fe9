"""AI client abstract interface and streaming observer protocol."""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Protocol

from file_organizer_ai.models import AIConfig, FileItem, OrganizationPlan


class StreamingDelegate(Protocol):
    """
    Observer for one streaming call. Methods may be plain functions or
    coroutines; they are invoked one at a time on the calling event loop.
    """

    def did_receive_chunk(self, chunk: str) -> None | Awaitable[None]:
        ...

    def did_complete(self, content: str) -> None | Awaitable[None]:
        ...

    def did_fail(self, error: Exception) -> None | Awaitable[None]:
        ...


async def notify(callback: Any, *args: Any) -> None:
    """Invoke a delegate method, awaiting it if it is a coroutine."""
    result = callback(*args)
    if hasattr(result, "__await__"):
        await result


class AIClient(ABC):
    """Organization-plan client interface."""

    config: AIConfig

    @abstractmethod
    async def analyze(
        self,
        files: list[FileItem],
        *,
        custom_instructions: str | None = None,
        persona_prompt: str | None = None,
        temperature: float | None = None,
        delegate: StreamingDelegate | None = None,
    ) -> OrganizationPlan:
        """Ask the model to organize files and return the parsed plan with stats attached."""
        ...

    @abstractmethod
    async def generate_text(self, prompt: str, system_prompt: str | None = None) -> str:
        """Plain completion, returns the assistant message content."""
        ...

    async def aclose(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> "AIClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
