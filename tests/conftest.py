import json

import httpx
import pytest

from file_organizer_ai.llm.openai_client import OpenAIClient
from file_organizer_ai.models import AIConfig, ContentMetadata, FileItem, OrganizationPlan

BASE_URL = "https://llm.example.com"
PLAN_JSON = json.dumps(
    {
        "folders": [
            {"name": "Documents", "description": "Docs", "files": ["report.pdf"]},
            {"name": "Images", "files": [{"filename": "photo.jpg", "tags": ["Personal"]}]},
        ],
        "unorganized": [{"filename": "mystery.bin", "reason": "unknown format"}],
        "notes": "ok",
    }
)


class FakeParser:
    """Records what it was asked to parse and returns an empty plan."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[FileItem]]] = []

    def parse_response(self, content: str, original_files: list[FileItem]) -> OrganizationPlan:
        self.calls.append((content, original_files))
        return OrganizationPlan(notes=content)


class RecordingDelegate:
    def __init__(self) -> None:
        self.events: list[tuple[str, object]] = []

    def did_receive_chunk(self, chunk: str) -> None:
        self.events.append(("chunk", chunk))

    def did_complete(self, content: str) -> None:
        self.events.append(("complete", content))

    def did_fail(self, error: Exception) -> None:
        self.events.append(("fail", error))


def sse_body(*lines: str) -> bytes:
    return ("\n".join(lines) + "\n").encode()


def delta(content: str) -> str:
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]})


@pytest.fixture
def sample_files() -> list[FileItem]:
    return [
        FileItem(path="/tmp/in/report.pdf", name="report", extension="pdf", size=2048),
        FileItem(
            path="/tmp/in/photo.jpg",
            name="photo",
            extension="jpg",
            size=3_500_000,
            content_metadata=ContentMetadata(exif_data={"camera": "X100V"}),
        ),
        FileItem(path="/tmp/in/mystery.bin", name="mystery", extension="bin", size=10),
    ]


@pytest.fixture
def make_client():
    """Factory: (handler, parser=None, **config overrides) -> OpenAIClient on a mock transport."""

    def _make(handler, parser=None, **overrides) -> OpenAIClient:
        values = {"api_url": BASE_URL, "api_key": "test-key", "model": "test-model"}
        values.update(overrides)
        return OpenAIClient(
            AIConfig(**values),
            response_parser=parser,
            transport=httpx.MockTransport(handler),
        )

    return _make
