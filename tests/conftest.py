"""Pytest configuration and shared fixtures."""
import asyncio
from collections.abc import Callable

import httpx
import pytest

from ollamachat.llm import GenerationBackend, GenerationResult, ModelDescriptor, OllamaClient


class FakeBackend(GenerationBackend):
    """In-memory backend that records every call.

    ``replies`` and ``errors`` are consumed in order; when empty, generate
    echoes a fixed reply. Set ``gate`` to hold generate until the test
    releases it.
    """

    def __init__(self, models: list[str] | None = None):
        self.models = list(models) if models is not None else ["llama3:latest", "mistral:latest"]
        self.list_error: Exception | None = None
        self.replies: list[str] = []
        self.errors: list[Exception | None] = []
        self.gate: asyncio.Event | None = None
        self.generate_calls: list[tuple[str, str]] = []
        self.list_calls = 0
        self.closed = False

    async def list_models(self) -> list[ModelDescriptor]:
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        return [ModelDescriptor(name=name, model=name) for name in self.models]

    async def generate(self, model: str, prompt: str) -> GenerationResult:
        self.generate_calls.append((model, prompt))
        if self.gate is not None:
            await self.gate.wait()
        if self.errors:
            error = self.errors.pop(0)
            if error is not None:
                raise error
        text = self.replies.pop(0) if self.replies else "Hello!"
        return GenerationResult(response=text, done=True, model=model, created_at="t")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_backend():
    """Return a fake backend with two installed models."""
    return FakeBackend()


@pytest.fixture
def tags_payload():
    """Return a /api/tags body as the server sends it."""
    return {
        "models": [
            {
                "name": "llama3:latest",
                "model": "llama3:latest",
                "modified_at": "2024-05-01T10:00:00.000000+00:00",
                "size": 4661224676,
                "digest": "365c0bd3c000",
                "details": {
                    "parent_model": "",
                    "format": "gguf",
                    "family": "llama",
                    "families": ["llama"],
                    "parameter_size": "8.0B",
                    "quantization_level": "Q4_0",
                },
            },
            {
                "name": "mistral:latest",
                "model": "mistral:latest",
                "modified_at": "2024-04-20T08:30:00.000000+00:00",
                "size": 4109865159,
                "digest": "61e88e884507",
                "details": {
                    "format": "gguf",
                    "family": "llama",
                    "families": None,
                    "parameter_size": "7.2B",
                    "quantization_level": "Q4_0",
                },
            },
        ]
    }


@pytest.fixture
def generate_payload():
    """Return a non-streaming /api/generate body."""
    return {"response": "Hello!", "done": True, "model": "llama3", "created_at": "t"}


@pytest.fixture
def make_client():
    """Build an OllamaClient whose HTTP traffic goes to a handler function.

    The handler receives each httpx.Request; every request is also recorded
    on ``client.requests`` for assertions.
    """
    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> OllamaClient:
        requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        client = OllamaClient(transport=httpx.MockTransport(_record))
        client.requests = requests  # type: ignore[attr-defined]
        return client

    return _make
