from abc import ABC, abstractmethod
from typing import Any

from .models import GenerationResult, ModelDescriptor


class GenerationBackend(ABC):
    """Abstract base class for generation backends.

    This module hides the design decision of which server answers prompts.
    Implementations must handle:
    - Connection setup
    - Request/response format conversion
    - Mapping failures onto the OllamaError hierarchy

    Supports async context manager protocol for proper resource cleanup:
        async with backend:
            result = await backend.generate("llama3", "hi")
    """

    @abstractmethod
    async def list_models(self) -> list[ModelDescriptor]:
        """List the models available on the server.

        Returns:
            Model descriptors in server order

        Raises:
            OllamaNetworkError: Connection failed
            OllamaProtocolError: Server returned a non-200 status
            OllamaDecodeError: Body could not be decoded
        """

    @abstractmethod
    async def generate(self, model: str, prompt: str) -> GenerationResult:
        """Generate a completion for a single prompt.

        Args:
            model: Model name as reported by list_models
            prompt: Prompt text

        Returns:
            GenerationResult with the full response text

        Raises:
            OllamaNetworkError: Connection failed
            OllamaProtocolError: Server returned a non-200 status
            OllamaDecodeError: Body could not be decoded
        """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections."""

    async def __aenter__(self) -> "GenerationBackend":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors raised by httpx/anyio
        when the loop is torn down before the client.
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise
