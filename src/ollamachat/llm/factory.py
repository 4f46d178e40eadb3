from typing import Any

from .base import GenerationBackend
from .providers import OllamaClient


def create_backend(provider: str = "ollama", **config: Any) -> GenerationBackend:
    """Create a generation backend instance.

    This factory function hides the instantiation logic for different servers.

    Args:
        provider: Backend type (only 'ollama' is supported)
        **config: Backend-specific configuration
            For Ollama:
                - base_url: str (default: 'http://127.0.0.1:11434')
                - timeout: float | None (default: 60.0)

    Returns:
        Initialized backend instance

    Raises:
        ValueError: If provider type is not supported

    Examples:
        >>> backend = create_backend("ollama", base_url="http://localhost:11434")
    """
    if provider.lower() == "ollama":
        return OllamaClient(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'ollama'"
    )
