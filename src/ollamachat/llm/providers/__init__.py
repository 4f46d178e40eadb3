from .ollama import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, OllamaClient

__all__ = ["DEFAULT_BASE_URL", "DEFAULT_TIMEOUT", "OllamaClient"]
