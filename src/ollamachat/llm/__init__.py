from .base import GenerationBackend
from .errors import OllamaDecodeError, OllamaError, OllamaNetworkError, OllamaProtocolError
from .factory import create_backend
from .models import GenerationResult, ModelDescriptor, ModelDetails
from .providers import OllamaClient

__all__ = [
    "GenerationBackend",
    "GenerationResult",
    "ModelDescriptor",
    "ModelDetails",
    "OllamaClient",
    "OllamaDecodeError",
    "OllamaError",
    "OllamaNetworkError",
    "OllamaProtocolError",
    "create_backend",
]
