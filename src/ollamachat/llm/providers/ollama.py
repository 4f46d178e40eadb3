from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..base import GenerationBackend
from ..errors import OllamaDecodeError, OllamaNetworkError, OllamaProtocolError
from ..models import GenerationRequest, GenerationResult, ModelDescriptor, ModelsResponse

DEFAULT_BASE_URL = "http://127.0.0.1:11434"
DEFAULT_TIMEOUT = 60.0

TAGS_PATH = "/api/tags"
GENERATE_PATH = "/api/generate"

_Body = TypeVar("_Body", bound=BaseModel)


class OllamaClient(GenerationBackend):
    """Ollama backend speaking the native /api endpoints over httpx.

    Hidden design decisions:
    - Endpoint paths and request bodies
    - Non-streaming generation (stream=false, one JSON body per request)
    - Which httpx failures map to which OllamaError subclass
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = DEFAULT_TIMEOUT,
        **client_kwargs: Any
    ):
        """Initialize the Ollama client.

        Args:
            base_url: Server address (default: http://127.0.0.1:11434)
            timeout: Per-request timeout in seconds, None to wait forever
            **client_kwargs: Additional kwargs for httpx.AsyncClient
                (e.g. transport=httpx.MockTransport(...) in tests)
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            **client_kwargs
        )
        self._debug_callback: Any | None = None

    @property
    def base_url(self) -> str:
        """Get the server address."""
        return self._base_url

    def set_debug_callback(self, callback: Any) -> None:
        """Set the debug callback for request logging.

        Args:
            callback: Callable(level: str, component: str, message: str)
        """
        self._debug_callback = callback

    def _debug(self, level: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, "HTTP", message)

    async def list_models(self) -> list[ModelDescriptor]:
        """List installed models via GET /api/tags."""
        response = await self._request("GET", TAGS_PATH)
        parsed = self._decode(response, ModelsResponse)
        self._debug("info", f"{len(parsed.models)} model(s) available")
        return list(parsed.models)

    async def generate(self, model: str, prompt: str) -> GenerationResult:
        """Generate a completion via POST /api/generate with stream=false."""
        body = GenerationRequest(model=model, prompt=prompt, stream=False)
        response = await self._request("POST", GENERATE_PATH, json=body.model_dump())
        result = self._decode(response, GenerationResult)
        self._debug("info", f"Response received from {result.model} ({len(result.response)} chars)")
        return result

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request and enforce the 200-only success rule."""
        self._debug("debug", f"{method} {self._base_url}{path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.DecodingError as e:
            self._debug("error", f"{method} {path} body could not be decompressed: {e}")
            raise OllamaDecodeError(str(e) or type(e).__name__) from e
        except httpx.RequestError as e:
            self._debug("error", f"{method} {path} failed: {e}")
            raise OllamaNetworkError(str(e) or type(e).__name__) from e

        if response.status_code != 200:
            self._debug("error", f"{method} {path} returned {response.status_code}")
            raise OllamaProtocolError(response.status_code, response.text[:200])
        return response

    def _decode(self, response: httpx.Response, model: type[_Body]) -> _Body:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            self._debug("error", f"Could not decode {model.__name__}: {e.error_count()} error(s)")
            raise OllamaDecodeError(str(e)) from e

    async def close(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()
