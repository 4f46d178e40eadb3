from pydantic import BaseModel, ConfigDict, Field


class ModelDetails(BaseModel):
    """Server-reported model metadata. Display only."""

    model_config = ConfigDict(frozen=True)

    parent_model: str = ""
    format: str = ""
    family: str = ""
    families: list[str] | None = None
    parameter_size: str = ""
    quantization_level: str = ""


class ModelDescriptor(BaseModel):
    """A model installed on the server, as listed by /api/tags."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Model name, used both as label and request parameter")
    model: str = ""
    modified_at: str | None = None
    size: int = 0
    digest: str = ""
    details: ModelDetails = Field(default_factory=ModelDetails)


class ModelsResponse(BaseModel):
    """Body of GET /api/tags."""

    models: list[ModelDescriptor] = Field(default_factory=list)


class GenerationRequest(BaseModel):
    """Body of POST /api/generate."""

    model: str
    prompt: str
    stream: bool = False


class GenerationResult(BaseModel):
    """Body of a non-streaming /api/generate response."""

    model_config = ConfigDict(frozen=True)

    response: str = Field(description="Generated text")
    done: bool = Field(description="Whether generation finished")
    model: str = Field(description="Model that generated the response")
    created_at: str = Field(description="Server timestamp of the response")
