"""Response models and payload adapters for the studio client.

Several endpoints answer with either a bare value or the same value wrapped
in an object (``["a", "b"]`` or ``{"projects": ["a", "b"]}``). Each endpoint
has exactly one adapter here that accepts both shapes and returns a
normalized model, raising ResponseFormatError for anything else.
"""

from typing import Any, Literal, TypeVar

from pydantic import BaseModel, Field, ValidationError

from studio_client.exceptions import ResponseFormatError


ModelT = TypeVar("ModelT", bound=BaseModel)

__all__ = [
    "BridgeTool",
    "FileContentResponse",
    "FileListResponse",
    "ProjectListResponse",
    "SyncResult",
    "Workflow",
    "parse_file_content",
    "parse_file_list",
    "parse_project_list",
]


class SyncResult(BaseModel):
    """Outcome of pushing a project to the build server.

    Sync never raises; callers branch on ``success``.

    Attributes:
        status: "success" or "failure".
        message: Human-readable failure description (None on success).
    """

    status: Literal["success", "failure"]
    message: str | None = None

    @classmethod
    def ok(cls) -> "SyncResult":
        return cls(status="success")

    @classmethod
    def failure(cls, message: str) -> "SyncResult":
        return cls(status="failure", message=message)

    @property
    def success(self) -> bool:
        return self.status == "success"


class ProjectListResponse(BaseModel):
    """Project identifiers available on the build server."""

    projects: list[str] = Field(..., description="Project identifiers")


class FileListResponse(BaseModel):
    """File paths of a single project."""

    files: list[str] = Field(..., description="Relative file paths")


class FileContentResponse(BaseModel):
    """Text content of a single file."""

    content: str = Field(..., description="File text")


def _normalize(model: type[ModelT], key: str, payload: Any, bare_type: type) -> ModelT:
    """Validate a bare-or-wrapped payload into ``model``.

    Args:
        model: The normalized model class.
        key: Field name used when the payload is wrapped.
        payload: Decoded response body.
        bare_type: Python type of the unwrapped value (list or str).

    Raises:
        ResponseFormatError: If the payload matches neither shape.
    """
    data = {key: payload} if isinstance(payload, bare_type) else payload
    if not isinstance(data, dict) or key not in data:
        raise ResponseFormatError(
            f"Expected a {bare_type.__name__} or an object with a '{key}' key, "
            f"got {type(payload).__name__}",
            payload=payload,
        )
    try:
        return model.model_validate({key: data[key]})
    except ValidationError as e:
        raise ResponseFormatError(f"Invalid '{key}' payload: {e}", payload=payload) from e


def parse_project_list(payload: Any) -> ProjectListResponse:
    return _normalize(ProjectListResponse, "projects", payload, list)


def parse_file_list(payload: Any) -> FileListResponse:
    return _normalize(FileListResponse, "files", payload, list)


def parse_file_content(payload: Any) -> FileContentResponse:
    return _normalize(FileContentResponse, "content", payload, str)


class Workflow(BaseModel):
    """An n8n workflow exposed through the MCP bridge.

    Attributes:
        id: Workflow identifier ("N/A" when the bridge omits it).
        name: Display name.
        active: Whether the workflow is active in n8n.
        nodes: Workflow nodes, when details were fetched.
        structure: Structured technical data (runData/pinData) used as
            generation context.
    """

    id: str = "N/A"
    name: str = "Untitled Workflow"
    active: bool = False
    nodes: list[Any] = Field(default_factory=list)
    structure: Any = None

    def context(self) -> Any:
        """Technical data handed to the generation model."""
        if self.structure:
            return self.structure
        if self.nodes:
            return self.nodes
        return self.model_dump()


class BridgeTool(BaseModel):
    """A tool advertised by the MCP bridge."""

    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = Field(None, alias="inputSchema")

    model_config = {"populate_by_name": True, "extra": "allow"}
