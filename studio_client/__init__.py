"""Craft studio client library.

Clients for the studio's remote collaborators (the build/preview server, the
n8n MCP bridge and the Gemini generation model) and the session logic that
keeps the local VFS in step with them.

Example:
    import asyncio

    from studio import PreferenceStore, StudioConfig
    from studio_client import AsyncStudioClient, StudioSession

    async def main():
        config = StudioConfig.from_env()
        async with AsyncStudioClient.from_config(config) as client:
            session = StudioSession(client, PreferenceStore(config.preferences_path))
            await session.start()
            session.new_project("todo-app")
            await session.generate("A todo list with tags")

    asyncio.run(main())

Exports:
    StudioClient / AsyncStudioClient: Entry points with namespaced sub-clients.
    RemoteProjectReconciler: Lazy project loading into a VFSStore.
    StudioSession: Generate, sync and project switching for one studio window.

    Exceptions:
        StudioClientError: Base exception for all client errors.
        ConnectionError: Failed to connect to a service.
        TimeoutError: Request timed out.
        ResponseFormatError: Response body has an unexpected shape.
        GenerationError: Model output is empty or not a JSON VFS.
        APIError: Service returned an error status.
        NotFoundError: Resource not found (HTTP 404).
        TunnelAuthError: Bridge tunnel needs re-authentication.
        ServerError: Server-side error (HTTP 5xx).
"""

from studio_client._bridge import AsyncBridgeClient, BridgeClient
from studio_client._generation import (
    AsyncGenerationClient,
    GenerationClient,
    build_prompt,
    parse_generation_response,
)
from studio_client._projects import AsyncProjectsClient, ProjectsClient
from studio_client._sync import AsyncSyncClient, SyncClient
from studio_client.client import AsyncStudioClient, StudioClient
from studio_client.exceptions import (
    APIError,
    ConnectionError,
    GenerationError,
    NotFoundError,
    ResponseFormatError,
    ServerError,
    StudioClientError,
    TimeoutError,
    TunnelAuthError,
)
from studio_client.models import (
    BridgeTool,
    FileContentResponse,
    FileListResponse,
    ProjectListResponse,
    SyncResult,
    Workflow,
)
from studio_client.reconciler import RemoteProjectReconciler
from studio_client.session import ConnectionStatus, StudioSession

__all__ = [
    # Main clients
    "StudioClient",
    "AsyncStudioClient",
    # Sub-clients
    "ProjectsClient",
    "AsyncProjectsClient",
    "SyncClient",
    "AsyncSyncClient",
    "BridgeClient",
    "AsyncBridgeClient",
    "GenerationClient",
    "AsyncGenerationClient",
    # Workspace coordination
    "RemoteProjectReconciler",
    "StudioSession",
    "ConnectionStatus",
    # Generation helpers
    "build_prompt",
    "parse_generation_response",
    # Exceptions
    "StudioClientError",
    "ConnectionError",
    "TimeoutError",
    "ResponseFormatError",
    "GenerationError",
    "APIError",
    "NotFoundError",
    "TunnelAuthError",
    "ServerError",
    # Models
    "SyncResult",
    "ProjectListResponse",
    "FileListResponse",
    "FileContentResponse",
    "Workflow",
    "BridgeTool",
]
