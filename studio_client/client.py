"""Main studio client classes.

This module provides the main entry points for the studio's remote
collaborators:
- StudioClient: Synchronous client
- AsyncStudioClient: Asynchronous client

Both expose namespaced sub-clients:
- client.projects: project and file listing on the build server
- client.sync: pushing a project to the build server
- client.bridge: the n8n MCP bridge
- client.generation: application generation with Gemini

Example:
    Synchronous usage::

        from studio_client import StudioClient

        with StudioClient(server_url="http://localhost:3000") as client:
            files = client.generation.generate("A pomodoro timer")
            result = client.sync.sync(files, "pomodoro")

    Asynchronous usage::

        from studio_client import AsyncStudioClient

        async with AsyncStudioClient.from_config(StudioConfig.from_env()) as client:
            projects = await client.projects.list_projects()
"""

from typing import Any

from studio.config import DEFAULT_MODEL, DEFAULT_SERVER_URL, StudioConfig
from studio_client._bridge import BRIDGE_TUNNEL_STATUSES, AsyncBridgeClient, BridgeClient
from studio_client._generation import AsyncGenerationClient, GenerationClient
from studio_client._http import DEFAULT_TIMEOUT, AsyncHTTPClient, HTTPClient
from studio_client._projects import AsyncProjectsClient, ProjectsClient
from studio_client._sync import AsyncSyncClient, SyncClient


class StudioClient:
    """Synchronous client for the build server, MCP bridge and model.

    Attributes:
        server_url: Base URL of the build/preview server.
        bridge_url: Base URL of the MCP bridge ("" when not configured).
    """

    def __init__(
        self,
        server_url: str = DEFAULT_SERVER_URL,
        bridge_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        gemini_api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        transport: Any = None,
        bridge_transport: Any = None,
        genai_client: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            server_url: Base URL of the build/preview server.
            bridge_url: Base URL of the MCP bridge.
            timeout: Request timeout in seconds.
            gemini_api_key: API key for generation.
            model: Generation model name.
            transport: Custom transport for the build server (testing).
            bridge_transport: Custom transport for the bridge (testing).
            genai_client: Ready-made genai client (testing).
        """
        self.server_url = server_url
        self.bridge_url = bridge_url
        self._timeout = timeout
        self._bridge_transport = bridge_transport

        self._http = HTTPClient(base_url=server_url, timeout=timeout, transport=transport)
        self._bridge_http: HTTPClient | None = None

        self._projects: ProjectsClient | None = None
        self._sync: SyncClient | None = None
        self._bridge: BridgeClient | None = None
        self._generation = GenerationClient(
            api_key=gemini_api_key, model=model, client=genai_client
        )

    @classmethod
    def from_config(cls, config: StudioConfig, **kwargs: Any) -> "StudioClient":
        return cls(
            server_url=config.server_url,
            bridge_url=config.bridge_url,
            timeout=config.timeout,
            gemini_api_key=config.gemini_api_key,
            model=config.model,
            **kwargs,
        )

    def __enter__(self) -> "StudioClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()
        if self._bridge_http is not None:
            self._bridge_http.close()

    def set_bridge_url(self, bridge_url: str) -> None:
        """Point the bridge sub-client at a different URL."""
        if bridge_url == self.bridge_url:
            return
        if self._bridge_http is not None:
            self._bridge_http.close()
        self.bridge_url = bridge_url
        self._bridge_http = None
        self._bridge = None

    @property
    def projects(self) -> ProjectsClient:
        if self._projects is None:
            self._projects = ProjectsClient(self._http)
        return self._projects

    @property
    def sync(self) -> SyncClient:
        if self._sync is None:
            self._sync = SyncClient(self._http)
        return self._sync

    @property
    def bridge(self) -> BridgeClient:
        """Access the MCP bridge.

        Raises:
            ValueError: If no bridge URL is configured.
        """
        if self._bridge is None:
            if not self.bridge_url:
                raise ValueError("No MCP bridge URL configured")
            self._bridge_http = HTTPClient(
                base_url=self.bridge_url,
                timeout=self._timeout,
                tunnel_auth_statuses=BRIDGE_TUNNEL_STATUSES,
                transport=self._bridge_transport,
            )
            self._bridge = BridgeClient(self._bridge_http)
        return self._bridge

    @property
    def generation(self) -> GenerationClient:
        return self._generation


class AsyncStudioClient:
    """Asynchronous client for the build server, MCP bridge and model.

    Same sub-clients as StudioClient, with awaitable methods.
    """

    def __init__(
        self,
        server_url: str = DEFAULT_SERVER_URL,
        bridge_url: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        gemini_api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        transport: Any = None,
        bridge_transport: Any = None,
        genai_client: Any = None,
    ) -> None:
        self.server_url = server_url
        self.bridge_url = bridge_url
        self._timeout = timeout
        self._bridge_transport = bridge_transport

        self._http = AsyncHTTPClient(base_url=server_url, timeout=timeout, transport=transport)
        self._bridge_http: AsyncHTTPClient | None = None

        self._projects: AsyncProjectsClient | None = None
        self._sync: AsyncSyncClient | None = None
        self._bridge: AsyncBridgeClient | None = None
        self._generation = AsyncGenerationClient(
            api_key=gemini_api_key, model=model, client=genai_client
        )

    @classmethod
    def from_config(cls, config: StudioConfig, **kwargs: Any) -> "AsyncStudioClient":
        return cls(
            server_url=config.server_url,
            bridge_url=config.bridge_url,
            timeout=config.timeout,
            gemini_api_key=config.gemini_api_key,
            model=config.model,
            **kwargs,
        )

    async def __aenter__(self) -> "AsyncStudioClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.close()
        if self._bridge_http is not None:
            await self._bridge_http.close()

    async def set_bridge_url(self, bridge_url: str) -> None:
        if bridge_url == self.bridge_url:
            return
        if self._bridge_http is not None:
            await self._bridge_http.close()
        self.bridge_url = bridge_url
        self._bridge_http = None
        self._bridge = None

    @property
    def projects(self) -> AsyncProjectsClient:
        if self._projects is None:
            self._projects = AsyncProjectsClient(self._http)
        return self._projects

    @property
    def sync(self) -> AsyncSyncClient:
        if self._sync is None:
            self._sync = AsyncSyncClient(self._http)
        return self._sync

    @property
    def bridge(self) -> AsyncBridgeClient:
        """Access the MCP bridge.

        Raises:
            ValueError: If no bridge URL is configured.
        """
        if self._bridge is None:
            if not self.bridge_url:
                raise ValueError("No MCP bridge URL configured")
            self._bridge_http = AsyncHTTPClient(
                base_url=self.bridge_url,
                timeout=self._timeout,
                tunnel_auth_statuses=BRIDGE_TUNNEL_STATUSES,
                transport=self._bridge_transport,
            )
            self._bridge = AsyncBridgeClient(self._bridge_http)
        return self._bridge

    @property
    def generation(self) -> AsyncGenerationClient:
        return self._generation
