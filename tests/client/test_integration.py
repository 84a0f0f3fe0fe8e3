"""Integration tests for the studio client library.

These tests run the clients against the in-memory build server from
tests/fixtures/server.py, using Starlette's TestClient for the synchronous
client and httpx's ASGITransport for the asynchronous one. Only the
generation model is mocked.

To run these tests:
    pytest tests/client/test_integration.py -v
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from starlette.testclient import TestClient

from studio import ActivityLog, VFSStore, build_tree
from studio_client import RemoteProjectReconciler, StudioClient
from studio_client.exceptions import NotFoundError


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def sync_client(project_server):
    """Create a synchronous StudioClient connected to the test app."""
    test_client = TestClient(project_server, raise_server_exceptions=False)

    class SyncTestTransport(httpx.BaseTransport):
        def handle_request(self, request: httpx.Request) -> httpx.Response:
            response = test_client.request(
                method=request.method,
                url=request.url.raw_path.decode(),
                content=request.content,
                headers=dict(request.headers),
            )
            return httpx.Response(
                status_code=response.status_code,
                headers=response.headers,
                content=response.content,
            )

    with StudioClient(server_url="http://test", transport=SyncTestTransport()) as client:
        yield client


# =============================================================================
# Synchronous client
# =============================================================================


class TestSyncClientIntegration:
    """End-to-end tests for StudioClient."""

    def test_list_projects(self, sync_client) -> None:
        assert sync_client.projects.list_projects() == ["todo-app", "weather"]

    def test_list_and_fetch_files(self, sync_client) -> None:
        files = sync_client.projects.list_files("todo-app")

        assert files == ["App.tsx", "components/Header.tsx", "index.html"]
        assert (
            sync_client.projects.get_file("todo-app", "components/Header.tsx")
            == "export const Header = () => null;"
        )

    def test_unknown_project(self, sync_client) -> None:
        with pytest.raises(NotFoundError):
            sync_client.projects.list_files("missing")

    def test_sync_round_trip(self, sync_client, project_server) -> None:
        result = sync_client.sync.sync({"App.tsx": "_s();\nexport const App = () => 1;"}, "todo-app")

        assert result.success
        assert project_server.state.projects["todo-app"]["App.tsx"] == "export const App = () => 1;"
        assert sync_client.projects.get_file("todo-app", "App.tsx") == "export const App = () => 1;"

    def test_sync_failure(self, sync_client, project_server) -> None:
        project_server.state.sync_failure = (500, "oops")

        result = sync_client.sync.sync({"App.tsx": "x"}, "todo-app")

        assert result.success is False
        assert "500" in result.message
        assert "oops" in result.message


# =============================================================================
# Asynchronous client
# =============================================================================


class TestAsyncClientIntegration:
    """End-to-end tests for AsyncStudioClient and the reconciler."""

    async def test_reconciler_loads_placeholders_then_one_file(self, server_client) -> None:
        log = ActivityLog()
        store = VFSStore()
        reconciler = RemoteProjectReconciler(server_client.projects, store, log)

        assert await reconciler.open_project("todo-app") is True
        assert store.snapshot() == {
            "App.tsx": None,
            "components/Header.tsx": None,
            "index.html": None,
        }

        await reconciler.open_file("components/Header.tsx")

        assert store.snapshot() == {
            "App.tsx": None,
            "components/Header.tsx": "export const Header = () => null;",
            "index.html": None,
        }
        assert log.errors() == []

    async def test_missing_file_is_logged(self, server_client) -> None:
        log = ActivityLog()
        store = VFSStore()
        reconciler = RemoteProjectReconciler(server_client.projects, store, log)
        await reconciler.open_project("weather")

        assert await reconciler.open_file("gone.ts") is None
        assert log.errors()[-1].message.startswith("Failed to load gone.ts:")

    async def test_sync_empty_project_id(self, server_client, project_server) -> None:
        before = {name: dict(files) for name, files in project_server.state.projects.items()}

        assert await server_client.sync.sync({"App.tsx": "x"}, "") is None
        assert project_server.state.projects == before

    async def test_generate_then_sync(self, server_client, project_server) -> None:
        generated = {"index.html": "<html>...</html>", "App.tsx": "import React..."}
        genai_client = MagicMock()
        genai_client.aio.models.generate_content = AsyncMock(
            return_value=SimpleNamespace(text=json.dumps(generated))
        )
        server_client.generation._client = genai_client
        store = VFSStore()

        files = await server_client.generation.generate("A landing page")
        store.replace_all(files)
        tree = build_tree(store.paths())
        result = await server_client.sync.sync(store.loaded_files(), "landing")

        assert [node.name for node in tree] == ["App.tsx", "index.html"]
        assert all(node.type == "file" for node in tree)
        assert result.success
        assert project_server.state.projects["landing"] == generated
