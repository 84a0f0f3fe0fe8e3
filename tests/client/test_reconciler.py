"""Unit tests for RemoteProjectReconciler (studio_client/reconciler.py).

The projects client is replaced with an AsyncMock so the tests can control
when each fetch completes.
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest

from studio.vfs import VFSStore
from studio_client.client import AsyncStudioClient
from studio_client.exceptions import ConnectionError, NotFoundError
from studio_client.reconciler import RemoteProjectReconciler


@pytest.fixture
def projects() -> AsyncMock:
    mock = AsyncMock()
    mock.list_projects.return_value = ["todo-app", "weather"]
    mock.list_files.return_value = ["a", "b"]
    mock.get_file.return_value = "content of a"
    return mock


@pytest.fixture
def reconciler(projects, activity_log, preference_store) -> RemoteProjectReconciler:
    return RemoteProjectReconciler(projects, VFSStore(), activity_log, preference_store)


# =============================================================================
# Projects
# =============================================================================


class TestListProjects:
    """Tests for list_projects."""

    async def test_returns_projects(self, reconciler) -> None:
        assert await reconciler.list_projects() == ["todo-app", "weather"]

    async def test_failure_returns_empty_and_logs(self, reconciler, projects, activity_log) -> None:
        projects.list_projects.side_effect = ConnectionError("Failed to connect")

        assert await reconciler.list_projects() == []
        assert activity_log.errors()[0].message == "Failed to list projects: Failed to connect"

    async def test_undecodable_response_returns_empty_and_logs(self, activity_log) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, headers={"content-encoding": "gzip"}, content=b"not gzip")

        async with AsyncStudioClient(
            server_url="http://test", transport=httpx.MockTransport(handler)
        ) as client:
            reconciler = RemoteProjectReconciler(client.projects, VFSStore(), activity_log)
            assert await reconciler.list_projects() == []

        assert activity_log.errors()[0].message.startswith("Failed to list projects: ")


class TestOpenProject:
    """Tests for open_project."""

    async def test_loads_placeholders(self, reconciler) -> None:
        assert await reconciler.open_project("todo-app") is True

        assert reconciler.store.snapshot() == {"a": None, "b": None}
        assert reconciler.project_id == "todo-app"

    async def test_saves_current_project(self, reconciler, preference_store) -> None:
        await reconciler.open_project("todo-app")

        assert preference_store.current_project == "todo-app"

    async def test_replaces_previous_project(self, reconciler, projects) -> None:
        reconciler.store.replace_all({"old.ts": "x"})

        await reconciler.open_project("todo-app")

        assert "old.ts" not in reconciler.store

    async def test_failure_leaves_store_unchanged(
        self, reconciler, projects, activity_log
    ) -> None:
        reconciler.store.replace_all({"App.tsx": "kept"})
        projects.list_files.side_effect = NotFoundError("Unknown project")

        assert await reconciler.open_project("missing") is False

        assert reconciler.store.snapshot() == {"App.tsx": "kept"}
        assert reconciler.project_id is None
        assert len(activity_log.errors()) == 1

    async def test_invalid_remote_paths(self, reconciler, projects, activity_log) -> None:
        projects.list_files.return_value = ["ok.ts", "/abs.ts"]

        assert await reconciler.open_project("todo-app") is False

        assert len(reconciler.store) == 0
        assert "invalid file paths" in activity_log.errors()[0].message

    async def test_starts_from_saved_project(self, projects, activity_log, preference_store) -> None:
        preference_store.set_current_project("weather")

        reconciler = RemoteProjectReconciler(projects, VFSStore(), activity_log, preference_store)

        assert reconciler.project_id == "weather"

    async def test_without_preferences(self, projects, activity_log) -> None:
        reconciler = RemoteProjectReconciler(projects, VFSStore(), activity_log)

        assert reconciler.project_id is None
        assert await reconciler.open_project("todo-app") is True


class TestRefreshFiles:
    """Tests for refresh_files."""

    async def test_adds_new_paths_only(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        reconciler.store.set("a", "local edit")
        projects.list_files.return_value = ["a", "b", "c"]

        added = await reconciler.refresh_files()

        assert added == ["c"]
        assert reconciler.store.get("a") == "local edit"
        assert reconciler.store.needs_fetch("c")

    async def test_no_project(self, reconciler, projects) -> None:
        assert await reconciler.refresh_files() == []
        projects.list_files.assert_not_called()

    async def test_failure_is_logged(self, reconciler, projects, activity_log) -> None:
        await reconciler.open_project("todo-app")
        projects.list_files.side_effect = ConnectionError("down")

        assert await reconciler.refresh_files() == []
        assert activity_log.errors()[-1].message.startswith("Failed to refresh files")


# =============================================================================
# Files
# =============================================================================


class TestOpenFile:
    """Tests for open_file and reload_file."""

    async def test_fetch_updates_only_that_file(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")

        content = await reconciler.open_file("a")

        assert content == "content of a"
        assert reconciler.store.snapshot() == {"a": "content of a", "b": None}
        projects.get_file.assert_awaited_once_with("todo-app", "a")

    async def test_loaded_file_needs_no_request(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        reconciler.store.set("a", "already here")

        assert await reconciler.open_file("a") == "already here"
        projects.get_file.assert_not_called()

    async def test_loaded_empty_file_needs_no_request(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        reconciler.store.set("a", "")

        assert await reconciler.open_file("a") == ""
        projects.get_file.assert_not_called()

    async def test_reload_refetches(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        reconciler.store.set("a", "stale local")

        assert await reconciler.reload_file("a") == "content of a"
        assert reconciler.store.get("a") == "content of a"

    async def test_failure_logged_and_store_unchanged(
        self, reconciler, projects, activity_log
    ) -> None:
        await reconciler.open_project("todo-app")
        projects.get_file.side_effect = ConnectionError("down")

        assert await reconciler.open_file("a") is None

        assert reconciler.store.snapshot() == {"a": None, "b": None}
        assert activity_log.errors()[-1].message == "Failed to load a: down"

    async def test_no_project_returns_none(self, reconciler, projects) -> None:
        assert await reconciler.open_file("a") is None
        projects.get_file.assert_not_called()

    async def test_older_response_does_not_overwrite_newer(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        release_first = asyncio.Event()
        calls = []

        async def get_file(project_id: str, path: str) -> str:
            calls.append(path)
            if len(calls) == 1:
                await release_first.wait()
                return "old"
            return "new"

        projects.get_file.side_effect = get_file

        first = asyncio.create_task(reconciler.reload_file("a"))
        await asyncio.sleep(0)
        second = await reconciler.reload_file("a")
        release_first.set()
        first_result = await first

        assert second == "new"
        assert first_result == "new"
        assert reconciler.store.get("a") == "new"

    async def test_response_after_project_switch_is_dropped(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        release = asyncio.Event()

        async def get_file(project_id: str, path: str) -> str:
            await release.wait()
            return f"{project_id}:{path}"

        projects.get_file.side_effect = get_file

        pending = asyncio.create_task(reconciler.open_file("a"))
        await asyncio.sleep(0)
        await reconciler.open_project("weather")
        release.set()

        assert await pending is None
        assert reconciler.store.needs_fetch("a")

    async def test_local_edit_during_fetch_is_kept(self, reconciler, projects) -> None:
        await reconciler.open_project("todo-app")
        release = asyncio.Event()

        async def get_file(project_id: str, path: str) -> str:
            await release.wait()
            return "remote content"

        projects.get_file.side_effect = get_file

        pending = asyncio.create_task(reconciler.open_file("a"))
        await asyncio.sleep(0)
        reconciler.store.set("a", "user edit")
        release.set()

        assert await pending == "user edit"
        assert reconciler.store.get("a") == "user edit"

    async def test_empty_path_is_logged_without_request(
        self, reconciler, projects, activity_log
    ) -> None:
        await reconciler.open_project("todo-app")

        assert await reconciler.open_file("") is None

        projects.get_file.assert_not_awaited()
        assert activity_log.errors()[0].message.startswith("Failed to load ''")

    async def test_conflicting_path_is_logged_without_request(
        self, reconciler, projects, activity_log
    ) -> None:
        await reconciler.open_project("todo-app")

        assert await reconciler.open_file("a/nested.ts") is None

        projects.get_file.assert_not_awaited()
        assert "a/nested.ts" not in reconciler.store
        assert len(activity_log.errors()) == 1
