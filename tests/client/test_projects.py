"""Unit tests for the remote project sub-client (studio_client/_projects.py)."""

import httpx
import pytest

from studio_client import AsyncStudioClient, StudioClient
from studio_client._projects import EXCLUDED_PROJECT_NAMES, filter_projects
from studio_client.exceptions import NotFoundError, ResponseFormatError


def _client(routes: dict[str, httpx.Response], seen: list | None = None) -> StudioClient:
    """Client whose transport answers by raw request path."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.raw_path.decode()
        if seen is not None:
            seen.append(path)
        return routes.get(path, httpx.Response(404, json={"detail": "Not Found"}))

    return StudioClient(server_url="http://test", transport=httpx.MockTransport(handler))


class TestFilterProjects:
    """Tests for filter_projects."""

    def test_drops_artifacts_and_dotfiles(self) -> None:
        names = ["todo-app", "node_modules", ".git", ".secret", "package.json", "weather", ""]

        assert filter_projects(names) == ["todo-app", "weather"]

    def test_every_excluded_name_is_dropped(self) -> None:
        assert filter_projects(sorted(EXCLUDED_PROJECT_NAMES)) == []


class TestProjectsClient:
    """Tests for the synchronous ProjectsClient."""

    @pytest.mark.parametrize(
        "body",
        [
            ["todo-app", "node_modules", "weather"],
            {"projects": ["todo-app", "node_modules", "weather"]},
        ],
    )
    def test_list_projects_accepts_both_shapes(self, body) -> None:
        with _client({"/projects": httpx.Response(200, json=body)}) as client:
            assert client.projects.list_projects() == ["todo-app", "weather"]

    def test_list_projects_rejects_unexpected_shape(self) -> None:
        with _client({"/projects": httpx.Response(200, json={"items": []})}) as client:
            with pytest.raises(ResponseFormatError):
                client.projects.list_projects()

    @pytest.mark.parametrize("body", [["App.tsx", "index.html"], {"files": ["App.tsx", "index.html"]}])
    def test_list_files(self, body) -> None:
        routes = {"/projects/todo-app/files": httpx.Response(200, json=body)}

        with _client(routes) as client:
            assert client.projects.list_files("todo-app") == ["App.tsx", "index.html"]

    def test_list_files_unknown_project(self) -> None:
        with _client({}) as client:
            with pytest.raises(NotFoundError):
                client.projects.list_files("missing")

    def test_get_file_encodes_path(self) -> None:
        seen: list[str] = []
        routes = {
            "/projects/todo-app/files/components%2FHeader.tsx": httpx.Response(
                200, json={"content": "export const Header = () => null;"}
            )
        }

        with _client(routes, seen) as client:
            content = client.projects.get_file("todo-app", "components/Header.tsx")

        assert content == "export const Header = () => null;"
        assert seen == ["/projects/todo-app/files/components%2FHeader.tsx"]

    def test_get_file_bare_string(self) -> None:
        routes = {"/projects/todo-app/files/App.tsx": httpx.Response(200, json="export {};")}

        with _client(routes) as client:
            assert client.projects.get_file("todo-app", "App.tsx") == "export {};"


class TestAsyncProjectsClient:
    """Tests for the asynchronous AsyncProjectsClient."""

    async def test_list_and_fetch(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            path = request.url.raw_path.decode()
            if path == "/projects":
                return httpx.Response(200, json={"projects": ["todo-app", ".cache"]})
            if path == "/projects/todo-app/files":
                return httpx.Response(200, json=["App.tsx"])
            if path == "/projects/todo-app/files/App.tsx":
                return httpx.Response(200, json={"content": ""})
            return httpx.Response(404)

        async with AsyncStudioClient(
            server_url="http://test", transport=httpx.MockTransport(handler)
        ) as client:
            assert await client.projects.list_projects() == ["todo-app"]
            assert await client.projects.list_files("todo-app") == ["App.tsx"]
            assert await client.projects.get_file("todo-app", "App.tsx") == ""
