"""Remote project sub-client for the build/preview server.

This module provides ProjectsClient and AsyncProjectsClient for the project
listing, file listing and file content endpoints (/projects/*). These are the
raw operations; they raise on failure. RemoteProjectReconciler wraps them
with logging and VFS merging.

This is an internal module. Import from `studio_client` instead.
"""

from typing import TYPE_CHECKING

from studio_client._base import AsyncBaseClient, BaseClient, encode_segment
from studio_client.models import parse_file_content, parse_file_list, parse_project_list

if TYPE_CHECKING:
    from studio_client._http import AsyncHTTPClient, HTTPClient


# Entries in the server's project directory that are not projects
EXCLUDED_PROJECT_NAMES = frozenset(
    {
        "node_modules",
        "dist",
        "build",
        ".git",
        ".vite",
        ".cache",
        ".env",
        ".DS_Store",
        ".gitignore",
        "package.json",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
        "bun.lockb",
    }
)


def filter_projects(names: list[str]) -> list[str]:
    """Drop build artifacts, lockfiles and dotfiles from a project listing."""
    return [
        name
        for name in names
        if name and name not in EXCLUDED_PROJECT_NAMES and not name.startswith(".")
    ]


def _project_path(project_id: str) -> str:
    return f"/projects/{encode_segment(project_id)}"


class ProjectsClient(BaseClient):
    """Synchronous client for the project endpoints (/projects/*).

    Example:
        with StudioClient(server_url="http://localhost:3000") as client:
            for project_id in client.projects.list_projects():
                files = client.projects.list_files(project_id)
    """

    _BASE_PATH = "/projects"

    def list_projects(self) -> list[str]:
        """List project identifiers, excluding non-project entries.

        Raises:
            StudioClientError: If the request fails or the body has an
                unexpected shape.
        """
        data = self._get(self._BASE_PATH)
        return filter_projects(parse_project_list(data).projects)

    def list_files(self, project_id: str) -> list[str]:
        """List the file paths of a project."""
        data = self._get(f"{_project_path(project_id)}/files")
        return parse_file_list(data).files

    def get_file(self, project_id: str, path: str) -> str:
        """Fetch the text content of one file."""
        data = self._get(f"{_project_path(project_id)}/files/{encode_segment(path)}")
        return parse_file_content(data).content


class AsyncProjectsClient(AsyncBaseClient):
    """Asynchronous client for the project endpoints (/projects/*)."""

    _BASE_PATH = "/projects"

    async def list_projects(self) -> list[str]:
        data = await self._get(self._BASE_PATH)
        return filter_projects(parse_project_list(data).projects)

    async def list_files(self, project_id: str) -> list[str]:
        data = await self._get(f"{_project_path(project_id)}/files")
        return parse_file_list(data).files

    async def get_file(self, project_id: str, path: str) -> str:
        data = await self._get(f"{_project_path(project_id)}/files/{encode_segment(path)}")
        return parse_file_content(data).content
