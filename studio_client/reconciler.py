"""Merging remote project state into the local VFS.

RemoteProjectReconciler loads a project's file list as placeholders and
fetches file content lazily when a file is opened. Failures are written to
the activity log and leave the VFS as it was; nothing here raises to the
caller, so a failed listing or fetch can simply be retried.
"""

import logging

from studio.activity_log import ActivityLog
from studio.preferences import PreferenceStore
from studio.vfs import VFSStore
from studio_client._projects import AsyncProjectsClient
from studio_client.exceptions import StudioClientError


logger = logging.getLogger(__name__)


class RemoteProjectReconciler:
    """Keeps a VFSStore in step with a project on the build server.

    Attributes:
        store: The VFS being populated.
        project_id: The project currently loaded, if any.
    """

    def __init__(
        self,
        projects: AsyncProjectsClient,
        store: VFSStore,
        log: ActivityLog,
        preferences: PreferenceStore | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            projects: Client for the project endpoints.
            store: The VFS to merge into.
            log: Operator-facing log for failures.
            preferences: When given, the current project pointer is read from
                and written to it.
        """
        self._projects = projects
        self.store = store
        self.log = log
        self.preferences = preferences
        self.project_id: str | None = preferences.current_project if preferences else None

    async def list_projects(self) -> list[str]:
        """Return the remote project identifiers, or [] if listing fails."""
        try:
            return await self._projects.list_projects()
        except StudioClientError as e:
            self.log.error(f"Failed to list projects: {e}")
            return []

    async def open_project(self, project_id: str) -> bool:
        """Switch to a remote project.

        On success the VFS is replaced with one placeholder per remote file
        and the project becomes current. On failure nothing changes.

        Returns:
            True if the project was loaded.
        """
        try:
            paths = await self._projects.list_files(project_id)
        except StudioClientError as e:
            self.log.error(f"Failed to list files for {project_id}: {e}")
            return False

        try:
            self.store.replace_all({path: None for path in paths})
        except ValueError as e:
            self.log.error(f"Project {project_id} has invalid file paths: {e}")
            return False

        self.project_id = project_id
        if self.preferences is not None:
            self.preferences.set_current_project(project_id)
        self.log.info(f"Loaded {project_id} ({len(paths)} files)")
        return True

    async def refresh_files(self) -> list[str]:
        """Pick up files added remotely to the current project.

        New paths become placeholders; existing entries are kept as they
        are, including unsaved local content.

        Returns:
            The paths that were added.
        """
        if not self.project_id:
            return []
        try:
            paths = await self._projects.list_files(self.project_id)
            return self.store.add_placeholders(paths)
        except StudioClientError as e:
            self.log.error(f"Failed to refresh files for {self.project_id}: {e}")
        except ValueError as e:
            self.log.error(f"Project {self.project_id} has invalid file paths: {e}")
        return []

    async def open_file(self, path: str) -> str | None:
        """Return a file's content, fetching it if it is not loaded yet.

        Content that is already loaded is returned without a request.

        Returns:
            The file content, or None if it could not be loaded.
        """
        if not self.store.needs_fetch(path):
            return self.store.get(path)
        return await self._fetch(path)

    async def reload_file(self, path: str) -> str | None:
        """Fetch a file again, replacing any loaded content."""
        return await self._fetch(path)

    async def _fetch(self, path: str) -> str | None:
        # Writes only `path`, and only if no newer fetch or local write of it
        # happened while this one was in flight
        if not self.project_id:
            return None
        try:
            self.store.check_path(path)
        except ValueError as e:
            self.log.error(f"Failed to load {path!r}: {e}")
            return None

        project_id = self.project_id
        sequence = self.store.next_request(path)
        try:
            content = await self._projects.get_file(project_id, path)
        except StudioClientError as e:
            self.log.error(f"Failed to load {path}: {e}")
            return None

        if project_id != self.project_id or not self.store.set_if_current(path, content, sequence):
            logger.debug(f"Dropped stale fetch of {path} from {project_id}")
            return self.store.get(path)
        return content
