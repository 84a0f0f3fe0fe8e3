"""Studio session orchestration.

StudioSession ties the workspace core to the remote collaborators the way the
studio UI drives them: generate an app, apply it to the VFS, push it to the
build server, switch projects and lazily open files.
"""

import logging
import time
from enum import Enum

from studio.activity_log import ActivityLog
from studio.preferences import Language, PreferenceStore
from studio.templates import starter_files
from studio.tree import ExpansionState, TreeNode
from studio.vfs import VFSStore
from studio_client.client import AsyncStudioClient
from studio_client.exceptions import GenerationError, StudioClientError
from studio_client.models import SyncResult, Workflow
from studio_client.reconciler import RemoteProjectReconciler


logger = logging.getLogger(__name__)

DEFAULT_ACTIVE_FILE = "App.tsx"


class ConnectionStatus(str, Enum):
    """Build server connection state shown in the header badge."""

    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    ERROR = "ERROR"


def _now_ms() -> int:
    return int(time.time() * 1000)


def pick_active_file(paths: list[str]) -> str | None:
    """Choose the file to show after a project changes."""
    if DEFAULT_ACTIVE_FILE in paths:
        return DEFAULT_ACTIVE_FILE
    return paths[0] if paths else None


class StudioSession:
    """Live state of one studio window.

    Attributes:
        store: The project's VFS.
        expansion: Open folders in the project explorer.
        log: Operator-facing activity log.
        preferences: Persisted preferences.
        status: Build server connection status.
        active_file: Path shown in the editor.
        preview_key: Changes after every successful sync so the preview
            frame reloads.
        workflows: Workflows discovered through the bridge.
        bridge_active: Whether the bridge answered the last discovery call.
    """

    def __init__(
        self,
        client: AsyncStudioClient,
        preferences: PreferenceStore | None = None,
        store: VFSStore | None = None,
        log: ActivityLog | None = None,
    ) -> None:
        self.client = client
        self.preferences = preferences if preferences is not None else PreferenceStore()
        self.store = store if store is not None else VFSStore(starter_files())
        self.expansion = ExpansionState()
        self.log = log if log is not None else ActivityLog()
        self.reconciler = RemoteProjectReconciler(
            client.projects, self.store, self.log, self.preferences
        )

        self.status = ConnectionStatus.CONNECTED
        self.active_file: str | None = pick_active_file(self.store.paths())
        self.preview_key = _now_ms()
        self.workflows: list[Workflow] = []
        self.bridge_active = False

    @property
    def project_id(self) -> str | None:
        return self.reconciler.project_id

    @property
    def preview_url(self) -> str:
        return f"{self.client.server_url}?t={self.preview_key}"

    def tree(self) -> list[TreeNode]:
        return self.store.tree()

    def visible_rows(self) -> list[tuple[int, TreeNode]]:
        return self.store.visible_rows(self.expansion)

    async def start(self) -> None:
        """Restore the previous session from preferences."""
        self.preferences.load()
        if self.preferences.current_project:
            await self.open_project(self.preferences.current_project)
        if self.preferences.bridge.server_url:
            await self.client.set_bridge_url(self.preferences.bridge.server_url)
            await self.load_workflows()

    # Projects and files

    def new_project(self, project_id: str) -> None:
        """Start a local project from the starter files."""
        if not project_id:
            raise ValueError("project_id must not be empty")
        self.store.replace_all(starter_files())
        self.reconciler.project_id = project_id
        self.preferences.set_current_project(project_id)
        self.active_file = pick_active_file(self.store.paths())

    async def list_projects(self) -> list[str]:
        return await self.reconciler.list_projects()

    async def open_project(self, project_id: str) -> bool:
        loaded = await self.reconciler.open_project(project_id)
        if loaded:
            self.active_file = pick_active_file(sorted(self.store.paths()))
            self.expansion.prune(self.tree())
        return loaded

    async def open_file(self, path: str) -> str | None:
        """Show a file in the editor, fetching it on first open."""
        self.active_file = path
        return await self.reconciler.open_file(path)

    def edit_file(self, path: str, content: str) -> None:
        self.store.set(path, content)

    def prompt(self) -> str:
        return self.preferences.prompt_for(self.project_id) if self.project_id else ""

    def set_prompt(self, prompt: str) -> None:
        if self.project_id:
            self.preferences.set_prompt(self.project_id, prompt)

    @property
    def language(self) -> Language:
        return self.preferences.preferences.language

    def set_language(self, language: Language) -> None:
        """Switch the UI language and remember it."""
        self.preferences.set_language(language)

    # Sync

    async def sync(self) -> SyncResult | None:
        """Push loaded files to the build server.

        Placeholders are not sent, so files that were never opened keep
        their server-side content.

        Returns:
            None if no project is selected, otherwise the sync result.
        """
        if not self.project_id:
            return None

        self.status = ConnectionStatus.CONNECTING
        result = await self.client.sync.sync(self.store.loaded_files(), self.project_id)
        if result is not None and result.success:
            self.preview_key = _now_ms()
            self.status = ConnectionStatus.CONNECTED
        else:
            self.status = ConnectionStatus.ERROR
            message = result.message if result is not None else "no project"
            self.log.error(f"Sync error: {message}")
        return result

    # Generation

    async def generate(
        self,
        prompt: str,
        workflow_id: str | None = None,
        refine: bool = False,
    ) -> dict[str, str] | None:
        """Generate an application, apply it and sync it.

        Args:
            prompt: Description of the app.
            workflow_id: Optional workflow to use as context.
            refine: Send the current project so the model revises it.

        Returns:
            The generated files, or None if the prompt is blank.

        Raises:
            GenerationError: If the model output is unusable.
            StudioClientError: If the workflow details cannot be read.
            ValueError: If a workflow is requested but no bridge URL is set.
        """
        if not prompt.strip():
            return None

        self.log.info("Architecting modular root structure...")
        try:
            workflow = None
            if workflow_id:
                workflow = await self.client.bridge.get_workflow_details(workflow_id)
            files = await self.client.generation.generate(
                prompt,
                workflow=workflow,
                current_files=self.store.loaded_files() if refine else None,
            )
        except StudioClientError as e:
            self.log.error(e.message)
            raise
        except Exception as e:
            self.log.error(f"Generation failed: {e}")
            raise

        try:
            self.store.replace_all(files)
        except ValueError as e:
            self.log.error(f"Generated project has invalid paths: {e}")
            raise GenerationError(f"Generated project has invalid paths: {e}") from e

        self.set_prompt("")
        self.active_file = pick_active_file(list(files))
        await self.sync()
        self.log.info("Modular project generated")
        return files

    # MCP bridge

    async def connect_bridge(self, server_url: str, n8n_url: str, api_token: str) -> bool:
        """Configure the bridge, save the settings and discover workflows.

        Returns:
            True if setup succeeded.
        """
        await self.client.set_bridge_url(server_url)
        try:
            await self.client.bridge.setup(n8n_url, api_token)
        except (StudioClientError, ValueError) as e:
            self.log.error(f"Setup error: {e}")
            return False

        self.preferences.update_bridge(server_url=server_url, n8n_url=n8n_url, api_token=api_token)
        await self.load_workflows()
        return True

    async def load_workflows(self) -> list[Workflow]:
        """Refresh the workflow list from the bridge.

        Failures mark the bridge inactive without raising.
        """
        if not self.client.bridge_url:
            return []
        try:
            self.workflows = await self.client.bridge.search_workflows()
        except StudioClientError as e:
            logger.warning(f"Workflow discovery failed: {e}")
            self.bridge_active = False
            return []

        self.bridge_active = True
        self.log.info("n8n connection established.")
        return self.workflows
