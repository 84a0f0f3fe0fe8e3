"""Persisted studio preferences.

Local state that survives restarts: the current project pointer, the prompt
draft for each project, the MCP bridge connection details and the UI
language. PreferenceStore is passed explicitly to the components that need it
and is loaded once at startup and saved on every change.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError


logger = logging.getLogger(__name__)

Language = Literal["pt-br", "en"]


class BridgeSettings(BaseModel):
    """Connection details for the n8n MCP bridge.

    Attributes:
        server_url: Base URL of the bridge service.
        n8n_url: URL of the n8n instance the bridge should talk to.
        api_token: n8n access token (JWT).
    """

    server_url: str = ""
    n8n_url: str = ""
    api_token: str = ""


class Preferences(BaseModel):
    """Everything the studio persists between sessions."""

    current_project_id: str | None = None
    prompts: dict[str, str] = Field(default_factory=dict)
    bridge: BridgeSettings = Field(default_factory=BridgeSettings)
    language: Language = "pt-br"


class PreferenceStore:
    """JSON-file backed store for Preferences.

    Example:
        store = PreferenceStore("~/.craft-studio/preferences.json")
        store.load()
        store.set_current_project("todo-app")  # saved immediately
    """

    def __init__(self, path: str | Path | None = None, autosave: bool = True) -> None:
        """Initialize the store.

        Args:
            path: JSON file location. None keeps preferences in memory only.
            autosave: Whether setters call save() automatically.
        """
        self.path = Path(path).expanduser() if path is not None else None
        self.autosave = autosave
        self.preferences = Preferences()

    def load(self) -> Preferences:
        """Read preferences from disk.

        A missing file yields defaults. An unreadable or invalid file is
        logged and also yields defaults, so a corrupt file never blocks
        startup.
        """
        if self.path is None or not self.path.exists():
            self.preferences = Preferences()
            return self.preferences

        try:
            self.preferences = Preferences.model_validate_json(
                self.path.read_text(encoding="utf-8")
            )
        except (OSError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable preferences at {self.path}: {e}")
            self.preferences = Preferences()
        return self.preferences

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self.preferences.model_dump_json(indent=2), encoding="utf-8")

    def _changed(self) -> None:
        if self.autosave:
            self.save()

    @property
    def current_project(self) -> str | None:
        return self.preferences.current_project_id

    def set_current_project(self, project_id: str | None) -> None:
        self.preferences.current_project_id = project_id or None
        self._changed()

    def prompt_for(self, project_id: str) -> str:
        return self.preferences.prompts.get(project_id, "")

    def set_prompt(self, project_id: str, prompt: str) -> None:
        """Store the prompt draft for a project. An empty prompt removes it."""
        if prompt:
            self.preferences.prompts[project_id] = prompt
        else:
            self.preferences.prompts.pop(project_id, None)
        self._changed()

    @property
    def bridge(self) -> BridgeSettings:
        return self.preferences.bridge

    def update_bridge(self, **changes: str) -> BridgeSettings:
        """Update bridge settings fields and return the new settings."""
        self.preferences.bridge = BridgeSettings(
            **{**self.preferences.bridge.model_dump(), **changes}
        )
        self._changed()
        return self.preferences.bridge

    def set_language(self, language: Language) -> None:
        self.preferences.language = language
        self._changed()
