"""Runtime configuration for the studio.

Settings come from the environment, optionally seeded from a ``.env`` file
via python-dotenv:

    STUDIO_SERVER_URL        Build/preview server (sync and project listing)
    STUDIO_BRIDGE_URL        n8n MCP bridge
    GEMINI_API_KEY           API key for the generation model
    STUDIO_MODEL             Generation model name
    STUDIO_TIMEOUT           HTTP timeout in seconds
    STUDIO_PREFERENCES_PATH  Where preferences are persisted
"""

import os
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field


DEFAULT_SERVER_URL = "http://localhost:3000"
DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_PREFERENCES_PATH = "~/.craft-studio/preferences.json"


class StudioConfig(BaseModel):
    """Connection and model settings.

    Attributes:
        server_url: Base URL of the build/preview server.
        bridge_url: Base URL of the MCP bridge (empty when not configured).
        gemini_api_key: API key for the generation model.
        model: Generation model name.
        timeout: HTTP request timeout in seconds.
        preferences_path: JSON file for persisted preferences.
    """

    server_url: str = DEFAULT_SERVER_URL
    bridge_url: str = ""
    gemini_api_key: str | None = None
    model: str = DEFAULT_MODEL
    timeout: float = Field(30.0, gt=0)
    preferences_path: str = DEFAULT_PREFERENCES_PATH

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        dotenv: bool = True,
    ) -> "StudioConfig":
        """Build a config from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.
            dotenv: Whether to load a ``.env`` file into os.environ first.
                Variables already set are not overridden.

        Returns:
            The resolved configuration. Unset variables keep their defaults.
        """
        if dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        values = {
            "server_url": env.get("STUDIO_SERVER_URL"),
            "bridge_url": env.get("STUDIO_BRIDGE_URL"),
            "gemini_api_key": env.get("GEMINI_API_KEY"),
            "model": env.get("STUDIO_MODEL"),
            "timeout": env.get("STUDIO_TIMEOUT"),
            "preferences_path": env.get("STUDIO_PREFERENCES_PATH"),
        }
        return cls(**{key: value for key, value in values.items() if value})
