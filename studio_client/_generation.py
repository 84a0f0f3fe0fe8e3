"""Application generation through the Gemini API.

GenerationClient asks the model for a complete multi-file React application
and returns it as a VFS mapping (path -> content). The model is instructed
to answer with a single JSON object; anything else is a GenerationError.

This is an internal module. Import from `studio_client` instead.
"""

import json
import logging
from typing import Any, Mapping

from google import genai
from google.genai import types

from studio.config import DEFAULT_MODEL
from studio_client.exceptions import GenerationError
from studio_client.models import Workflow


logger = logging.getLogger(__name__)

DEFAULT_THINKING_BUDGET = 12000

EMPTY_RESPONSE_MESSAGE = "AI failed to generate response."
PARSE_FAILURE_MESSAGE = "Failed to parse AI response. Ensure output is valid JSON VFS."

ARCHITECTURE_RULES = """\
## Project layout
Build the application directly in the workspace root:

1. index.html: entry page, loads "/main.tsx" as a module script.
2. main.tsx: mounts the React root.
3. App.tsx: top-level component. UI lives in ./components/, logic in ./services/.
4. components/: one file per UI component (e.g. components/Header.tsx).
5. services/: API calls and business logic (e.g. services/n8n.ts).
6. types.ts: shared TypeScript types.

## Workflow mapping
When a workflow is provided, derive the UI from it:
- Webhook fields become component inputs.
- Workflow responses become typed displays.
- Calls to the workflow go in services/n8n.ts.

## Rules
- Do not create a src/ folder.
- All imports between project files are relative (e.g. './components/Header').
- Style with Tailwind CSS.
- Export the root component from App.tsx as `export const App = () => { ... }`.

## Output
Return only raw JSON: an object whose keys are file paths and whose values
are the complete file contents.
"""


def build_prompt(
    prompt: str,
    workflow: Workflow | None = None,
    current_files: Mapping[str, str] | None = None,
) -> str:
    """Assemble the full generation prompt.

    Args:
        prompt: The user's description of the application.
        workflow: Optional workflow whose technical data shapes the app.
        current_files: Optional current project, for iterative changes.

    Returns:
        The prompt text sent to the model.
    """
    sections = [
        "You are a senior React architect. Build a professional, modular "
        f'application for this request: "{prompt}"',
        ARCHITECTURE_RULES,
    ]
    if workflow is not None:
        sections.append(
            f'## Selected workflow: "{workflow.name}"\n'
            f"Technical data: {json.dumps(workflow.context(), default=str)}"
        )
    if current_files:
        sections.append(
            "## Current project\n"
            "Revise this project to satisfy the request. Return every file of "
            "the updated project, including unchanged ones.\n"
            f"{json.dumps(dict(current_files))}"
        )
    return "\n\n".join(sections)


def parse_generation_response(text: str | None) -> dict[str, str]:
    """Parse model output into a VFS mapping.

    Args:
        text: Raw model output.

    Returns:
        Mapping of file path to file content.

    Raises:
        GenerationError: If the output is empty, not JSON, or not an object
            of strings. The raw text is attached for diagnostics.
    """
    if not text or not text.strip():
        raise GenerationError(EMPTY_RESPONSE_MESSAGE, raw_text=text)

    try:
        files = json.loads(text.strip())
    except json.JSONDecodeError as e:
        logger.error(f"Unparseable generation output: {text}")
        raise GenerationError(PARSE_FAILURE_MESSAGE, raw_text=text) from e

    if not isinstance(files, dict) or not all(
        isinstance(path, str) and isinstance(content, str) for path, content in files.items()
    ):
        logger.error(f"Generation output is not a path -> content object: {text}")
        raise GenerationError(PARSE_FAILURE_MESSAGE, raw_text=text)
    return files


class _GenerationBase:
    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        thinking_budget: int = DEFAULT_THINKING_BUDGET,
        client: Any = None,
    ) -> None:
        """Initialize the generation client.

        Args:
            api_key: Gemini API key. Only needed if ``client`` is not given.
            model: Model name.
            thinking_budget: Token budget for model reasoning.
            client: A ready ``genai.Client`` (or a test double). Created on
                first use when omitted.
        """
        self.model = model
        self.thinking_budget = thinking_budget
        self._api_key = api_key
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    def _config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            thinking_config=types.ThinkingConfig(thinking_budget=self.thinking_budget),
        )


class GenerationClient(_GenerationBase):
    """Synchronous application generator.

    Example:
        generator = GenerationClient(api_key=config.gemini_api_key)
        files = generator.generate("A habit tracker with streaks")
    """

    def generate(
        self,
        prompt: str,
        workflow: Workflow | None = None,
        current_files: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Generate a project.

        Raises:
            GenerationError: If the model output is not a JSON VFS.
        """
        response = self.client.models.generate_content(
            model=self.model,
            contents=build_prompt(prompt, workflow, current_files),
            config=self._config(),
        )
        return parse_generation_response(response.text)


class AsyncGenerationClient(_GenerationBase):
    """Asynchronous application generator."""

    async def generate(
        self,
        prompt: str,
        workflow: Workflow | None = None,
        current_files: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Generate a project.

        Raises:
            GenerationError: If the model output is not a JSON VFS.
        """
        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=build_prompt(prompt, workflow, current_files),
            config=self._config(),
        )
        return parse_generation_response(response.text)
