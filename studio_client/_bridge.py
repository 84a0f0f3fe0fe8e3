"""n8n MCP bridge sub-client.

This module provides BridgeClient and AsyncBridgeClient for the MCP bridge
that exposes n8n workflows as tools. The studio uses it to pick a workflow,
read its technical profile as generation context, and run it live.

Endpoints:
    POST /setup    Point the bridge at an n8n instance
    GET  /tools    List the tools the bridge exposes
    POST /execute  Run a tool ({"toolName": ..., "args": {...}})

This is an internal module. Import from `studio_client` instead.
"""

import secrets
import string
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from studio_client._base import AsyncBaseClient, BaseClient
from studio_client.models import BridgeTool, Workflow

if TYPE_CHECKING:
    from studio_client._http import AsyncHTTPClient, HTTPClient


# The bridge is usually reached through an ngrok tunnel, which answers these
# statuses until the tunnel URL has been visited in a browser
BRIDGE_TUNNEL_STATUSES = frozenset({404, 406})

SEARCH_WORKFLOWS_TOOL = "search_workflows"
WORKFLOW_DETAILS_TOOL = "get_workflow_details"
EXECUTE_WORKFLOW_TOOL = "execute_workflow"

_SESSION_ALPHABET = string.ascii_lowercase + string.digits


def _dig(data: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def parse_tools(data: Any) -> list[BridgeTool]:
    """Normalize a /tools response to a list of tools."""
    raw = _dig(data, "result", "tools") or _dig(data, "tools")
    if raw is None and isinstance(data, list):
        raw = data
    return [
        BridgeTool.model_validate(item if isinstance(item, dict) else {"name": str(item)})
        for item in raw or []
    ]


def parse_workflow_list(data: Any) -> list[Workflow]:
    """Normalize a search_workflows response to a list of workflows.

    The bridge puts the list under ``result.structuredContent.data`` or
    ``result.output.data`` depending on the tool version, or returns it bare.
    """
    raw = _dig(data, "result", "structuredContent", "data")
    if raw is None:
        raw = _dig(data, "result", "output", "data")
    if raw is None and isinstance(data, list):
        raw = data

    workflows = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        workflows.append(
            Workflow(
                id=str(item.get("id") or "N/A"),
                name=item.get("name") or "Untitled Workflow",
                active=bool(item.get("active")),
            )
        )
    return workflows


def parse_workflow_details(workflow_id: str, data: Any) -> Workflow:
    """Normalize a get_workflow_details response.

    The whole structured payload (runData/pinData included) is kept as
    ``structure`` so the generation model sees everything the bridge sent.
    """
    raw = None
    if isinstance(data, dict):
        raw = data.get("result") or data.get("output")
    if not isinstance(raw, dict):
        raw = data if isinstance(data, dict) else {}
    structured = raw.get("structuredContent") or raw

    return Workflow(
        id=workflow_id,
        name=raw.get("name") or "Workflow Technical Profile",
        nodes=raw.get("nodes") or [],
        structure=structured,
    )


def unwrap_result(data: Any) -> Any:
    if isinstance(data, dict):
        return data.get("result") or data.get("output") or data
    return data


def build_webhook_inputs(chat_input: str, session_id: str | None = None) -> dict[str, Any]:
    """Build the webhook payload used to run a workflow from the studio."""
    session_id = session_id or "".join(secrets.choice(_SESSION_ALPHABET) for _ in range(13))
    webhook_data = {
        "method": "POST",
        "headers": {
            "content-type": "application/json",
            "x-source": "mcp-studio",
            "x-session-id": session_id,
        },
        "query": {},
        "body": {
            "key": session_id,
            "session_id": session_id,
            "source": "http-gateway",
            "mensagem": chat_input,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }
    return {"type": "webhook", "webhookData": webhook_data}


class BridgeClient(BaseClient):
    """Synchronous client for the n8n MCP bridge.

    Example:
        with StudioClient(bridge_url="https://bridge.example") as client:
            client.bridge.setup("https://n8n.example", token)
            for workflow in client.bridge.search_workflows():
                print(workflow.name)
    """

    def setup(self, n8n_url: str, token: str) -> Any:
        """Configure the bridge with the target n8n instance."""
        return self._post("/setup", json={"url": n8n_url, "token": token})

    def fetch_tools(self) -> list[BridgeTool]:
        return parse_tools(self._get("/tools"))

    def execute(self, tool_name: str, args: dict[str, Any]) -> Any:
        return self._post("/execute", json={"toolName": tool_name, "args": args})

    def search_workflows(self, limit: int = 10) -> list[Workflow]:
        return parse_workflow_list(self.execute(SEARCH_WORKFLOWS_TOOL, {"limit": limit}))

    def get_workflow_details(self, workflow_id: str) -> Workflow:
        data = self.execute(WORKFLOW_DETAILS_TOOL, {"workflowId": workflow_id})
        return parse_workflow_details(workflow_id, data)

    def execute_workflow(self, workflow_id: str, chat_input: str) -> Any:
        """Run a workflow through its webhook trigger and return its output."""
        data = self.execute(
            EXECUTE_WORKFLOW_TOOL,
            {"workflowId": workflow_id, "inputs": build_webhook_inputs(chat_input)},
        )
        return unwrap_result(data)


class AsyncBridgeClient(AsyncBaseClient):
    """Asynchronous client for the n8n MCP bridge."""

    async def setup(self, n8n_url: str, token: str) -> Any:
        return await self._post("/setup", json={"url": n8n_url, "token": token})

    async def fetch_tools(self) -> list[BridgeTool]:
        return parse_tools(await self._get("/tools"))

    async def execute(self, tool_name: str, args: dict[str, Any]) -> Any:
        return await self._post("/execute", json={"toolName": tool_name, "args": args})

    async def search_workflows(self, limit: int = 10) -> list[Workflow]:
        return parse_workflow_list(await self.execute(SEARCH_WORKFLOWS_TOOL, {"limit": limit}))

    async def get_workflow_details(self, workflow_id: str) -> Workflow:
        data = await self.execute(WORKFLOW_DETAILS_TOOL, {"workflowId": workflow_id})
        return parse_workflow_details(workflow_id, data)

    async def execute_workflow(self, workflow_id: str, chat_input: str) -> Any:
        data = await self.execute(
            EXECUTE_WORKFLOW_TOOL,
            {"workflowId": workflow_id, "inputs": build_webhook_inputs(chat_input)},
        )
        return unwrap_result(data)
