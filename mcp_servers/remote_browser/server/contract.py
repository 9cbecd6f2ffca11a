"""Protocol and tool contract definitions.

This is the single source of truth for:
- supported MCP protocol versions
- server identity
- capabilities advertised by initialize
- the tool list
- the resource URIs served by resources/list and resources/read
"""

from __future__ import annotations

import copy
from typing import Any

from ..session_store import LOGS_URI, SCREENSHOT_SCHEME
from .definitions import TOOL_DEFINITIONS

SERVER_INFO: dict[str, str] = {"name": "remote-browser", "version": "0.1.0"}

SUPPORTED_PROTOCOL_VERSIONS = ["2025-06-18", "2025-03-26", "2024-11-05"]
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[0]
DEFAULT_PROTOCOL_VERSION = LATEST_PROTOCOL_VERSION

CAPABILITIES: dict[str, Any] = {
    "logging": {},
    "resources": {"subscribe": False, "listChanged": False},
    "tools": {"listChanged": False},
}


# Fixed log resource first, then one entry per stored screenshot.
RESOURCE_TEMPLATES: list[dict[str, Any]] = [
    {
        "uri": LOGS_URI,
        "mimeType": "text/plain",
        "description": "Browser console lines collected during remote actions",
    },
    {
        "uriTemplate": SCREENSHOT_SCHEME + "{name}",
        "mimeType": "image/png",
        "description": "Screenshot stored by browser_screenshot under its name (MIME type is the sniffed format)",
    },
]


def select_protocol(requested: Any) -> str:
    if isinstance(requested, str) and requested in SUPPORTED_PROTOCOL_VERSIONS:
        return requested
    return DEFAULT_PROTOCOL_VERSION


def initialize_result(protocol: str) -> dict[str, Any]:
    return {
        "protocolVersion": protocol,
        "serverInfo": SERVER_INFO,
        "capabilities": CAPABILITIES,
        "instructions": "",
    }


def tools_list() -> list[dict[str, Any]]:
    # Callers may serialize or mutate the result; the catalog itself stays frozen.
    return copy.deepcopy(TOOL_DEFINITIONS)


def contract_snapshot(protocol: str | None = None) -> dict[str, Any]:
    return {
        "protocolVersion": protocol or DEFAULT_PROTOCOL_VERSION,
        "serverInfo": SERVER_INFO,
        "tools": tools_list(),
        "resources": copy.deepcopy(RESOURCE_TEMPLATES),
    }
