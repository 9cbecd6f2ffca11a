"""Tool schema definitions.

Declaration order is the ``tools/list`` order. The same descriptors drive
argument validation, so a schema change here is a contract change.
"""

from __future__ import annotations

from typing import Any

NAVIGATE_TOOL: dict[str, Any] = {
    "name": "browser_navigate",
    "description": """Set the page that later browser tools act on when they are called without a url.
No remote call is made; the URL is remembered for this session.""",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "minLength": 1, "description": "URL to navigate to"},
            "waitFor": {"type": "string", "description": "CSS selector to wait for before completing"},
            "timeout": {"type": "number", "description": "Timeout in milliseconds (default: 30000)"},
        },
        "required": ["url"],
        "additionalProperties": False,
    },
}

SCREENSHOT_TOOL: dict[str, Any] = {
    "name": "browser_screenshot",
    "description": """Take a screenshot using the external browser service.
The image is also stored as resource screenshot://<name>.""",
    "inputSchema": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "minLength": 1, "description": "Name for the screenshot"},
            "url": {"type": "string", "minLength": 1, "description": "URL to screenshot (if not already navigated)"},
            "selector": {"type": "string", "minLength": 1, "description": "CSS selector for element to screenshot"},
            "width": {"type": "number", "minimum": 1, "description": "Viewport width (default: 1280)"},
            "height": {"type": "number", "minimum": 1, "description": "Viewport height (default: 720)"},
            "fullPage": {"type": "boolean", "description": "Take full page screenshot (default: false)"},
        },
        "required": ["name"],
        "additionalProperties": False,
    },
}

CLICK_TOOL: dict[str, Any] = {
    "name": "browser_click",
    "description": "Click an element using the external browser service (requires a scripting-capable service)",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "minLength": 1, "description": "URL to navigate to first"},
            "selector": {"type": "string", "minLength": 1, "description": "CSS selector for element to click"},
            "waitFor": {"type": "string", "description": "CSS selector to wait for before clicking"},
        },
        "required": ["selector"],
        "additionalProperties": False,
    },
}

FILL_TOOL: dict[str, Any] = {
    "name": "browser_fill",
    "description": "Fill out an input field using the external browser service (requires a scripting-capable service)",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "minLength": 1, "description": "URL to navigate to first"},
            "selector": {"type": "string", "minLength": 1, "description": "CSS selector for input field"},
            "value": {"type": "string", "description": "Value to fill"},
        },
        "required": ["selector", "value"],
        "additionalProperties": False,
    },
}

EVALUATE_TOOL: dict[str, Any] = {
    "name": "browser_evaluate",
    "description": """Execute JavaScript in the page using the external browser service.
The value of the last expression is returned as JSON (requires a scripting-capable service).""",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "minLength": 1, "description": "URL to navigate to first"},
            "script": {"type": "string", "minLength": 1, "description": "JavaScript code to execute"},
            "waitFor": {"type": "string", "description": "CSS selector to wait for before execution"},
        },
        "required": ["script"],
        "additionalProperties": False,
    },
}

EXTRACT_CONTENT_TOOL: dict[str, Any] = {
    "name": "browser_extract_content",
    "description": "Extract text content from a page using the external browser service",
    "inputSchema": {
        "type": "object",
        "properties": {
            "url": {"type": "string", "minLength": 1, "description": "URL to extract content from"},
            "selector": {"type": "string", "minLength": 1, "description": "CSS selector for content to extract"},
            "waitFor": {"type": "string", "description": "CSS selector to wait for before extraction"},
        },
        "required": ["url"],
        "additionalProperties": False,
    },
}

TOOL_DEFINITIONS: list[dict[str, Any]] = [
    NAVIGATE_TOOL,
    SCREENSHOT_TOOL,
    CLICK_TOOL,
    FILL_TOOL,
    EVALUATE_TOOL,
    EXTRACT_CONTENT_TOOL,
]

TOOLS_BY_NAME: dict[str, dict[str, Any]] = {tool["name"]: tool for tool in TOOL_DEFINITIONS}


def get_tool_definition(name: str) -> dict[str, Any] | None:
    return TOOLS_BY_NAME.get(name)


__all__ = ["TOOL_DEFINITIONS", "TOOLS_BY_NAME", "get_tool_definition"]
