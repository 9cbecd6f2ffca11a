"""
Type definitions for MCP server responses and handlers.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..backends.base import Backend
    from ..config import GatewayConfig
    from ..session_store import SessionStore


@dataclass(slots=True)
class ToolContent:
    """Single content item in tool response."""

    type: str  # "text" or "image"
    text: str | None = None
    data: str | None = None  # base64 for images
    mime_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to MCP content format."""
        if self.type == "image":
            return {"type": "image", "data": self.data, "mimeType": self.mime_type}
        return {"type": "text", "text": self.text}


@dataclass(slots=True)
class ToolResult:
    """Result envelope returned for every tool call, success or failure."""

    content: list[ToolContent] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> ToolResult:
        """Create result with single text content."""
        return cls(content=[ToolContent(type="text", text=text or "")])

    @classmethod
    def error(cls, message: str) -> ToolResult:
        """Create error result with a human-readable message."""
        return cls(content=[ToolContent(type="text", text=f"Error: {message}")], is_error=True)

    @classmethod
    def json(cls, label: str, data: Any) -> ToolResult:
        """Create result with a label line followed by pretty-printed JSON."""
        return cls.text(f"{label}:\n{json.dumps(data, ensure_ascii=False, indent=2)}")

    @classmethod
    def with_image(cls, text: str, data_b64: str, mime_type: str = "image/png") -> ToolResult:
        """Create result with text and image content."""
        return cls(
            content=[
                ToolContent(type="text", text=text),
                ToolContent(type="image", data=data_b64, mime_type=mime_type),
            ]
        )

    def to_content_list(self) -> list[dict[str, Any]]:
        """Convert to MCP content list format."""
        return [c.to_dict() for c in self.content]

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.to_content_list(), "isError": self.is_error}


@dataclass(slots=True)
class ToolContext:
    """Everything a handler may touch during one call."""

    config: GatewayConfig
    store: SessionStore
    backend: Backend | None = None

    def require_backend(self) -> Backend:
        if self.backend is None:  # registry guarantees selection before dispatch
            raise RuntimeError("backend was not selected for this call")
        return self.backend

    def resolve_target(self, arguments: dict[str, Any]) -> str | None:
        """Explicit ``url`` argument wins; otherwise the last navigated URL."""
        url = arguments.get("url")
        return url if url else self.store.current_url


@dataclass(slots=True, frozen=True)
class ToolSpec:
    """Registration entry for one tool."""

    name: str
    handler: Callable[[ToolContext, dict[str, Any]], ToolResult]
    requires_backend: bool = True  # Whether a backend must be selected before the handler runs
    capability: str | None = None  # Backend capability the tool is gated on
