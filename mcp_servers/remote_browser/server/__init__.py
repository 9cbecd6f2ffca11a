"""Server package for the remote browser MCP gateway.

Keep this package import light: ``http_client`` imports ``server.redaction``,
so importing ``mcp_servers.remote_browser.server.*`` must not eagerly pull the
dispatcher (which imports the backends, which import ``http_client``).
"""

from __future__ import annotations

from typing import Any

__all__ = ["Dispatcher", "ToolRegistry", "create_default_registry"]


def __getattr__(name: str) -> Any:  # pragma: no cover
    if name in {"ToolRegistry", "create_default_registry"}:
        from .registry import ToolRegistry, create_default_registry

        return {"ToolRegistry": ToolRegistry, "create_default_registry": create_default_registry}[name]
    if name == "Dispatcher":
        from .dispatch import Dispatcher

        return Dispatcher
    raise AttributeError(name)
