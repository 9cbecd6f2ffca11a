"""
Tool registry with dispatch table for MCP server.

Maps tool names to handlers together with what each handler needs from the
backend, so capability gating happens in one place instead of per handler.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..errors import UnsupportedOperationError
from .types import ToolContext, ToolResult, ToolSpec

logger = logging.getLogger("mcp.remote_browser.registry")

HandlerFunc = Callable[[ToolContext, dict[str, Any]], ToolResult]


class ToolRegistry:
    """Registry for tool handlers with backend capability gating."""

    def __init__(self) -> None:
        self._specs: dict[str, ToolSpec] = {}

    def register(
        self,
        name: str,
        handler: HandlerFunc,
        requires_backend: bool = True,
        capability: str | None = None,
    ) -> None:
        """Register a tool handler."""
        self._specs[name] = ToolSpec(name=name, handler=handler, requires_backend=requires_backend, capability=capability)

    def register_many(self, handlers: dict[str, tuple]) -> None:
        """Register multiple ``name -> (handler, requires_backend, capability)`` entries."""
        for name, (handler, requires_backend, capability) in handlers.items():
            self.register(name, handler, requires_backend, capability)

    def get(self, name: str) -> ToolSpec | None:
        return self._specs.get(name)

    def dispatch(self, name: str, ctx: ToolContext, arguments: dict[str, Any]) -> ToolResult:
        """
        Run the handler for ``name``.

        Raises:
            KeyError: tool not registered
            UnsupportedOperationError: backend lacks the tool's capability
                (raised before the handler runs, so no remote call happens)
        """
        spec = self._specs.get(name)
        if spec is None:
            raise KeyError(f"Unknown tool: {name}")

        if spec.requires_backend:
            backend = ctx.require_backend()
            if spec.capability and not backend.supports(spec.capability):
                raise UnsupportedOperationError(name, backend.name)

        return spec.handler(ctx, arguments)

    def __len__(self) -> int:
        return len(self._specs)


def create_default_registry() -> ToolRegistry:
    """Create registry with all default handlers."""
    from .handlers import ALL_HANDLERS

    registry = ToolRegistry()
    registry.register_many(ALL_HANDLERS)
    logger.info("Registered %d tool handlers", len(registry))
    return registry


__all__ = ["HandlerFunc", "ToolRegistry", "create_default_registry"]
