"""
Tool handlers organized by domain.

Each handler module maps tool names to ``(handler, requires_backend, capability)``.
All handlers follow the signature: (ctx, arguments) -> ToolResult
"""

from .capture import CAPTURE_HANDLERS
from .content import CONTENT_HANDLERS
from .interaction import INTERACTION_HANDLERS
from .navigation import NAVIGATION_HANDLERS

# Aggregate all handlers
ALL_HANDLERS: dict[str, tuple] = {
    **NAVIGATION_HANDLERS,
    **CAPTURE_HANDLERS,
    **INTERACTION_HANDLERS,
    **CONTENT_HANDLERS,
}

__all__ = [
    "ALL_HANDLERS",
    "CAPTURE_HANDLERS",
    "CONTENT_HANDLERS",
    "INTERACTION_HANDLERS",
    "NAVIGATION_HANDLERS",
]
