"""
Navigation tool handlers.

Navigation is local state only: providers are stateless per call, so the URL
is remembered and replayed as the target of later calls that omit ``url``.
"""

from __future__ import annotations

from typing import Any

from ..types import ToolContext, ToolResult


def handle_browser_navigate(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    url = args["url"]
    ctx.store.set_current_url(url)
    return ToolResult.text(f"Ready to navigate to {url}")


NAVIGATION_HANDLERS: dict[str, tuple] = {
    "browser_navigate": (handle_browser_navigate, False, None),
}
