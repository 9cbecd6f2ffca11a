"""
Screenshot tool handler.
"""

from __future__ import annotations

from typing import Any

from ...backends.base import CAP_SCREENSHOT, Viewport
from ...imaging import inspect_image
from ...session_store import screenshot_uri
from ..types import ToolContext, ToolResult


def handle_browser_screenshot(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    backend = ctx.require_backend()
    name = args["name"]
    viewport = Viewport(
        width=int(args.get("width") or ctx.config.viewport_width),
        height=int(args.get("height") or ctx.config.viewport_height),
    )
    data = backend.screenshot(
        ctx.resolve_target(args),
        selector=args.get("selector"),
        viewport=viewport,
        full_page=bool(args.get("fullPage", False)),
    )
    info = inspect_image(data)
    ctx.store.store_screenshot(name, data, mime_type=info.mime_type, width=info.width, height=info.height)
    return ToolResult.with_image(
        f"Screenshot '{name}' captured ({info.width}x{info.height}, {screenshot_uri(name)})",
        data,
        mime_type=info.mime_type,
    )


CAPTURE_HANDLERS: dict[str, tuple] = {
    "browser_screenshot": (handle_browser_screenshot, True, CAP_SCREENSHOT),
}
