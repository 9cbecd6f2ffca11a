"""
Content extraction handler.
"""

from __future__ import annotations

from typing import Any

from ...backends.base import CAP_EXTRACT
from ..types import ToolContext, ToolResult


def handle_browser_extract_content(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    content = ctx.require_backend().extract_content(
        args["url"],
        selector=args.get("selector"),
        wait_for=args.get("waitFor"),
    )
    return ToolResult.text(f"Extracted content:\n{content}")


CONTENT_HANDLERS: dict[str, tuple] = {
    "browser_extract_content": (handle_browser_extract_content, True, CAP_EXTRACT),
}
