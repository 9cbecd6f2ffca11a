"""
Scripted interaction handlers (click, fill, evaluate).

All three are gated on the ``scripting`` capability by the registry, so they
never reach a backend that cannot run remote actions.
"""

from __future__ import annotations

from typing import Any

from ...backends.base import CAP_SCRIPTING
from ..types import ToolContext, ToolResult


def handle_browser_click(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    ctx.require_backend().click(ctx.resolve_target(args), args["selector"], wait_for=args.get("waitFor"))
    return ToolResult.text(f"Clicked: {args['selector']}")


def handle_browser_fill(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    ctx.require_backend().fill(ctx.resolve_target(args), args["selector"], args["value"])
    return ToolResult.text(f"Filled {args['selector']} with: {args['value']}")


def handle_browser_evaluate(ctx: ToolContext, args: dict[str, Any]) -> ToolResult:
    result = ctx.require_backend().evaluate(ctx.resolve_target(args), args["script"], wait_for=args.get("waitFor"))
    return ToolResult.json("Execution result", result)


INTERACTION_HANDLERS: dict[str, tuple] = {
    "browser_click": (handle_browser_click, True, CAP_SCRIPTING),
    "browser_fill": (handle_browser_fill, True, CAP_SCRIPTING),
    "browser_evaluate": (handle_browser_evaluate, True, CAP_SCRIPTING),
}
