"""
Protocol-independent dispatcher.

One ``call_tool`` walks Received -> Validated -> BackendSelected -> Executing ->
Completed. Any failure on the way becomes an ``isError`` result; nothing is
raised to the transport.
"""

from __future__ import annotations

import logging
from typing import Any

from ..backends.base import Backend
from ..backends.selector import select_backend
from ..config import GatewayConfig
from ..errors import ConfigurationError, GatewayError, InvalidArgumentError
from ..session_store import SessionStore
from .contract import tools_list
from .definitions import get_tool_definition
from .redaction import redact_tool_arguments
from .registry import ToolRegistry, create_default_registry
from .types import ToolContext, ToolResult
from .validation import check_targets, validate_arguments

logger = logging.getLogger("mcp.remote_browser.dispatch")


class Dispatcher:
    """Routes list/call/resource operations to the registry, store and backend."""

    def __init__(
        self,
        config: GatewayConfig,
        store: SessionStore,
        *,
        backend: Backend | None = None,
        backend_error: ConfigurationError | None = None,
        registry: ToolRegistry | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.backend = backend
        self.backend_error = backend_error
        self.registry = registry or create_default_registry()

    @classmethod
    def create(cls, config: GatewayConfig, store: SessionStore, registry: ToolRegistry | None = None) -> Dispatcher:
        """Select the backend for this request window and bind it to ``store``.

        A misconfiguration is reported here, once, and kept: every tool call that
        needs a backend answers with it instead of re-reading the environment.
        """
        try:
            backend = select_backend(config, console_sink=store.append_log)
            error = None
        except ConfigurationError as exc:
            logger.error("backend_config_error: %s", exc)
            backend, error = None, exc
        return cls(config, store, backend=backend, backend_error=error, registry=registry)

    # ── tools ──────────────────────────────────────────────────────────────

    def list_tools(self) -> list[dict[str, Any]]:
        return tools_list()

    def _log_call(self, name: str, arguments: Any) -> None:
        safe_args = redact_tool_arguments(name, arguments) if isinstance(arguments, dict) else arguments
        logger.info("tool=%s args=%s", name, safe_args)

    def _selected_backend(self) -> Backend:
        if self.backend is not None:
            return self.backend
        raise self.backend_error or ConfigurationError("Browser service not configured properly")

    def call_tool(self, name: str, arguments: Any) -> ToolResult:
        self._log_call(name, arguments)

        if not name:
            return ToolResult.error("Missing tool name")
        tool = get_tool_definition(name)
        spec = self.registry.get(name)
        if tool is None or spec is None:
            return ToolResult.error(f"Unknown tool: {name}")

        try:
            args = validate_arguments(tool, arguments)
            check_targets(args, self.config)
            ctx = ToolContext(config=self.config, store=self.store)
            if spec.requires_backend:
                ctx.backend = self._selected_backend()
            result = self.registry.dispatch(name, ctx, args)
        except InvalidArgumentError as exc:
            logger.info("tool_rejected tool=%s field=%s reason=%s", name, exc.field, exc)
            return ToolResult.error(str(exc))
        except GatewayError as exc:
            logger.info("tool_error tool=%s type=%s reason=%s", name, type(exc).__name__, exc)
            return ToolResult.error(str(exc))
        except Exception as exc:
            logger.exception("tool_call_failed tool=%s", name)
            return ToolResult.error(str(exc) or type(exc).__name__)
        return result

    # ── resources ──────────────────────────────────────────────────────────

    def list_resources(self) -> list[dict[str, Any]]:
        return [r.to_dict() for r in self.store.list_resources()]

    def read_resource(self, uri: str) -> dict[str, Any]:
        """Return ``{contents: [...]}``; raises ``ResourceNotFoundError``."""
        return {"contents": [self.store.read_resource(uri)]}
