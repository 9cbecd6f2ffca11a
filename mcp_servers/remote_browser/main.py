"""
MCP server exposing remote browser automation services.

This module provides the main entry point and protocol handling (JSON-RPC 2.0,
one message per line on stdio). Tool and resource semantics live in
server/dispatch.py.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .config import SESSION_MODE_REQUEST, GatewayConfig
from .errors import ResourceNotFoundError
from .server.contract import (
    DEFAULT_PROTOCOL_VERSION,
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    initialize_result,
    select_protocol,
)
from .server.dispatch import Dispatcher
from .server.redaction import redact_jsonrpc_for_dump, redact_jsonrpc_for_log
from .server.registry import create_default_registry
from .session_store import SessionStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("mcp.remote_browser")

__all__ = [
    "SUPPORTED_PROTOCOL_VERSIONS",
    "LATEST_PROTOCOL_VERSION",
    "DEFAULT_PROTOCOL_VERSION",
    "McpServer",
    "main",
]

ERROR_PARSE = -32700
ERROR_INVALID_PARAMS = -32602
ERROR_METHOD_NOT_FOUND = -32601
ERROR_RESOURCE_NOT_FOUND = -32002


def _dump_frame(direction: bytes, payload: dict[str, Any], raw_line: bytes) -> None:
    dump_path = os.environ.get("MCP_DUMP_FRAMES")
    if not dump_path:
        return
    if dump_dir := os.path.dirname(dump_path):
        os.makedirs(dump_dir, exist_ok=True)
    with open(dump_path, "ab") as fp:
        fp.write(direction)
        if os.environ.get("MCP_DUMP_FRAMES_RAW") == "1":
            fp.write(raw_line)
        else:
            safe = redact_jsonrpc_for_dump(payload)
            fp.write((json.dumps(safe, ensure_ascii=False) + "\n").encode())


def _write_message(payload: dict[str, Any]) -> None:
    """Write JSON-RPC message to stdout."""
    data = json.dumps(payload, ensure_ascii=False)
    line = (data + "\n").encode()
    _dump_frame(b"--out--\n", payload, line)
    sys.stdout.buffer.write(line)
    sys.stdout.buffer.flush()


def _read_message() -> dict[str, Any] | None:
    """Read JSON-RPC message from stdin.

    Returns ``None`` at EOF and ``{}`` for blank lines. Raises ``ValueError``
    for undecodable frames.
    """
    line = sys.stdin.buffer.readline()
    if not line:
        return None
    line = line.strip()
    if not line:
        return {}
    msg = json.loads(line.decode())
    if not isinstance(msg, dict):
        raise ValueError("JSON-RPC message must be an object")
    if os.environ.get("MCP_TRACE"):
        logger.info("recv %s", redact_jsonrpc_for_log(msg))
    _dump_frame(b"--in--\n", msg, line + b"\n")
    return msg


def _error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


class McpServer:
    """MCP Server wiring JSON-RPC methods to the dispatcher."""

    def __init__(self, config: GatewayConfig | None = None) -> None:
        self.config = config or GatewayConfig.from_env()
        self.registry = create_default_registry()
        # Built eagerly so a missing token is reported at startup, not on first use.
        self.dispatcher = Dispatcher.create(self.config, SessionStore(), registry=self.registry)
        logger.info(
            "remote browser gateway ready service=%s session_mode=%s backend=%s",
            self.config.service,
            self.config.session_mode,
            self.dispatcher.backend.name if self.dispatcher.backend else None,
        )

    def _request_dispatcher(self) -> Dispatcher:
        """Dispatcher for one request: shared in process mode, fresh in request mode."""
        if self.config.session_mode == SESSION_MODE_REQUEST:
            return Dispatcher.create(self.config, SessionStore(), registry=self.registry)
        return self.dispatcher

    def handle_initialize(self, request_id: Any, params: dict[str, Any] | None = None) -> None:
        """Handle initialize request."""
        requested = (params or {}).get("protocolVersion") if isinstance(params, dict) else None
        protocol = select_protocol(requested)
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": initialize_result(protocol)})

    def handle_list_tools(self, request_id: Any) -> None:
        """Handle tools/list request."""
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {"tools": self.dispatcher.list_tools()},
            }
        )

    def handle_call_tool(self, request_id: Any, name: str, arguments: Any) -> None:
        """Handle tools/call request. Tool failures are results, never JSON-RPC errors."""
        result = self._request_dispatcher().call_tool(name, arguments)
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": result.to_dict()})

    def handle_list_resources(self, request_id: Any) -> None:
        """Handle resources/list request."""
        resources = self._request_dispatcher().list_resources()
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": {"resources": resources}})

    def handle_read_resource(self, request_id: Any, uri: Any) -> None:
        """Handle resources/read request."""
        if not isinstance(uri, str) or not uri:
            _write_message(_error(request_id, ERROR_INVALID_PARAMS, "Missing resource uri"))
            return
        try:
            result = self._request_dispatcher().read_resource(uri)
        except ResourceNotFoundError as exc:
            logger.info("resource_not_found uri=%s", uri)
            _write_message(_error(request_id, ERROR_RESOURCE_NOT_FOUND, str(exc)))
            return
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": result})

    def dispatch(self, message: dict[str, Any]) -> None:
        """Dispatch incoming JSON-RPC message to appropriate handler."""
        if not message:
            return

        method = message.get("method")
        request_id = message.get("id")
        params = message.get("params") or {}
        if not isinstance(params, dict):
            params = {}

        if method == "initialize":
            self.handle_initialize(request_id, params)
        elif isinstance(method, str) and method.startswith("notifications/"):
            return
        elif method == "tools/list":
            self.handle_list_tools(request_id)
        elif method == "tools/call":
            name = params.get("name")
            self.handle_call_tool(request_id, name if isinstance(name, str) else "", params.get("arguments"))
        elif method == "resources/list":
            self.handle_list_resources(request_id)
        elif method == "resources/read":
            self.handle_read_resource(request_id, params.get("uri"))
        elif method == "ping":
            _write_message({"jsonrpc": "2.0", "id": request_id, "result": {}})
        else:
            _write_message(_error(request_id, ERROR_METHOD_NOT_FOUND, f"Method {method} not found"))


def main() -> None:
    """Main entry point for MCP server."""
    server = McpServer()
    while True:
        try:
            message = _read_message()
        except ValueError as exc:
            logger.info("parse_error %s", exc)
            _write_message(_error(None, ERROR_PARSE, f"Parse error: {exc}"))
            continue
        if message is None:
            break
        server.dispatch(message)


if __name__ == "__main__":
    main()
