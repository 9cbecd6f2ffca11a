"""
Tests for the remote browser MCP server.

Tests cover:
- Configuration parsing
- HTTP client
- Server initialization, tool listing and tool calls
- Resources and session modes
- Protocol handling
"""

from __future__ import annotations

import base64
import io
import json
import socket
from contextlib import closing
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Thread

import pytest
from PIL import Image

from mcp_servers.remote_browser import main as mcp_server
from mcp_servers.remote_browser.config import (
    DEFAULT_BROWSERLESS_URL,
    SERVICE_BROWSERLESS,
    SERVICE_SCRAPINGBEE,
    SESSION_MODE_PROCESS,
    SESSION_MODE_REQUEST,
    GatewayConfig,
)
from mcp_servers.remote_browser.http_client import HttpClientError, http_get, http_post

_ENV_VARS = (
    "BROWSER_SERVICE",
    "BROWSERLESS_TOKEN",
    "SCRAPINGBEE_TOKEN",
    "MCP_BROWSERLESS_URL",
    "MCP_SCRAPINGBEE_URL",
    "MCP_ALLOW_HOSTS",
    "MCP_HTTP_TIMEOUT",
    "MCP_HTTP_MAX_BYTES",
    "MCP_ACTION_TIMEOUT_MS",
    "MCP_SESSION_MODE",
    "MCP_TRACE",
    "MCP_DUMP_FRAMES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _png_b64(width: int = 4, height: int = 3) -> str:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), "blue").save(buf, format="PNG")
    return base64.b64encode(buf.getvalue()).decode()


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG TESTS
# ═══════════════════════════════════════════════════════════════════════════════


def test_config_defaults() -> None:
    cfg = GatewayConfig.from_env()
    assert cfg.service == SERVICE_BROWSERLESS
    assert cfg.browserless_token is None
    assert cfg.browserless_url == DEFAULT_BROWSERLESS_URL
    assert cfg.session_mode == SESSION_MODE_PROCESS
    assert cfg.http_timeout == 60.0
    assert cfg.action_timeout_ms == 30_000
    assert cfg.allow_hosts == []


def test_config_parses_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BROWSER_SERVICE", " ScrapingBee ")
    monkeypatch.setenv("SCRAPINGBEE_TOKEN", "sb")
    monkeypatch.setenv("BROWSERLESS_TOKEN", "   ")
    monkeypatch.setenv("MCP_BROWSERLESS_URL", "http://localhost:3000/")
    monkeypatch.setenv("MCP_ALLOW_HOSTS", "example.com, github.com,*")
    monkeypatch.setenv("MCP_HTTP_TIMEOUT", "5")
    monkeypatch.setenv("MCP_ACTION_TIMEOUT_MS", "1500")
    monkeypatch.setenv("MCP_SESSION_MODE", "request")
    cfg = GatewayConfig.from_env()
    assert cfg.service == SERVICE_SCRAPINGBEE
    assert cfg.scrapingbee_token == "sb"
    assert cfg.browserless_token is None
    assert cfg.browserless_url == "http://localhost:3000"
    assert cfg.allow_hosts == ["example.com", "github.com"]
    assert cfg.http_timeout == 5.0
    assert cfg.action_timeout_ms == 1500
    assert cfg.session_mode == SESSION_MODE_REQUEST
    assert cfg.token_for(SERVICE_SCRAPINGBEE) == "sb"
    assert cfg.token_for("other") is None


def test_config_host_allowlist() -> None:
    cfg = GatewayConfig(allow_hosts=["github.com"])
    assert cfg.is_host_allowed("github.com")
    assert cfg.is_host_allowed("sub.github.com")
    assert not cfg.is_host_allowed("evilgithub.com")
    assert GatewayConfig().is_host_allowed("anything.example")


def test_unknown_service_name_is_kept_verbatim() -> None:
    assert GatewayConfig.normalize_service("Selenium") == "selenium"
    assert GatewayConfig.normalize_service(None) == SERVICE_BROWSERLESS


# ═══════════════════════════════════════════════════════════════════════════════
# HTTP CLIENT TESTS
# ═══════════════════════════════════════════════════════════════════════════════


def _free_port() -> int:
    with closing(socket.socket(socket.AF_INET, socket.SOCK_STREAM)) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def _serve(handler: type[BaseHTTPRequestHandler]) -> tuple[str, Thread, HTTPServer]:
    port = _free_port()
    server = HTTPServer(("127.0.0.1", port), handler)
    thread = Thread(target=server.serve_forever, daemon=True)
    thread.start()
    return f"http://127.0.0.1:{port}", thread, server


def _start_test_server(status: int = 200, body: bytes = b"hello") -> tuple[str, Thread, HTTPServer]:
    class Handler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            self.send_response(status)
            self.send_header("Content-Type", "text/plain; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def do_POST(self) -> None:  # noqa: N802
            length = int(self.headers.get("Content-Length") or 0)
            echoed = self.rfile.read(length)
            self.send_response(status)
            self.send_header("Content-Type", self.headers.get("Content-Type") or "application/octet-stream")
            self.send_header("Content-Length", str(len(echoed)))
            self.end_headers()
            self.wfile.write(echoed)

        def log_message(self, format: str, *args: object) -> None:  # noqa: A003
            return

    return _serve(Handler)


def test_http_get_returns_body_and_headers() -> None:
    url, thread, srv = _start_test_server()
    try:
        resp = http_get(url + "/", GatewayConfig(http_timeout=5))
        assert resp.ok
        assert resp.status == 200
        assert resp.text() == "hello"
        assert resp.headers["Content-Type"].startswith("text/plain")
        assert not resp.truncated
    finally:
        srv.shutdown()
        thread.join(timeout=1)


def test_http_get_returns_non_2xx_instead_of_raising() -> None:
    url, thread, srv = _start_test_server(status=503, body=b"busy")
    try:
        resp = http_get(url + "/", GatewayConfig(http_timeout=5))
        assert resp.status == 503
        assert not resp.ok
        assert resp.text() == "busy"
    finally:
        srv.shutdown()
        thread.join(timeout=1)


def test_http_get_caps_body() -> None:
    url, thread, srv = _start_test_server(body=b"0123456789")
    try:
        resp = http_get(url + "/", GatewayConfig(http_timeout=5, http_max_bytes=4))
        assert resp.body == b"0123"
        assert resp.truncated
    finally:
        srv.shutdown()
        thread.join(timeout=1)


def test_http_post_sends_content_type() -> None:
    url, thread, srv = _start_test_server()
    try:
        resp = http_post(url + "/", GatewayConfig(http_timeout=5), data=b'{"a": 1}', content_type="application/json")
        assert resp.json() == {"a": 1}
        assert resp.headers["Content-Type"] == "application/json"
    finally:
        srv.shutdown()
        thread.join(timeout=1)


def test_http_get_blocks_scheme() -> None:
    with pytest.raises(HttpClientError):
        http_get("ftp://example.com", GatewayConfig())


def test_http_get_blocks_redirect_to_other_scheme() -> None:
    class RedirectHandler(BaseHTTPRequestHandler):
        def do_GET(self) -> None:  # noqa: N802
            self.send_response(302)
            self.send_header("Location", "ftp://example.com/file")
            self.end_headers()

        def log_message(self, format: str, *args: object) -> None:  # noqa: A003
            return

    url, thread, srv = _serve(RedirectHandler)
    try:
        with pytest.raises(HttpClientError) as exc:
            http_get(url + "/", GatewayConfig(http_timeout=5))
        assert "redirect" in str(exc.value).lower()
    finally:
        srv.shutdown()
        thread.join(timeout=1)


def test_http_get_connection_refused_raises() -> None:
    with pytest.raises(HttpClientError):
        http_get(f"http://127.0.0.1:{_free_port()}/", GatewayConfig(http_timeout=2))


# ═══════════════════════════════════════════════════════════════════════════════
# SERVER TESTS
# ═══════════════════════════════════════════════════════════════════════════════


def _start_fake_browserless(image: str) -> tuple[str, Thread, HTTPServer, list[str]]:
    paths: list[str] = []

    class Handler(BaseHTTPRequestHandler):
        def do_POST(self) -> None:  # noqa: N802
            length = int(self.headers.get("Content-Length") or 0)
            self.rfile.read(length)
            paths.append(self.path)
            if self.path.startswith("/screenshot"):
                body = image.encode()
            else:
                body = json.dumps({"result": "Example Domain", "console": ["log: loaded"]}).encode()
            self.send_response(200)
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, format: str, *args: object) -> None:  # noqa: A003
            return

    url, thread, srv = _serve(Handler)
    return url, thread, srv, paths


@pytest.fixture()
def fake_browserless():
    url, thread, srv, paths = _start_fake_browserless(_png_b64())
    try:
        yield url, paths
    finally:
        srv.shutdown()
        thread.join(timeout=1)


def _capture(monkeypatch: pytest.MonkeyPatch) -> list[dict]:
    sent: list[dict] = []
    monkeypatch.setattr(mcp_server, "_write_message", lambda payload: sent.append(payload))
    return sent


def _call(srv: mcp_server.McpServer, request_id: int, name: str, arguments: dict | None = None) -> None:
    srv.dispatch(
        {"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": {"name": name, "arguments": arguments}}
    )


def test_server_initialize(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t"))
    srv.handle_initialize(request_id="init")
    assert sent[0]["id"] == "init"
    assert sent[0]["result"]["serverInfo"]["name"] == "remote-browser"
    assert sent[0]["result"]["protocolVersion"] == mcp_server.LATEST_PROTOCOL_VERSION

    srv.dispatch({"jsonrpc": "2.0", "id": 2, "method": "initialize", "params": {"protocolVersion": "2024-11-05"}})
    assert sent[1]["result"]["protocolVersion"] == "2024-11-05"


def test_server_list_tools_output(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t"))
    srv.dispatch({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
    names = [t["name"] for t in sent[0]["result"]["tools"]]
    assert names == [
        "browser_navigate",
        "browser_screenshot",
        "browser_click",
        "browser_fill",
        "browser_evaluate",
        "browser_extract_content",
    ]
    for tool in sent[0]["result"]["tools"]:
        assert tool["inputSchema"]["type"] == "object"
        assert tool["description"]


def test_server_unknown_method_error(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t"))
    srv.dispatch({"jsonrpc": "2.0", "id": 9, "method": "prompts/list"})
    assert sent[0]["error"]["code"] == -32601


def test_server_ignores_notifications_and_answers_ping(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t"))
    srv.dispatch({"jsonrpc": "2.0", "method": "notifications/initialized"})
    srv.dispatch({})
    assert sent == []
    srv.dispatch({"jsonrpc": "2.0", "id": 5, "method": "ping"})
    assert sent == [{"jsonrpc": "2.0", "id": 5, "result": {}}]


def test_server_call_tool_failure_is_result_not_protocol_error(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig())  # no token configured
    _call(srv, 1, "browser_extract_content", {"url": "https://example.com"})
    result = sent[0]["result"]
    assert "error" not in sent[0]
    assert result["isError"] is True
    assert "BROWSERLESS_TOKEN" in result["content"][0]["text"]
    assert result["content"][0]["text"].startswith("Error: ")


def test_server_navigate_works_without_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig())
    _call(srv, 1, "browser_navigate", {"url": "https://example.com"})
    assert sent[0]["result"] == {
        "content": [{"type": "text", "text": "Ready to navigate to https://example.com"}],
        "isError": False,
    }


def test_server_screenshot_then_read_resource(monkeypatch: pytest.MonkeyPatch, fake_browserless) -> None:
    url, paths = fake_browserless
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t", browserless_url=url, http_timeout=5))

    _call(srv, 1, "browser_navigate", {"url": "https://example.com"})
    _call(srv, 2, "browser_screenshot", {"name": "home"})
    shot = sent[1]["result"]
    assert shot["isError"] is False
    assert shot["content"][0]["text"] == "Screenshot 'home' captured (4x3, screenshot://home)"
    assert shot["content"][1]["type"] == "image"
    assert shot["content"][1]["mimeType"] == "image/png"
    assert paths[0].startswith("/screenshot?token=t")

    srv.dispatch({"jsonrpc": "2.0", "id": 3, "method": "resources/list"})
    uris = [r["uri"] for r in sent[2]["result"]["resources"]]
    assert uris == ["console://logs", "screenshot://home"]

    srv.dispatch({"jsonrpc": "2.0", "id": 4, "method": "resources/read", "params": {"uri": "screenshot://home"}})
    content = sent[3]["result"]["contents"][0]
    assert content["blob"] == shot["content"][1]["data"]
    assert content["mimeType"] == "image/png"


def test_server_console_lines_become_log_resource(monkeypatch: pytest.MonkeyPatch, fake_browserless) -> None:
    url, _ = fake_browserless
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t", browserless_url=url, http_timeout=5))

    _call(srv, 1, "browser_extract_content", {"url": "https://example.com", "selector": "h1"})
    assert sent[0]["result"]["content"][0]["text"] == "Extracted content:\nExample Domain"

    srv.dispatch({"jsonrpc": "2.0", "id": 2, "method": "resources/read", "params": {"uri": "console://logs"}})
    assert sent[1]["result"]["contents"][0]["text"] == "log: loaded"


def test_server_read_missing_resource(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    srv = mcp_server.McpServer(GatewayConfig(browserless_token="t"))
    srv.dispatch({"jsonrpc": "2.0", "id": 1, "method": "resources/read", "params": {"uri": "screenshot://nope"}})
    assert sent[0]["error"]["code"] == -32002
    assert "screenshot://nope" in sent[0]["error"]["message"]

    srv.dispatch({"jsonrpc": "2.0", "id": 2, "method": "resources/read", "params": {}})
    assert sent[1]["error"]["code"] == -32602


def test_server_request_mode_does_not_carry_state(monkeypatch: pytest.MonkeyPatch, fake_browserless) -> None:
    url, _ = fake_browserless
    sent = _capture(monkeypatch)
    cfg = GatewayConfig(
        service="scrapingbee",
        scrapingbee_token="k",
        scrapingbee_url=url,
        session_mode=SESSION_MODE_REQUEST,
        http_timeout=5,
    )
    srv = mcp_server.McpServer(cfg)

    _call(srv, 1, "browser_navigate", {"url": "https://example.com"})
    # The navigated URL is gone by the next request, so scrapingbee has no target.
    _call(srv, 2, "browser_screenshot", {"name": "home"})
    assert sent[1]["result"]["isError"] is True
    assert "url" in sent[1]["result"]["content"][0]["text"]

    srv.dispatch({"jsonrpc": "2.0", "id": 3, "method": "resources/list"})
    assert [r["uri"] for r in sent[2]["result"]["resources"]] == ["console://logs"]


def test_main_loop_answers_parse_errors_and_stops_at_eof(monkeypatch: pytest.MonkeyPatch) -> None:
    sent = _capture(monkeypatch)
    frames = b"\n".join(
        [
            b'{"jsonrpc": "2.0", "id": 1, "method": "ping"}',
            b"{not json",
            b"",
            b"[1, 2]",
            b'{"jsonrpc": "2.0", "id": 2, "method": "tools/list"}',
        ]
    )
    monkeypatch.setattr(mcp_server.sys, "stdin", io.TextIOWrapper(io.BytesIO(frames + b"\n")))
    mcp_server.main()

    assert sent[0] == {"jsonrpc": "2.0", "id": 1, "result": {}}
    assert sent[1]["error"]["code"] == -32700
    assert sent[1]["id"] is None
    assert sent[2]["error"]["code"] == -32700
    assert len(sent[3]["result"]["tools"]) == 6
    assert len(sent) == 4


def test_dump_frames_redacts_images(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    dump = tmp_path / "frames" / "dump.log"
    monkeypatch.setenv("MCP_DUMP_FRAMES", str(dump))
    written = io.BytesIO()

    class _Stdout:
        buffer = written

    monkeypatch.setattr(mcp_server.sys, "stdout", _Stdout())
    image = _png_b64()
    mcp_server._write_message(
        {"jsonrpc": "2.0", "id": 1, "result": {"content": [{"type": "image", "data": image, "mimeType": "image/png"}]}}
    )
    assert image in written.getvalue().decode()
    dumped = dump.read_text()
    assert dumped.startswith("--out--\n")
    assert image not in dumped
    assert "omitted image" in dumped
