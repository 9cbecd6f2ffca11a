"""Browserless adapter: full capability, every interaction is a ``/function`` call."""

from __future__ import annotations

import json
import logging
import urllib.parse
from typing import Any

from ..errors import BackendError
from ..http_client import HttpClientError, HttpResponse, http_post
from .base import CAP_EXTRACT, CAP_SCREENSHOT, CAP_SCRIPTING, Backend, Viewport
from .script import RemoteAction, click_action, evaluate_action, extract_action, fill_action

logger = logging.getLogger("mcp.remote_browser.backends.browserless")


class BrowserlessBackend(Backend):
    name = "browserless"
    capabilities = frozenset({CAP_SCREENSHOT, CAP_EXTRACT, CAP_SCRIPTING})

    def _endpoint(self, path: str) -> str:
        query = urllib.parse.urlencode({"token": self._token})
        return f"{self.config.browserless_url}/{path.lstrip('/')}?{query}"

    def _post(self, path: str, data: bytes, content_type: str, what: str) -> HttpResponse:
        try:
            resp = http_post(self._endpoint(path), self.config, data=data, content_type=content_type)
        except HttpClientError as exc:
            raise BackendError(f"{what} failed: {exc}") from exc
        if not resp.ok:
            raise BackendError(f"{what} failed", status=resp.status, body=resp.text())
        if resp.truncated:
            raise BackendError(
                f"{what} response exceeded MCP_HTTP_MAX_BYTES ({self.config.http_max_bytes} bytes)",
                status=resp.status,
            )
        return resp

    def screenshot(
        self,
        target: str | None,
        selector: str | None = None,
        viewport: Viewport | None = None,
        full_page: bool = False,
    ) -> str:
        viewport = viewport or Viewport(self.config.viewport_width, self.config.viewport_height)
        options: dict[str, Any] = {
            "viewport": viewport.to_dict(),
            "fullPage": bool(full_page),
            "type": "png",
            "encoding": "base64",
        }
        if selector:
            options["selector"] = selector
        payload: dict[str, Any] = {"options": options}
        if target:
            payload["url"] = target
        resp = self._post(
            "screenshot",
            json.dumps(payload).encode(),
            "application/json",
            "Screenshot",
        )
        return resp.text().strip()

    def run(self, action: RemoteAction) -> Any:
        """Execute a rendered action and unwrap its ``{result}`` / ``{error}`` envelope."""
        source = action.render()
        logger.debug("function payload url=%s wait_for=%s bytes=%d", bool(action.url), action.wait_for, len(source))
        resp = self._post("function", source.encode(), "application/javascript", "Execution")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise BackendError("Execution returned a malformed response", status=resp.status, body=resp.text()) from exc
        if not isinstance(payload, dict):
            raise BackendError("Execution returned a malformed response", status=resp.status, body=resp.text())

        console = payload.get("console")
        if isinstance(console, list):
            self._emit_console([str(line) for line in console])

        if payload.get("error") is not None:
            raise BackendError(f"Remote action failed: {payload['error']}")
        if "result" not in payload:
            raise BackendError("Execution returned a malformed response", status=resp.status, body=resp.text())
        return payload["result"]

    def _action_kw(self, target: str | None, wait_for: str | None) -> dict[str, Any]:
        return {"url": target, "wait_for": wait_for, "timeout_ms": self.config.action_timeout_ms}

    def execute_remote_action(self, target: str | None, code: str, wait_for: str | None = None) -> Any:
        return self.run(evaluate_action(code, **self._action_kw(target, wait_for)))

    def click(self, target: str | None, selector: str, wait_for: str | None = None) -> None:
        # Wait for the element itself when no explicit condition is given.
        self.run(click_action(selector, **self._action_kw(target, wait_for or selector)))

    def fill(self, target: str | None, selector: str, value: str) -> None:
        self.run(fill_action(selector, value, **self._action_kw(target, selector)))

    def extract_content(self, target: str, selector: str | None = None, wait_for: str | None = None) -> str:
        result = self.run(extract_action(selector, **self._action_kw(target, wait_for)))
        if result is None:
            return ""
        return result if isinstance(result, str) else json.dumps(result, ensure_ascii=False)
