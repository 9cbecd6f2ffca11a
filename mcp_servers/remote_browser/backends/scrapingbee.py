"""ScrapingBee adapter: screenshots and extraction only, no scripting."""

from __future__ import annotations

import json
import urllib.parse
from typing import Any

from ..errors import BackendError, InvalidArgumentError
from ..http_client import HttpClientError, HttpResponse, http_get
from ..imaging import encode_image
from .base import CAP_EXTRACT, CAP_SCREENSHOT, Backend, Viewport


class ScrapingBeeBackend(Backend):
    name = "scrapingbee"
    capabilities = frozenset({CAP_SCREENSHOT, CAP_EXTRACT})

    def _get(self, params: dict[str, Any], what: str) -> HttpResponse:
        query = urllib.parse.urlencode({"api_key": self._token, **params})
        try:
            resp = http_get(f"{self.config.scrapingbee_url}?{query}", self.config)
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
        if not target:
            raise InvalidArgumentError(
                "scrapingbee needs a url to screenshot (pass url or call browser_navigate first)",
                field="url",
            )
        viewport = viewport or Viewport(self.config.viewport_width, self.config.viewport_height)
        params: dict[str, Any] = {
            "url": target,
            "screenshot": "true",
            "window_width": str(viewport.width),
            "window_height": str(viewport.height),
        }
        if full_page:
            params["screenshot_full_page"] = "true"
        if selector:
            params["screenshot_selector"] = selector
        resp = self._get(params, "Screenshot")
        return encode_image(resp.body)

    def extract_content(self, target: str, selector: str | None = None, wait_for: str | None = None) -> str:
        params: dict[str, Any] = {
            "url": target,
            "extract_rules": json.dumps({"content": selector or "body"}),
        }
        if wait_for:
            params["wait_for"] = wait_for
        resp = self._get(params, "Content extraction")
        try:
            payload = resp.json()
        except ValueError as exc:
            raise BackendError("Content extraction returned a malformed response", status=resp.status, body=resp.text()) from exc
        if not isinstance(payload, dict):
            raise BackendError("Content extraction returned a malformed response", status=resp.status, body=resp.text())
        content = payload.get("content")
        if content is None:
            return ""
        return content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)
