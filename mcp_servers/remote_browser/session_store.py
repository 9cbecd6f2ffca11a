"""In-memory session state exposed as MCP resources.

One ``SessionStore`` lives for the whole process (``MCP_SESSION_MODE=process``)
or for a single request (``MCP_SESSION_MODE=request``). It is constructed by the
server and injected into the dispatcher; nothing here is module-global.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any

from .errors import ResourceNotFoundError

LOGS_URI = "console://logs"
SCREENSHOT_SCHEME = "screenshot://"


@dataclass(frozen=True, slots=True)
class Screenshot:
    name: str
    data: str  # base64
    mime_type: str = "image/png"
    width: int | None = None
    height: int | None = None


@dataclass(frozen=True, slots=True)
class Resource:
    uri: str
    mime_type: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"uri": self.uri, "mimeType": self.mime_type, "name": self.name}


def screenshot_uri(name: str) -> str:
    return f"{SCREENSHOT_SCHEME}{name}"


class SessionStore:
    """
    Current navigation target, named screenshots and the console log buffer.

    Each state family has its own lock so concurrent tool calls never lose
    updates; readers copy under the same lock. Nothing expires.
    """

    def __init__(self) -> None:
        self._url_lock = threading.Lock()
        self._screenshots_lock = threading.Lock()
        self._logs_lock = threading.Lock()
        self._current_url: str | None = None
        self._screenshots: dict[str, Screenshot] = {}
        self._logs: list[str] = []

    # ── navigation target ──────────────────────────────────────────────────

    @property
    def current_url(self) -> str | None:
        with self._url_lock:
            return self._current_url

    def set_current_url(self, url: str | None) -> None:
        with self._url_lock:
            self._current_url = url

    # ── screenshots ────────────────────────────────────────────────────────

    def store_screenshot(
        self,
        name: str,
        data: str,
        mime_type: str = "image/png",
        width: int | None = None,
        height: int | None = None,
    ) -> Screenshot:
        """Store (or overwrite) a screenshot. Last write wins."""
        shot = Screenshot(name=name, data=data, mime_type=mime_type, width=width, height=height)
        with self._screenshots_lock:
            self._screenshots[name] = shot
        return shot

    def get_screenshot(self, name: str) -> Screenshot | None:
        with self._screenshots_lock:
            return self._screenshots.get(name)

    def screenshot_names(self) -> list[str]:
        with self._screenshots_lock:
            return list(self._screenshots)

    # ── console log ────────────────────────────────────────────────────────

    def append_log(self, line: str) -> None:
        with self._logs_lock:
            self._logs.append(str(line))

    def logs(self) -> list[str]:
        with self._logs_lock:
            return list(self._logs)

    # ── resources ──────────────────────────────────────────────────────────

    def list_resources(self) -> list[Resource]:
        resources = [Resource(uri=LOGS_URI, mime_type="text/plain", name="Browser console logs")]
        with self._screenshots_lock:
            shots = list(self._screenshots.values())
        resources.extend(
            Resource(uri=screenshot_uri(shot.name), mime_type=shot.mime_type, name=f"Screenshot: {shot.name}")
            for shot in shots
        )
        return resources

    def read_resource(self, uri: str) -> dict[str, Any]:
        """Return an MCP resource content item (``text`` or ``blob``)."""
        if uri == LOGS_URI:
            return {"uri": uri, "mimeType": "text/plain", "text": "\n".join(self.logs())}
        if uri.startswith(SCREENSHOT_SCHEME):
            shot = self.get_screenshot(uri[len(SCREENSHOT_SCHEME) :])
            if shot is not None:
                return {"uri": uri, "mimeType": shot.mime_type, "blob": shot.data}
        raise ResourceNotFoundError(uri)
