from __future__ import annotations

import os
from dataclasses import dataclass, field

SERVICE_BROWSERLESS = "browserless"
SERVICE_SCRAPINGBEE = "scrapingbee"

SESSION_MODE_PROCESS = "process"
SESSION_MODE_REQUEST = "request"

DEFAULT_BROWSERLESS_URL = "https://production-sfo.browserless.io"
DEFAULT_SCRAPINGBEE_URL = "https://app.scrapingbee.com/api/v1"

DEFAULT_VIEWPORT_WIDTH = 1280
DEFAULT_VIEWPORT_HEIGHT = 720


def _env_str(name: str) -> str | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


@dataclass
class GatewayConfig:
    service: str = SERVICE_BROWSERLESS
    browserless_token: str | None = None
    scrapingbee_token: str | None = None
    browserless_url: str = DEFAULT_BROWSERLESS_URL
    scrapingbee_url: str = DEFAULT_SCRAPINGBEE_URL
    allow_hosts: list[str] = field(default_factory=list)
    http_timeout: float = 60.0
    http_max_bytes: int = 20_000_000
    action_timeout_ms: int = 30_000
    session_mode: str = SESSION_MODE_PROCESS
    viewport_width: int = DEFAULT_VIEWPORT_WIDTH
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT

    @staticmethod
    def normalize_service(raw: str | None) -> str:
        service = (raw or "").strip().lower()
        if service in {"", "browserless", "browserless.io"}:
            return SERVICE_BROWSERLESS
        if service in {"scrapingbee", "scraping-bee", "scraping_bee"}:
            return SERVICE_SCRAPINGBEE
        # Unknown names are kept so the selector can report them verbatim.
        return service

    @staticmethod
    def normalize_session_mode(raw: str | None) -> str:
        mode = (raw or "").strip().lower()
        if mode in {"request", "stateless", "per-request"}:
            return SESSION_MODE_REQUEST
        return SESSION_MODE_PROCESS

    @classmethod
    def from_env(cls) -> GatewayConfig:
        allow_raw = os.environ.get("MCP_ALLOW_HOSTS", "")
        allow_hosts = [host.strip().lower() for host in allow_raw.split(",") if host.strip() and host.strip() != "*"]
        return cls(
            service=cls.normalize_service(os.environ.get("BROWSER_SERVICE")),
            browserless_token=_env_str("BROWSERLESS_TOKEN"),
            scrapingbee_token=_env_str("SCRAPINGBEE_TOKEN"),
            browserless_url=(_env_str("MCP_BROWSERLESS_URL") or DEFAULT_BROWSERLESS_URL).rstrip("/"),
            scrapingbee_url=(_env_str("MCP_SCRAPINGBEE_URL") or DEFAULT_SCRAPINGBEE_URL).rstrip("/"),
            allow_hosts=allow_hosts,
            http_timeout=float(os.environ.get("MCP_HTTP_TIMEOUT", "60")),
            http_max_bytes=int(os.environ.get("MCP_HTTP_MAX_BYTES", "20000000")),
            action_timeout_ms=int(os.environ.get("MCP_ACTION_TIMEOUT_MS", "30000")),
            session_mode=cls.normalize_session_mode(os.environ.get("MCP_SESSION_MODE")),
        )

    def token_for(self, service: str) -> str | None:
        if service == SERVICE_BROWSERLESS:
            return self.browserless_token
        if service == SERVICE_SCRAPINGBEE:
            return self.scrapingbee_token
        return None

    def is_host_allowed(self, host: str) -> bool:
        host = (host or "").strip().lower().rstrip(".")
        if not self.allow_hosts:
            return True
        for raw_allowed in self.allow_hosts:
            allowed = (raw_allowed or "").strip().lower().lstrip(".").rstrip(".")
            if not allowed:
                continue
            if host == allowed:
                return True
            if host.endswith("." + allowed):
                return True
        return False
