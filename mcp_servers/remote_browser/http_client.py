from __future__ import annotations

import json
import logging
import ssl
import urllib.parse
from dataclasses import dataclass, field
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.request import HTTPRedirectHandler, HTTPSHandler, Request, build_opener

from .config import GatewayConfig
from .server.redaction import redact_url

logger = logging.getLogger("mcp.remote_browser.http")

USER_AGENT = "mcp-remote-browser/1.0"


class HttpClientError(Exception):
    pass


@dataclass
class HttpResponse:
    status: int
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self) -> str:
        return self.body.decode(errors="replace")

    def json(self) -> Any:
        return json.loads(self.body.decode())


class _SchemeRedirectHandler(HTTPRedirectHandler):
    def redirect_request(self, req, fp, code, msg, headers, newurl):  # noqa: ANN001
        # urllib may pass relative URLs here; normalize against the previous URL.
        absolute = urllib.parse.urljoin(req.full_url, str(newurl))
        parsed = urllib.parse.urlparse(absolute)
        if parsed.scheme not in ("http", "https"):
            raise HttpClientError("Only http/https are supported (redirect)")
        return super().redirect_request(req, fp, code, msg, headers, absolute)


def _read_capped(resp: Any, max_bytes: int) -> tuple[bytes, bool]:
    body = resp.read(max_bytes + 1)
    if len(body) > max_bytes:
        return body[:max_bytes], True
    return body, False


def http_request(
    method: str,
    url: str,
    config: GatewayConfig,
    *,
    data: bytes | None = None,
    headers: dict[str, str] | None = None,
) -> HttpResponse:
    """Issue one HTTP request to a provider endpoint.

    Non-2xx statuses are returned, not raised: callers decide how to surface
    them. Only transport failures raise ``HttpClientError``. There is no retry.
    """
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise HttpClientError("Only http/https are supported")

    req = Request(url, data=data, method=method.upper(), headers={"User-Agent": USER_AGENT, **(headers or {})})
    ctx = ssl.create_default_context()
    opener = build_opener(_SchemeRedirectHandler(), HTTPSHandler(context=ctx))
    logger.debug("http %s %s", method.upper(), redact_url(url))
    try:
        with opener.open(req, timeout=config.http_timeout) as resp:
            body, truncated = _read_capped(resp, config.http_max_bytes)
            status = resp.status
            resp_headers = dict(resp.headers)
    except HTTPError as exc:
        body, truncated = _read_capped(exc, config.http_max_bytes)
        status = exc.code
        resp_headers = dict(exc.headers or {})
    except (TimeoutError, URLError, OSError) as exc:
        raise HttpClientError(str(getattr(exc, "reason", exc))) from exc

    logger.info("http %s %s -> %s (%d bytes)", method.upper(), redact_url(url), status, len(body))
    return HttpResponse(status=status, body=body, headers=resp_headers, truncated=truncated)


def http_get(url: str, config: GatewayConfig, *, headers: dict[str, str] | None = None) -> HttpResponse:
    return http_request("GET", url, config, headers=headers)


def http_post(
    url: str,
    config: GatewayConfig,
    *,
    data: bytes,
    content_type: str,
    headers: dict[str, str] | None = None,
) -> HttpResponse:
    return http_request("POST", url, config, data=data, headers={"Content-Type": content_type, **(headers or {})})
