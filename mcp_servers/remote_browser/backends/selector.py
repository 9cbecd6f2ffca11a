from __future__ import annotations

import logging

from ..config import SERVICE_BROWSERLESS, SERVICE_SCRAPINGBEE, GatewayConfig
from ..errors import ConfigurationError
from .base import Backend, ConsoleSink
from .browserless import BrowserlessBackend
from .scrapingbee import ScrapingBeeBackend

logger = logging.getLogger("mcp.remote_browser.backends")

# service -> (adapter class, environment variable holding its token)
BACKENDS: dict[str, tuple[type[Backend], str]] = {
    SERVICE_BROWSERLESS: (BrowserlessBackend, "BROWSERLESS_TOKEN"),
    SERVICE_SCRAPINGBEE: (ScrapingBeeBackend, "SCRAPINGBEE_TOKEN"),
}


def select_backend(config: GatewayConfig, console_sink: ConsoleSink | None = None) -> Backend:
    """Build the one backend this request window will use. Fails closed."""
    entry = BACKENDS.get(config.service)
    if entry is None:
        known = ", ".join(sorted(BACKENDS))
        raise ConfigurationError(f"Unknown browser service {config.service!r} (expected one of: {known})")
    backend_cls, token_var = entry
    token = config.token_for(config.service)
    if not token:
        raise ConfigurationError(f"Browser service not configured properly: {token_var} is required for {config.service}")
    backend = backend_cls(config, token, console_sink=console_sink)
    logger.info("backend selected: %s", backend.name)
    return backend
