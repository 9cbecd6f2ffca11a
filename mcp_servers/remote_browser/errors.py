"""Error taxonomy for the remote browser gateway.

Every error below is caught at the dispatcher boundary and rendered as an
``isError`` tool result; none of them is allowed to reach the transport.
"""

from __future__ import annotations

from typing import Any


class GatewayError(Exception):
    """Base class for all expected gateway failures."""


class InvalidArgumentError(GatewayError):
    """Tool arguments are missing, mistyped or not allowed."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ConfigurationError(GatewayError):
    """No usable backend could be built from the environment."""


class UnsupportedOperationError(GatewayError):
    """The selected backend does not offer the requested capability."""

    def __init__(self, operation: str, backend: str) -> None:
        super().__init__(f"{operation} is not supported by the {backend} backend")


class BackendError(GatewayError):
    """A remote provider call failed or returned something unusable."""

    def __init__(self, message: str, *, status: int | None = None, body: Any = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status is None:
            return base
        detail = f"{base} (HTTP {self.status})"
        if isinstance(self.body, str) and self.body.strip():
            snippet = self.body.strip()
            if len(snippet) > 300:
                snippet = snippet[:300] + "…"
            detail = f"{detail}: {snippet}"
        return detail


class ResourceNotFoundError(GatewayError):
    """Resource URI is unknown or names a screenshot that was never stored."""

    def __init__(self, uri: str) -> None:
        super().__init__(f"Resource not found: {uri}")
        self.uri = uri


__all__ = [
    "BackendError",
    "ConfigurationError",
    "GatewayError",
    "InvalidArgumentError",
    "ResourceNotFoundError",
    "UnsupportedOperationError",
]
