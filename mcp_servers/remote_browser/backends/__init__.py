"""
Remote automation backends.

Every provider implements ``Backend``; callers discover optional operations
through ``Backend.supports`` rather than by inspecting concrete types.
"""

from .base import CAP_EXTRACT, CAP_SCREENSHOT, CAP_SCRIPTING, Backend, ConsoleSink, Viewport
from .browserless import BrowserlessBackend
from .scrapingbee import ScrapingBeeBackend
from .selector import BACKENDS, select_backend

__all__ = [
    "BACKENDS",
    "CAP_EXTRACT",
    "CAP_SCREENSHOT",
    "CAP_SCRIPTING",
    "Backend",
    "BrowserlessBackend",
    "ConsoleSink",
    "ScrapingBeeBackend",
    "Viewport",
    "select_backend",
]
