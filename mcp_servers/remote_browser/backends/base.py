"""Backend capability contract shared by all automation providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..config import DEFAULT_VIEWPORT_HEIGHT, DEFAULT_VIEWPORT_WIDTH, GatewayConfig
from ..errors import UnsupportedOperationError

CAP_SCREENSHOT = "screenshot"
CAP_EXTRACT = "extract"
CAP_SCRIPTING = "scripting"

ConsoleSink = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class Viewport:
    width: int = DEFAULT_VIEWPORT_WIDTH
    height: int = DEFAULT_VIEWPORT_HEIGHT

    def to_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}


class Backend(ABC):
    """
    A remote automation provider.

    ``screenshot`` and ``extract_content`` are mandatory. Scripted operations
    (``execute_remote_action`` and the click/fill/evaluate helpers built on it)
    exist only when ``supports(CAP_SCRIPTING)`` is true; callers must ask
    before invoking them.
    """

    name: str = "backend"
    capabilities: frozenset[str] = frozenset({CAP_SCREENSHOT, CAP_EXTRACT})

    def __init__(self, config: GatewayConfig, token: str, console_sink: ConsoleSink | None = None) -> None:
        self.config = config
        self._token = token
        self._console_sink = console_sink

    def supports(self, capability: str) -> bool:
        return capability in self.capabilities

    @abstractmethod
    def screenshot(
        self,
        target: str | None,
        selector: str | None = None,
        viewport: Viewport | None = None,
        full_page: bool = False,
    ) -> str:
        """Capture the target and return the image as base64 text."""

    @abstractmethod
    def extract_content(self, target: str, selector: str | None = None, wait_for: str | None = None) -> str:
        """Return page text, whole document or scoped to ``selector``."""

    def execute_remote_action(self, target: str | None, code: str, wait_for: str | None = None) -> Any:
        raise UnsupportedOperationError("execute_remote_action", self.name)

    def click(self, target: str | None, selector: str, wait_for: str | None = None) -> None:
        raise UnsupportedOperationError("click", self.name)

    def fill(self, target: str | None, selector: str, value: str) -> None:
        raise UnsupportedOperationError("fill", self.name)

    def evaluate(self, target: str | None, script: str, wait_for: str | None = None) -> Any:
        return self.execute_remote_action(target, script, wait_for)

    def _emit_console(self, lines: list[str]) -> None:
        if self._console_sink is None:
            return
        for line in lines:
            self._console_sink(line)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name} capabilities={sorted(self.capabilities)}>"
