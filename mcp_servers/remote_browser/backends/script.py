"""
Remote action payloads for function-style providers (Browserless ``/function``).

A payload is a small Puppeteer module. It is assembled from fixed JavaScript
templates; caller-supplied values never become code. Escaping contract:

- every interpolated value goes through ``js_string`` (strings) or
  ``js_literal`` (anything else, JSON-encoded);
- ``js_string`` emits a single-quoted literal with backslash, single quote,
  CR, LF, U+2028, U+2029 and ``<`` escaped;
- the caller's own script is passed to the page as a string argument and run
  through indirect ``eval``, so it is also only ever a literal here.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

_JS_ESCAPES = {
    "\\": "\\\\",
    "'": "\\'",
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
    "<": "\\x3c",
}


def js_string(value: str) -> str:
    """Render ``value`` as a single-quoted JavaScript string literal."""
    return "'" + "".join(_JS_ESCAPES.get(ch, ch) for ch in str(value)) + "'"


def js_literal(value: Any) -> str:
    if isinstance(value, str):
        return js_string(value)
    return json.dumps(value, ensure_ascii=False)


# Page functions run inside ``page.evaluate(fn, ...args)``.

CLICK_FN = """(selector) => {
    const el = document.querySelector(selector);
    if (!el) throw new Error('Element not found: ' + selector);
    el.click();
    return true;
}"""

FILL_FN = """(selector, value) => {
    const el = document.querySelector(selector);
    if (!el) throw new Error('Element not found: ' + selector);
    el.focus();
    el.value = value;
    el.dispatchEvent(new Event('input', { bubbles: true }));
    el.dispatchEvent(new Event('change', { bubbles: true }));
    return true;
}"""

EXTRACT_FN = """(selector) => {
    const el = selector ? document.querySelector(selector) : document.body;
    if (!el) throw new Error('Element not found: ' + selector);
    return el.innerText;
}"""

EVAL_FN = """(source) => {
    const value = (0, eval)(source);
    return value === undefined ? null : value;
}"""

_MODULE_TEMPLATE = """module.exports = async ({{ page }}) => {{
  const consoleLines = [];
  page.on('console', (msg) => consoleLines.push(msg.type() + ': ' + msg.text()));
  try {{
{steps}
    const result = await page.evaluate({fn}{args});
    return {{ result: result === undefined ? null : result, console: consoleLines }};
  }} catch (err) {{
    return {{ error: (err && err.message) ? err.message : String(err), console: consoleLines }};
  }}
}};
"""


@dataclass(frozen=True)
class RemoteAction:
    """One scripted round-trip: optional navigation, optional wait, one page function."""

    function: str
    args: tuple[Any, ...] = field(default_factory=tuple)
    url: str | None = None
    wait_for: str | None = None
    timeout_ms: int = 30_000

    def render(self) -> str:
        steps: list[str] = []
        if self.url:
            steps.append(
                f"    await page.goto({js_string(self.url)}, {{ waitUntil: 'networkidle2', timeout: {int(self.timeout_ms)} }});"
            )
        if self.wait_for:
            steps.append(f"    await page.waitForSelector({js_string(self.wait_for)}, {{ timeout: {int(self.timeout_ms)} }});")
        args = "".join(", " + js_literal(a) for a in self.args)
        return _MODULE_TEMPLATE.format(steps="\n".join(steps), fn=self.function, args=args)


def click_action(selector: str, **kw: Any) -> RemoteAction:
    return RemoteAction(function=CLICK_FN, args=(selector,), **kw)


def fill_action(selector: str, value: str, **kw: Any) -> RemoteAction:
    return RemoteAction(function=FILL_FN, args=(selector, value), **kw)


def extract_action(selector: str | None, **kw: Any) -> RemoteAction:
    return RemoteAction(function=EXTRACT_FN, args=(selector,), **kw)


def evaluate_action(script: str, **kw: Any) -> RemoteAction:
    return RemoteAction(function=EVAL_FN, args=(script,), **kw)
