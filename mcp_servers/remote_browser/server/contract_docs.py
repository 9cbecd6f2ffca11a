"""Render user-facing contract docs.

Deterministic rendering of the tool contract markdown, kept as a module so
tests can check it against the live ``tools/list`` output.
"""

from __future__ import annotations

from typing import Any


def _argument_cell(schema: dict[str, Any]) -> str:
    properties = schema.get("properties") or {}
    required = set(schema.get("required") or [])
    parts: list[str] = []
    for name, prop in properties.items():
        typ = (prop or {}).get("type", "any")
        mark = "" if name in required else "?"
        parts.append(f"`{name}{mark}: {typ}`")
    return ", ".join(parts)


def render_tools_markdown(snapshot: dict[str, Any]) -> str:
    tools = snapshot.get("tools") or []
    lines: list[str] = []
    lines.append("# MCP Tool Contract (Remote Browser)")
    lines.append("")
    lines.append(f"- protocolVersion: `{snapshot.get('protocolVersion')}`")

    server_info = snapshot.get("serverInfo") or {}
    lines.append(f"- server: `{server_info.get('name')}` v`{server_info.get('version')}`")
    lines.append(f"- tools: `{len(tools)}`")
    lines.append("")

    lines.append("## Tools")
    lines.append("")
    lines.append("| name | arguments | description |")
    lines.append("|---|---|---|")
    for tool in tools:
        if not isinstance(tool, dict):
            continue
        name = str(tool.get("name", ""))
        desc = str(tool.get("description", "")).strip().splitlines()[0] if tool.get("description") else ""
        desc = desc.replace("|", "\\|")
        args = _argument_cell(tool.get("inputSchema") or {})
        lines.append(f"| `{name}` | {args} | {desc} |")

    lines.append("")
    lines.append("## Resources")
    lines.append("")
    for resource in snapshot.get("resources") or []:
        if not isinstance(resource, dict):
            continue
        uri = resource.get("uri") or resource.get("uriTemplate") or ""
        lines.append(f"- `{uri}` ({resource.get('mimeType')}): {resource.get('description', '')}")
    lines.append("")
    lines.append("## Notes")
    lines.append("")
    lines.append("- `tools/list` is the source of truth for the tool list and input schemas.")
    lines.append("- Arguments marked `?` are optional.")
    lines.append("- On tool failure, the server sets `isError=true` and returns `Error: <message>` in `content[0].text`.")

    return "\n".join(lines) + "\n"
