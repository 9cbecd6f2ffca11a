#!/usr/bin/env python3
"""Write (or, with --check, verify) contracts/tools.json and contracts/tools.md."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from mcp_servers.remote_browser.server.contract import contract_snapshot  # noqa: E402
from mcp_servers.remote_browser.server.contract_docs import render_tools_markdown  # noqa: E402


def render_contracts() -> dict[str, str]:
    snapshot = contract_snapshot()
    return {
        "tools.json": json.dumps(snapshot, ensure_ascii=False, indent=2) + "\n",
        "tools.md": render_tools_markdown(snapshot),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--check", action="store_true", help="fail if the files on disk are stale")
    parser.add_argument("--out", type=Path, default=ROOT / "contracts")
    args = parser.parse_args(argv)

    rendered = render_contracts()
    if args.check:
        stale = [
            name
            for name, text in rendered.items()
            if not (args.out / name).is_file() or (args.out / name).read_text(encoding="utf-8") != text
        ]
        for name in stale:
            print(f"Stale: {args.out / name}", file=sys.stderr)
        return 1 if stale else 0

    args.out.mkdir(parents=True, exist_ok=True)
    for name, text in rendered.items():
        (args.out / name).write_text(text, encoding="utf-8")
        print(f"Wrote: {args.out / name}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
