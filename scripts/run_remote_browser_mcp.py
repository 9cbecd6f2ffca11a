#!/usr/bin/env python3
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

print(
    f"[mcp] service={os.environ.get('BROWSER_SERVICE', 'browserless')} | "
    f"browserless_token={'set' if os.environ.get('BROWSERLESS_TOKEN') else 'unset'} | "
    f"scrapingbee_token={'set' if os.environ.get('SCRAPINGBEE_TOKEN') else 'unset'} | "
    f"session_mode={os.environ.get('MCP_SESSION_MODE', 'process')} | "
    f"allowlist={os.environ.get('MCP_ALLOW_HOSTS', '*')}",
    file=sys.stderr,
)

from mcp_servers.remote_browser.main import main  # noqa: E402

if __name__ == "__main__":
    main()
