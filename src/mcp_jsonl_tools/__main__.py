"""Module entrypoint.

Allows:
    python -m mcp_jsonl_tools
"""

from __future__ import annotations

from mcp_jsonl_tools.server.log_server import main

if __name__ == "__main__":
    main()
