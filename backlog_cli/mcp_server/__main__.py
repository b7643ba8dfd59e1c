"""Allow running as ``python -m backlog_cli.mcp_server``."""

from backlog_cli.mcp_server import main

main()
