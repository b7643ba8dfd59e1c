"""Allow running as ``python -m backlog_cli``."""

from backlog_cli.cli import main

main()
