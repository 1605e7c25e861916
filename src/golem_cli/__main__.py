"""Allow ``python -m golem_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m golem_cli`` behaves identically to the ``golem-cli``
console script.
"""

from __future__ import annotations

from golem_cli.cli.app import cli

if __name__ == "__main__":
    cli()
