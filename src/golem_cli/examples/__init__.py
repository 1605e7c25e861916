"""Example scaffolding — the built-in template catalog.

Rules
-----
* No network access; only the ``new`` command writes to the filesystem.
* No imports from ``cli`` or ``infra``.
"""

from golem_cli.examples.scaffold import process_list_examples, process_new

__all__: list[str] = ["process_list_examples", "process_new"]
