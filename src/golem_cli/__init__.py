"""golem-cli — command line interface for the open-source Golem platform.

Uploads and versions templates, controls workers, invokes worker
functions, and scaffolds new template projects from built-in examples.
"""

from golem_cli.version import __version__

__all__: list[str] = ["__version__"]
