"""Infrastructure layer — the HTTP control-plane integration.

This layer wraps all interaction with httpx.  Every raw httpx exception
must be caught here and re-raised as a
:class:`~golem_cli.exceptions.GolemError` subclass.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from golem_cli.infra.template_client import LiveTemplateClient
from golem_cli.infra.transport import Context, build_context
from golem_cli.infra.worker_client import LiveWorkerClient

__all__: list[str] = [
    "Context",
    "LiveTemplateClient",
    "LiveWorkerClient",
    "build_context",
]
