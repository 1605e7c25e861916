"""Core / handler layer — command validation, name resolution, results.

Rules
-----
* No ``print()`` calls; output is produced by the CLI renderer.
* No direct network access — all remote calls go through the client
  protocols in :mod:`golem_cli.core.protocols`.
* No imports from ``cli`` or ``infra``.
"""

from golem_cli.core.models import Format, Template, Verbosity, Worker
from golem_cli.core.protocols import Renderable, TemplateClient, WorkerClient
from golem_cli.core.results import GolemResult, JsonResult, OkResult, StrResult
from golem_cli.core.template_handler import TemplateHandler
from golem_cli.core.worker_handler import WorkerHandler

__all__: list[str] = [
    "Format",
    "GolemResult",
    "JsonResult",
    "OkResult",
    "Renderable",
    "StrResult",
    "Template",
    "TemplateClient",
    "TemplateHandler",
    "Verbosity",
    "Worker",
    "WorkerClient",
    "WorkerHandler",
]
