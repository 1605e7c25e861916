"""Typed sub-command values produced by the command model.

The CLI layer converts the parsed ``argparse`` namespace into one of
these frozen dataclasses; handlers only ever see these types, never the
namespace itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

from golem_cli.core.models import TemplateId


@dataclass(frozen=True, slots=True)
class TemplateRef:
    """A template given either by id or by (unique) name."""

    template_id: TemplateId | None = None
    template_name: str | None = None

    def __post_init__(self) -> None:
        if (self.template_id is None) == (self.template_name is None):
            raise ValueError("exactly one of template_id / template_name is required")


# ---------------------------------------------------------------------------
# template …
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AddTemplate:
    name: str
    file: Path


@dataclass(frozen=True, slots=True)
class UpdateTemplate:
    template: TemplateRef
    file: Path


@dataclass(frozen=True, slots=True)
class ListTemplates:
    name: str | None = None


@dataclass(frozen=True, slots=True)
class GetTemplate:
    template: TemplateRef
    version: int | None = None


TemplateSubcommand = Union[AddTemplate, UpdateTemplate, ListTemplates, GetTemplate]


# ---------------------------------------------------------------------------
# worker …
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class AddWorker:
    template: TemplateRef
    worker_name: str
    env: tuple[tuple[str, str], ...] = ()
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DeleteWorker:
    template: TemplateRef
    worker_name: str


@dataclass(frozen=True, slots=True)
class GetWorker:
    template: TemplateRef
    worker_name: str


@dataclass(frozen=True, slots=True)
class ListWorkers:
    template: TemplateRef
    filters: tuple[str, ...] = ()
    count: int | None = None
    cursor: int | None = None
    precise: bool = False


@dataclass(frozen=True, slots=True)
class Parameters:
    """Raw function parameters: inline JSON text or a path to a JSON file."""

    inline: str | None = None
    file: Path | None = None


@dataclass(frozen=True, slots=True)
class Invoke:
    template: TemplateRef
    worker_name: str
    function: str
    parameters: Parameters = field(default_factory=Parameters)
    invocation_key: str | None = None


@dataclass(frozen=True, slots=True)
class InvokeAndAwait:
    template: TemplateRef
    worker_name: str
    function: str
    parameters: Parameters = field(default_factory=Parameters)
    invocation_key: str | None = None
    use_stdio: bool = False


@dataclass(frozen=True, slots=True)
class GetInvocationKey:
    template: TemplateRef
    worker_name: str


@dataclass(frozen=True, slots=True)
class Connect:
    template: TemplateRef
    worker_name: str


@dataclass(frozen=True, slots=True)
class Interrupt:
    template: TemplateRef
    worker_name: str


@dataclass(frozen=True, slots=True)
class SimulatedCrash:
    template: TemplateRef
    worker_name: str


WorkerSubcommand = Union[
    AddWorker,
    DeleteWorker,
    GetWorker,
    ListWorkers,
    Invoke,
    InvokeAndAwait,
    GetInvocationKey,
    Connect,
    Interrupt,
    SimulatedCrash,
]
