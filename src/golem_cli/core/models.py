"""Domain models for golem-cli.

All models are **frozen** dataclasses — immutable value objects.  Models
that are shown to the user also implement the
:class:`~golem_cli.core.protocols.Renderable` contract: a structured form
for JSON/YAML output and a header/rows pair for the text table.  They
carry zero I/O and no dependency on the rendering library.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

TemplateId = str
"""Opaque, server-assigned template identifier."""

TableRows = tuple[tuple[str, ...], list[tuple[str, ...]]]


# ---------------------------------------------------------------------------
# Output and logging switches
# ---------------------------------------------------------------------------

class Format(enum.Enum):
    """Output format selected with ``--format``."""

    YAML = "yaml"
    JSON = "json"
    TEXT = "text"

    def __str__(self) -> str:
        return self.value


class Verbosity(enum.IntEnum):
    """Log level selected by ``-q`` / ``-v`` stacking."""

    OFF = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    DEBUG = 4
    TRACE = 5

    @classmethod
    def from_flags(cls, verbose: int, quiet: bool = False) -> Verbosity:
        """Default is ``ERROR``; every ``-v`` moves one level up."""
        if quiet:
            return cls.OFF
        return cls(min(cls.ERROR + verbose, cls.TRACE))


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Template:
    """One version of a template as reported by the control-plane."""

    template_id: TemplateId
    version: int
    name: str
    size: int
    exports: tuple[str, ...] = ()
    """Rendered function signatures, e.g. ``golem:it/api.{add}(value: u64)``."""

    def to_structured(self) -> dict[str, Any]:
        return {
            "templateId": self.template_id,
            "templateVersion": self.version,
            "templateName": self.name,
            "templateSize": self.size,
            "exports": list(self.exports),
        }

    def table(self) -> TableRows:
        return _TEMPLATE_HEADERS, [_template_row(self)]


@dataclass(frozen=True, slots=True)
class TemplateList:
    """Ordered collection of templates, as returned by list/versions."""

    templates: tuple[Template, ...]

    def __len__(self) -> int:
        return len(self.templates)

    def __bool__(self) -> bool:
        return len(self.templates) > 0

    def to_structured(self) -> list[dict[str, Any]]:
        return [template.to_structured() for template in self.templates]

    def table(self) -> TableRows:
        return _TEMPLATE_HEADERS, [_template_row(t) for t in self.templates]


_TEMPLATE_HEADERS = ("ID", "Version", "Name", "Size", "Exports")


def _template_row(template: Template) -> tuple[str, ...]:
    return (
        template.template_id,
        str(template.version),
        template.name,
        str(template.size),
        "\n".join(template.exports),
    )


# ---------------------------------------------------------------------------
# Workers
# ---------------------------------------------------------------------------

class WorkerStatus(enum.Enum):
    """Worker lifecycle state reported by the control-plane."""

    RUNNING = "Running"
    IDLE = "Idle"
    SUSPENDED = "Suspended"
    INTERRUPTED = "Interrupted"
    RETRYING = "Retrying"
    FAILED = "Failed"
    EXITED = "Exited"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Worker:
    """Metadata of a single worker."""

    template_id: TemplateId
    worker_name: str
    status: WorkerStatus
    template_version: int
    retry_count: int = 0
    args: tuple[str, ...] = ()
    env: dict[str, str] = field(default_factory=dict)

    def to_structured(self) -> dict[str, Any]:
        return {
            "workerId": {
                "templateId": self.template_id,
                "workerName": self.worker_name,
            },
            "args": list(self.args),
            "env": dict(self.env),
            "status": self.status.value,
            "templateVersion": self.template_version,
            "retryCount": self.retry_count,
        }

    def table(self) -> TableRows:
        return _WORKER_HEADERS, [_worker_row(self)]


@dataclass(frozen=True, slots=True)
class WorkerList:
    """One page of worker metadata plus the cursor for the next page."""

    workers: tuple[Worker, ...]
    cursor: int | None = None

    def to_structured(self) -> dict[str, Any]:
        return {
            "workers": [worker.to_structured() for worker in self.workers],
            "cursor": self.cursor,
        }

    def table(self) -> TableRows:
        return _WORKER_HEADERS, [_worker_row(w) for w in self.workers]


_WORKER_HEADERS = ("Template ID", "Worker name", "Status", "Version", "Retries")


def _worker_row(worker: Worker) -> tuple[str, ...]:
    return (
        worker.template_id,
        worker.worker_name,
        worker.status.value,
        str(worker.template_version),
        str(worker.retry_count),
    )


@dataclass(frozen=True, slots=True)
class WorkerAdded:
    """Acknowledgement returned when a worker is created."""

    template_id: TemplateId
    worker_name: str
    template_version: int

    def to_structured(self) -> dict[str, Any]:
        return {
            "workerId": {
                "templateId": self.template_id,
                "workerName": self.worker_name,
            },
            "templateVersionUsed": self.template_version,
        }

    def table(self) -> TableRows:
        return (
            ("Template ID", "Worker name", "Version"),
            [(self.template_id, self.worker_name, str(self.template_version))],
        )


@dataclass(frozen=True, slots=True)
class InvocationKey:
    """Single-use token guarding a worker invocation against duplicates."""

    value: str

    def to_structured(self) -> dict[str, Any]:
        return {"value": self.value}

    def table(self) -> TableRows:
        return ("Invocation key",), [(self.value,)]


# ---------------------------------------------------------------------------
# Log stream
# ---------------------------------------------------------------------------

class LogEventKind(enum.Enum):
    """Channel a worker log event was emitted on."""

    STDOUT = "StdOut"
    STDERR = "StdErr"
    LOG = "Log"


@dataclass(frozen=True, slots=True)
class LogEvent:
    """A single event received from ``worker connect``."""

    kind: LogEventKind
    message: str
    level: str | None = None
    context: str | None = None

    def render(self) -> str:
        """Text written to stdout for this event.

        Stdout/stderr payloads are passed through verbatim (they carry
        their own newlines); structured log entries get one line each.
        """
        if self.kind is LogEventKind.LOG:
            prefix = f"[{(self.level or 'info').upper()}]"
            if self.context:
                prefix = f"{prefix} {self.context}:"
            return f"{prefix} {self.message}\n"
        return self.message
