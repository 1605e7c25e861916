"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — so handlers can be driven by the live HTTP clients
in production and by scripted in-memory fakes in tests.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Protocol

from golem_cli.core.models import (
    InvocationKey,
    LogEvent,
    TableRows,
    Template,
    TemplateId,
    Worker,
    WorkerAdded,
    WorkerList,
)


class Renderable(Protocol):
    """Contract for domain objects printed by the renderer."""

    def to_structured(self) -> Any:
        """Return a JSON-compatible value used for ``json``/``yaml`` output."""
        ...  # pragma: no cover

    def table(self) -> TableRows:
        """Return ``(headers, rows)`` used for ``text`` output."""
        ...  # pragma: no cover


class TemplateClient(Protocol):
    """Contract for the template API.

    Implementations must map all transport and HTTP failures to
    :class:`~golem_cli.exceptions.GolemError` subclasses.
    """

    def add(self, name: str, file: Path) -> Template:
        ...  # pragma: no cover

    def update(self, template_id: TemplateId, file: Path) -> Template:
        ...  # pragma: no cover

    def list(self, name: str | None = None) -> list[Template]:
        ...  # pragma: no cover

    def get_latest(self, template_id: TemplateId) -> Template:
        ...  # pragma: no cover

    def get_versions(self, template_id: TemplateId) -> list[Template]:
        ...  # pragma: no cover


class WorkerClient(Protocol):
    """Contract for the worker API.

    ``parameters`` are already-decoded JSON values; the client is only
    responsible for putting them on the wire.
    """

    def add(
        self,
        template_id: TemplateId,
        worker_name: str,
        env: Mapping[str, str],
        args: Sequence[str],
    ) -> WorkerAdded:
        ...  # pragma: no cover

    def delete(self, template_id: TemplateId, worker_name: str) -> None:
        ...  # pragma: no cover

    def get(self, template_id: TemplateId, worker_name: str) -> Worker:
        ...  # pragma: no cover

    def list(
        self,
        template_id: TemplateId,
        *,
        filters: Sequence[str] = (),
        count: int | None = None,
        cursor: int | None = None,
        precise: bool = False,
    ) -> WorkerList:
        ...  # pragma: no cover

    def invocation_key(
        self, template_id: TemplateId, worker_name: str,
    ) -> InvocationKey:
        ...  # pragma: no cover

    def invoke(
        self,
        template_id: TemplateId,
        worker_name: str,
        function: str,
        parameters: Any,
        invocation_key: InvocationKey | None = None,
    ) -> None:
        ...  # pragma: no cover

    def invoke_and_await(
        self,
        template_id: TemplateId,
        worker_name: str,
        function: str,
        parameters: Any,
        invocation_key: InvocationKey,
        calling_convention: str = "component",
    ) -> Any:
        """Block until the worker returns; return the decoded result value."""
        ...  # pragma: no cover

    def connect(
        self, template_id: TemplateId, worker_name: str,
    ) -> AbstractContextManager[Iterator[LogEvent]]:
        """Open the log stream.

        Entering the context establishes the connection (and raises if it
        cannot be established); the yielded iterator produces events
        until the server closes the stream.  Leaving the context closes
        the socket.
        """
        ...  # pragma: no cover

    def interrupt(self, template_id: TemplateId, worker_name: str) -> None:
        ...  # pragma: no cover

    def simulated_crash(self, template_id: TemplateId, worker_name: str) -> None:
        ...  # pragma: no cover
