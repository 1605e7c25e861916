"""Worker handler — validates and executes ``worker`` sub-commands.

Depends on a :class:`~golem_cli.core.protocols.WorkerClient` and borrows
the :class:`~golem_cli.core.template_handler.TemplateHandler` for the
duration of a dispatch so template names can be resolved to ids before
any worker request is sent.

Guarantees
----------
* Function parameters are parsed as JSON before any HTTP request; a
  syntax error is an :class:`~golem_cli.exceptions.InvalidArgumentError`.
* ``invoke-and-await`` obtains at most one invocation key and passes the
  very same key to the invocation request.
* ``connect`` writes every log event through to the output as it
  arrives and turns Ctrl+C into a clean close.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

from golem_cli.core.commands import (
    AddWorker,
    Connect,
    DeleteWorker,
    GetInvocationKey,
    GetWorker,
    Interrupt,
    Invoke,
    InvokeAndAwait,
    ListWorkers,
    Parameters,
    SimulatedCrash,
    WorkerSubcommand,
)
from golem_cli.core.models import InvocationKey, TemplateId
from golem_cli.core.protocols import WorkerClient
from golem_cli.core.results import GolemResult, JsonResult, OkResult, StrResult
from golem_cli.core.template_handler import TemplateHandler
from golem_cli.exceptions import CancelledError, InvalidArgumentError, InvalidConfigError

logger = logging.getLogger(__name__)

CALLING_CONVENTION_COMPONENT: str = "component"
CALLING_CONVENTION_STDIO: str = "stdio"


class WorkerHandler:
    """Executes worker sub-commands.

    Parameters
    ----------
    client:
        Any object satisfying the :class:`WorkerClient` protocol.
    templates:
        Template handler used for name → id resolution.  Borrowed, never
        the other way round: templates know nothing about workers.
    output:
        Stream that ``connect`` writes events to.  ``None`` means the
        current ``sys.stdout``.
    """

    def __init__(
        self,
        client: WorkerClient,
        templates: TemplateHandler,
        *,
        output: TextIO | None = None,
    ) -> None:
        self._client: WorkerClient = client
        self._templates: TemplateHandler = templates
        self._output: TextIO | None = output

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, command: WorkerSubcommand) -> GolemResult:
        # Parameters are validated before name resolution so a typo never
        # costs a request.
        parameters: Any = None
        if isinstance(command, (Invoke, InvokeAndAwait)):
            parameters = parse_parameters(command.parameters)

        template_id = self._templates.resolve(command.template)

        if isinstance(command, ListWorkers):
            page = self._client.list(
                template_id,
                filters=command.filters,
                count=command.count,
                cursor=command.cursor,
                precise=command.precise,
            )
            return OkResult(page)

        name = command.worker_name

        if isinstance(command, AddWorker):
            return OkResult(self._client.add(template_id, name, dict(command.env), command.args))

        if isinstance(command, DeleteWorker):
            self._client.delete(template_id, name)
            return StrResult("Deleted")

        if isinstance(command, GetWorker):
            return OkResult(self._client.get(template_id, name))

        if isinstance(command, GetInvocationKey):
            return OkResult(self._client.invocation_key(template_id, name))

        if isinstance(command, Invoke):
            key = InvocationKey(command.invocation_key) if command.invocation_key else None
            self._client.invoke(template_id, name, command.function, parameters, key)
            return StrResult("Invoked")

        if isinstance(command, InvokeAndAwait):
            return self._invoke_and_await(template_id, command, parameters)

        if isinstance(command, Connect):
            return self._connect(template_id, name)

        if isinstance(command, Interrupt):
            self._client.interrupt(template_id, name)
            return StrResult("Interrupted")

        if isinstance(command, SimulatedCrash):
            self._client.simulated_crash(template_id, name)
            return StrResult("Done")

        raise TypeError(f"Unsupported worker command: {command!r}")

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def _invoke_and_await(
        self, template_id: TemplateId, command: InvokeAndAwait, parameters: Any,
    ) -> GolemResult:
        if command.invocation_key:
            key = InvocationKey(command.invocation_key)
        else:
            key = self._client.invocation_key(template_id, command.worker_name)
        logger.info("Invoking %s on %s/%s", command.function, template_id, command.worker_name)

        convention = CALLING_CONVENTION_STDIO if command.use_stdio else CALLING_CONVENTION_COMPONENT
        result = self._client.invoke_and_await(
            template_id,
            command.worker_name,
            command.function,
            parameters,
            key,
            convention,
        )
        return JsonResult(result)

    # ------------------------------------------------------------------
    # Log stream
    # ------------------------------------------------------------------

    def _connect(self, template_id: TemplateId, worker_name: str) -> GolemResult:
        out = self._output if self._output is not None else sys.stdout
        established = False
        try:
            with self._client.connect(template_id, worker_name) as events:
                established = True
                for event in events:
                    out.write(event.render())
                    out.flush()
        except KeyboardInterrupt:
            if not established:
                raise CancelledError(
                    f"Connection to worker {worker_name!r} cancelled before it was established.",
                ) from None
            logger.info("Log stream closed by user")
        return StrResult("")


def parse_parameters(parameters: Parameters) -> Any:
    """Decode function parameters given inline or as a file.

    Missing parameters mean "no arguments" (an empty list).

    Raises
    ------
    InvalidArgumentError
        If the text is not valid JSON.
    InvalidConfigError
        If the parameters file cannot be read.
    """
    if parameters.file is not None:
        try:
            text = parameters.file.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidConfigError(
                f"Cannot read parameters file {parameters.file}: {exc}",
            ) from exc
        source = str(parameters.file)
    elif parameters.inline is not None:
        text = parameters.inline
        source = "--parameters"
    else:
        return []

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidArgumentError(
            f"Invalid JSON in {source}: {exc}",
            hint="Parameters must be a JSON value, e.g. '[1, \"two\"]'.",
        ) from exc
