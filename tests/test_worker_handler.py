"""Tests for WorkerHandler (core/worker_handler.py).

Both clients are ``MagicMock`` objects at the protocol boundary; the
template handler is real so name resolution is exercised end to end.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

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
    TemplateRef,
)
from golem_cli.core.models import (
    InvocationKey,
    LogEvent,
    LogEventKind,
    Template,
    WorkerList,
)
from golem_cli.core.results import JsonResult, OkResult, StrResult
from golem_cli.core.template_handler import TemplateHandler
from golem_cli.core.worker_handler import WorkerHandler, parse_parameters
from golem_cli.exceptions import (
    CancelledError,
    InvalidArgumentError,
    InvalidConfigError,
    NotFoundError,
)

BY_ID = TemplateRef(template_id="tpl-1")
BY_NAME = TemplateRef(template_name="shopping-cart")


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def _template_client() -> MagicMock:
    client = MagicMock()
    client.list.return_value = [Template("tpl-1", 0, "shopping-cart", 10)]
    return client


def _worker_client(events: list[LogEvent] | None = None) -> MagicMock:
    client = MagicMock()
    client.invocation_key.return_value = InvocationKey("key-1")
    client.invoke_and_await.return_value = {"ok": [3]}
    client.list.return_value = WorkerList(workers=(), cursor=None)

    @contextmanager
    def connect(template_id: str, worker_name: str) -> Iterator[Iterator[LogEvent]]:
        yield iter(events or [])

    client.connect.side_effect = connect
    return client


def _handler(
    client: MagicMock, templates: MagicMock | None = None, **kwargs: Any,
) -> WorkerHandler:
    return WorkerHandler(client, TemplateHandler(templates or _template_client()), **kwargs)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

class TestParseParameters:
    def test_nothing_means_empty_list(self) -> None:
        assert parse_parameters(Parameters()) == []

    def test_inline_json(self) -> None:
        assert parse_parameters(Parameters(inline='[1, "two"]')) == [1, "two"]

    def test_file_json(self, tmp_path: Path) -> None:
        path = tmp_path / "params.json"
        path.write_text('{"a": true}', encoding="utf-8")
        assert parse_parameters(Parameters(file=path)) == {"a": True}

    def test_invalid_json(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Invalid JSON") as exc_info:
            parse_parameters(Parameters(inline="[1,"))
        assert exc_info.value.hint is not None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidConfigError):
            parse_parameters(Parameters(file=tmp_path / "nope.json"))


# ---------------------------------------------------------------------------
# Invocation
# ---------------------------------------------------------------------------

class TestInvokeAndAwait:
    def test_invalid_json_makes_no_request(self) -> None:
        workers, templates = _worker_client(), _template_client()
        command = InvokeAndAwait(BY_NAME, "w1", "add", Parameters(inline="[1,"))
        with pytest.raises(InvalidArgumentError):
            _handler(workers, templates).handle(command)
        assert workers.method_calls == []
        assert templates.method_calls == []

    def test_fetches_one_key_and_passes_it_on(self) -> None:
        workers = _worker_client()
        result = _handler(workers).handle(
            InvokeAndAwait(BY_ID, "w1", "add", Parameters(inline="[1, 2]")),
        )
        workers.invocation_key.assert_called_once_with("tpl-1", "w1")
        workers.invoke_and_await.assert_called_once_with(
            "tpl-1", "w1", "add", [1, 2], InvocationKey("key-1"), "component",
        )
        assert result == JsonResult({"ok": [3]})

    def test_explicit_key_skips_key_request(self) -> None:
        workers = _worker_client()
        _handler(workers).handle(
            InvokeAndAwait(BY_ID, "w1", "add", invocation_key="mine"),
        )
        workers.invocation_key.assert_not_called()
        args = workers.invoke_and_await.call_args.args
        assert args[4] == InvocationKey("mine")

    def test_use_stdio_selects_stdio_convention(self) -> None:
        workers = _worker_client()
        _handler(workers).handle(InvokeAndAwait(BY_ID, "w1", "run", use_stdio=True))
        assert workers.invoke_and_await.call_args.args[5] == "stdio"

    def test_resolves_template_name(self) -> None:
        workers, templates = _worker_client(), _template_client()
        _handler(workers, templates).handle(InvokeAndAwait(BY_NAME, "w1", "add"))
        templates.list.assert_called_once_with("shopping-cart")
        assert workers.invoke_and_await.call_args.args[0] == "tpl-1"

    def test_unknown_template_name(self) -> None:
        templates = _template_client()
        templates.list.return_value = []
        workers = _worker_client()
        with pytest.raises(NotFoundError):
            _handler(workers, templates).handle(InvokeAndAwait(BY_NAME, "w1", "add"))
        workers.invocation_key.assert_not_called()


class TestInvoke:
    def test_fire_and_forget(self) -> None:
        workers = _worker_client()
        result = _handler(workers).handle(
            Invoke(BY_ID, "w1", "add", Parameters(inline="[5]")),
        )
        workers.invoke.assert_called_once_with("tpl-1", "w1", "add", [5], None)
        assert result == StrResult("Invoked")

    def test_with_key(self) -> None:
        workers = _worker_client()
        _handler(workers).handle(Invoke(BY_ID, "w1", "add", invocation_key="k"))
        assert workers.invoke.call_args.args[4] == InvocationKey("k")

    def test_get_invocation_key(self) -> None:
        result = _handler(_worker_client()).handle(GetInvocationKey(BY_ID, "w1"))
        assert result == OkResult(InvocationKey("key-1"))


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_add_passes_env_as_mapping(self) -> None:
        workers = _worker_client()
        _handler(workers).handle(
            AddWorker(BY_ID, "w1", env=(("A", "1"), ("B", "2")), args=("--x",)),
        )
        workers.add.assert_called_once_with("tpl-1", "w1", {"A": "1", "B": "2"}, ("--x",))

    def test_delete(self) -> None:
        workers = _worker_client()
        assert _handler(workers).handle(DeleteWorker(BY_ID, "w1")) == StrResult("Deleted")
        workers.delete.assert_called_once_with("tpl-1", "w1")

    def test_get(self) -> None:
        workers = _worker_client()
        result = _handler(workers).handle(GetWorker(BY_ID, "w1"))
        assert isinstance(result, OkResult)
        workers.get.assert_called_once_with("tpl-1", "w1")

    def test_list_forwards_paging(self) -> None:
        workers = _worker_client()
        _handler(workers).handle(
            ListWorkers(BY_ID, filters=("name like w",), count=10, cursor=3, precise=True),
        )
        workers.list.assert_called_once_with(
            "tpl-1", filters=("name like w",), count=10, cursor=3, precise=True,
        )

    def test_interrupt(self) -> None:
        workers = _worker_client()
        assert _handler(workers).handle(Interrupt(BY_ID, "w1")) == StrResult("Interrupted")
        workers.interrupt.assert_called_once_with("tpl-1", "w1")

    def test_simulated_crash(self) -> None:
        workers = _worker_client()
        assert _handler(workers).handle(SimulatedCrash(BY_ID, "w1")) == StrResult("Done")
        workers.simulated_crash.assert_called_once_with("tpl-1", "w1")


# ---------------------------------------------------------------------------
# connect
# ---------------------------------------------------------------------------

class TestConnect:
    def test_writes_events_in_order(self) -> None:
        events = [
            LogEvent(LogEventKind.STDOUT, "one\n"),
            LogEvent(LogEventKind.LOG, "two", level="info", context="ctx"),
        ]
        out = io.StringIO()
        result = _handler(_worker_client(events), output=out).handle(Connect(BY_ID, "w1"))
        assert out.getvalue() == "one\n[INFO] ctx: two\n"
        assert result == StrResult("")

    def test_interrupt_after_establishment_is_success(self) -> None:
        def events() -> Iterator[LogEvent]:
            yield LogEvent(LogEventKind.STDOUT, "hi\n")
            raise KeyboardInterrupt

        workers = _worker_client()

        @contextmanager
        def connect(template_id: str, worker_name: str) -> Iterator[Iterator[LogEvent]]:
            yield events()

        workers.connect.side_effect = connect
        out = io.StringIO()
        result = _handler(workers, output=out).handle(Connect(BY_ID, "w1"))
        assert result == StrResult("")
        assert out.getvalue() == "hi\n"

    def test_interrupt_before_establishment_is_cancelled(self) -> None:
        workers = _worker_client()
        workers.connect.side_effect = KeyboardInterrupt
        with pytest.raises(CancelledError):
            _handler(workers, output=io.StringIO()).handle(Connect(BY_ID, "w1"))
