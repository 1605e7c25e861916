"""httpx backed implementation of :class:`~golem_cli.core.protocols.WorkerClient`.

All worker operations are addressed as
``/v2/templates/{template_id}/workers/{worker_name}/...``.  The log
stream of ``connect`` is read as newline-delimited JSON and decoded
lazily, one :class:`~golem_cli.core.models.LogEvent` per line.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

import httpx

from golem_cli.core.models import (
    InvocationKey,
    LogEvent,
    LogEventKind,
    TemplateId,
    Worker,
    WorkerAdded,
    WorkerList,
    WorkerStatus,
)
from golem_cli.exceptions import ApiError
from golem_cli.infra.http import ApiClientBase

logger = logging.getLogger(__name__)


class LiveWorkerClient(ApiClientBase):
    """Concrete :class:`WorkerClient` talking to a running control-plane."""

    def _worker_path(self, template_id: TemplateId, worker_name: str, *rest: str) -> str:
        return self._path("templates", template_id, "workers", worker_name, *rest)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def add(
        self,
        template_id: TemplateId,
        worker_name: str,
        env: Mapping[str, str],
        args: Sequence[str],
    ) -> WorkerAdded:
        body = {"name": worker_name, "args": list(args), "env": dict(env)}
        data = self._request_json(
            "POST", self._path("templates", template_id, "workers"), json=body,
        )
        worker_id = _expect_dict(data).get("workerId") or {}
        return WorkerAdded(
            template_id=str(worker_id.get("templateId", template_id)),
            worker_name=str(worker_id.get("workerName", worker_name)),
            template_version=int(data.get("templateVersionUsed", 0)),
        )

    def delete(self, template_id: TemplateId, worker_name: str) -> None:
        self._request("DELETE", self._worker_path(template_id, worker_name))

    def get(self, template_id: TemplateId, worker_name: str) -> Worker:
        data = self._request_json("GET", self._worker_path(template_id, worker_name))
        return self._parse_worker(data)

    def list(
        self,
        template_id: TemplateId,
        *,
        filters: Sequence[str] = (),
        count: int | None = None,
        cursor: int | None = None,
        precise: bool = False,
    ) -> WorkerList:
        params: list[tuple[str, str]] = [("filter", f) for f in filters]
        if count is not None:
            params.append(("count", str(count)))
        if cursor is not None:
            params.append(("cursor", str(cursor)))
        if precise:
            params.append(("precise", "true"))

        data = _expect_dict(
            self._request_json(
                "GET", self._path("templates", template_id, "workers"), params=params,
            )
        )
        raw_cursor = data.get("cursor")
        return WorkerList(
            workers=tuple(self._parse_worker(w) for w in data.get("workers", [])),
            cursor=int(raw_cursor) if raw_cursor is not None else None,
        )

    def interrupt(self, template_id: TemplateId, worker_name: str) -> None:
        self._interrupt(template_id, worker_name, recover_immediately=False)

    def simulated_crash(self, template_id: TemplateId, worker_name: str) -> None:
        self._interrupt(template_id, worker_name, recover_immediately=True)

    def _interrupt(
        self, template_id: TemplateId, worker_name: str, *, recover_immediately: bool,
    ) -> None:
        self._request(
            "POST",
            self._worker_path(template_id, worker_name, "interrupt"),
            params={"recover-immediately": "true" if recover_immediately else "false"},
        )

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def invocation_key(self, template_id: TemplateId, worker_name: str) -> InvocationKey:
        data = _expect_dict(
            self._request_json("POST", self._worker_path(template_id, worker_name, "key"))
        )
        value = data.get("value")
        if not isinstance(value, str) or not value:
            raise ApiError(200, f"Invocation key response has no value: {data!r}")
        return InvocationKey(value=value)

    def invoke(
        self,
        template_id: TemplateId,
        worker_name: str,
        function: str,
        parameters: Any,
        invocation_key: InvocationKey | None = None,
    ) -> None:
        params = {"function": function}
        if invocation_key is not None:
            params["invocation-key"] = invocation_key.value
        self._request(
            "POST",
            self._worker_path(template_id, worker_name, "invoke"),
            params=params,
            json={"params": parameters},
        )

    def invoke_and_await(
        self,
        template_id: TemplateId,
        worker_name: str,
        function: str,
        parameters: Any,
        invocation_key: InvocationKey,
        calling_convention: str = "component",
    ) -> Any:
        data = _expect_dict(
            self._request_json(
                "POST",
                self._worker_path(template_id, worker_name, "invoke-and-await"),
                params={
                    "function": function,
                    "invocation-key": invocation_key.value,
                    "calling-convention": calling_convention,
                },
                json={"params": parameters},
            )
        )
        return data.get("result")

    # ------------------------------------------------------------------
    # Log stream
    # ------------------------------------------------------------------

    @contextmanager
    def connect(self, template_id: TemplateId, worker_name: str) -> Iterator[Iterator[LogEvent]]:
        path = self._worker_path(template_id, worker_name, "connect")
        with self._stream(
            "GET", path, headers={"Accept": "application/x-ndjson"},
        ) as response:
            logger.info("Connected to %s/%s", template_id, worker_name)
            yield self._iter_events(response)

    @classmethod
    def _iter_events(cls, response: httpx.Response) -> Iterator[LogEvent]:
        for line in response.iter_lines():
            if not line.strip():
                continue
            event = cls._parse_event(line)
            if event is not None:
                yield event

    # ------------------------------------------------------------------
    # Raw JSON → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_worker(data: Any) -> Worker:
        data = _expect_dict(data)
        worker_id = data.get("workerId") or {}
        raw_status = str(data.get("status", "Running"))
        try:
            status = WorkerStatus(raw_status)
        except ValueError as exc:
            raise ApiError(200, f"Unknown worker status: {raw_status!r}") from exc
        return Worker(
            template_id=str(worker_id.get("templateId", "")),
            worker_name=str(worker_id.get("workerName", "")),
            status=status,
            template_version=int(data.get("templateVersion", 0)),
            retry_count=int(data.get("retryCount", 0)),
            args=tuple(str(a) for a in data.get("args", [])),
            env={str(k): str(v) for k, v in (data.get("env") or {}).items()},
        )

    @staticmethod
    def _parse_event(line: str) -> LogEvent | None:
        """Decode one stream line; unknown or malformed lines are skipped."""
        try:
            raw: Any = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed log event: %.200s", line)
            return None
        if not isinstance(raw, dict) or len(raw) != 1:
            logger.debug("Skipping unrecognised log event: %.200s", line)
            return None

        (tag, body), = raw.items()
        try:
            kind = LogEventKind(tag)
        except ValueError:
            logger.debug("Skipping log event of kind %r", tag)
            return None
        if not isinstance(body, dict):
            body = {"message": body}

        if kind is LogEventKind.LOG:
            return LogEvent(
                kind=kind,
                message=str(body.get("message", "")),
                level=str(body.get("level", "info")),
                context=body.get("context") or None,
            )
        return LogEvent(kind=kind, message=_decode_output(body))


def _decode_output(body: dict[str, Any]) -> str:
    """Stdout/stderr payloads arrive either as a byte array or as text."""
    raw_bytes = body.get("bytes")
    if isinstance(raw_bytes, list):
        return bytes(raw_bytes).decode("utf-8", errors="replace")
    return str(body.get("message", ""))


def _expect_dict(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ApiError(200, f"Unexpected response payload: {data!r}")
    return data
