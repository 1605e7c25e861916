"""Shared pytest fixtures and configuration for the golem-cli test suite.

Guidelines
----------
* No network access in any test — HTTP goes through ``httpx.MockTransport``.
* Handlers are tested against ``MagicMock`` clients at the protocol boundary.
* Tests must not depend on the caller's environment variables.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from golem_cli.infra.transport import Context, build_context

Responder = Callable[[httpx.Request], httpx.Response]


class ScriptedServer:
    """In-memory control-plane: routes ``(method, path)`` to canned responses.

    Every request is recorded in :attr:`requests` in arrival order.
    Unrouted requests get a 404 with a JSON error body.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], Responder] = {}
        self.requests: list[httpx.Request] = []

    def route(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        status: int = 200,
        content: bytes | None = None,
        responder: Responder | None = None,
    ) -> None:
        if responder is None:
            if content is not None:
                responder = lambda _req: httpx.Response(status, content=content)  # noqa: E731
            else:
                responder = lambda _req: httpx.Response(status, json=json)  # noqa: E731
        self.routes[(method, path)] = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        responder = self.routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"error": f"no route for {request.url.path}"})
        return responder(request)

    def paths(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]

    def context(self, base_url: str = "http://golem.test:9881") -> Context:
        return build_context(
            httpx.URL(base_url), False, transport=httpx.MockTransport(self),
        )


def template_json(
    template_id: str = "tpl-1",
    name: str = "shopping-cart",
    *,
    version: int = 0,
    size: int = 1024,
    exports: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Template payload in the shape the control-plane returns."""
    return {
        "versionedTemplateId": {"templateId": template_id, "version": version},
        "userTemplateId": {"versionedTemplateId": {"templateId": template_id, "version": version}},
        "protectedTemplateId": {"versionedTemplateId": {"templateId": template_id, "version": version}},
        "templateName": name,
        "templateSize": size,
        "metadata": {"exports": exports or [], "producers": []},
    }


def worker_json(
    template_id: str = "tpl-1",
    worker_name: str = "w1",
    *,
    status: str = "Running",
) -> dict[str, Any]:
    return {
        "workerId": {"templateId": template_id, "workerName": worker_name},
        "accountId": "-1",
        "args": [],
        "env": {"A": "1"},
        "status": status,
        "templateVersion": 2,
        "retryCount": 0,
    }


@pytest.fixture()
def server() -> ScriptedServer:
    return ScriptedServer()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GOLEM_BASE_URL", raising=False)
    monkeypatch.delenv("GOLEM_ALLOW_INSECURE", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Any:
    """``setup_logging`` mutates process-wide state; undo it after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    logging.disable(logging.NOTSET)
    root.handlers[:] = handlers
    root.setLevel(level)
