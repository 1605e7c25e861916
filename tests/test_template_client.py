"""Tests for LiveTemplateClient (infra/template_client.py).

The control-plane is scripted with ``httpx.MockTransport`` — these tests
check the exact requests sent and the decoding of the responses.
"""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from golem_cli.exceptions import ApiError, NotFoundError
from golem_cli.infra.template_client import LiveTemplateClient

from conftest import ScriptedServer, template_json


@pytest.fixture()
def wasm(tmp_path: Path) -> Path:
    path = tmp_path / "cart.wasm"
    path.write_bytes(b"\x00asm\x01\x00\x00\x00")
    return path


class TestAdd:
    def test_uploads_multipart_with_query_and_file(
        self, server: ScriptedServer, wasm: Path,
    ) -> None:
        server.route("POST", "/v2/templates", json=template_json("tpl-9", "cart"))
        client = LiveTemplateClient(server.context())

        template = client.add("cart", wasm)

        assert template.template_id == "tpl-9"
        assert template.name == "cart"
        request = server.requests[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        body = request.content
        assert b'name="query"' in body
        assert json.dumps({"templateName": "cart"}).encode() in body
        assert b'name="template"; filename="cart.wasm"' in body
        assert b"\x00asm" in body


class TestUpdate:
    def test_puts_raw_bytes(self, server: ScriptedServer, wasm: Path) -> None:
        server.route(
            "PUT", "/v2/templates/tpl-1/upload", json=template_json(version=1),
        )
        client = LiveTemplateClient(server.context())

        template = client.update("tpl-1", wasm)

        assert template.version == 1
        request = server.requests[0]
        assert request.headers["content-type"] == "application/octet-stream"
        assert request.content == wasm.read_bytes()


class TestQueries:
    def test_list_without_filter(self, server: ScriptedServer) -> None:
        server.route("GET", "/v2/templates", json=[template_json(), template_json("tpl-2", "b")])
        templates = LiveTemplateClient(server.context()).list()
        assert [t.template_id for t in templates] == ["tpl-1", "tpl-2"]
        assert "template-name" not in server.requests[0].url.params

    def test_list_with_name_filter(self, server: ScriptedServer) -> None:
        server.route("GET", "/v2/templates", json=[])
        assert LiveTemplateClient(server.context()).list("cart") == []
        assert server.requests[0].url.params["template-name"] == "cart"

    def test_get_latest(self, server: ScriptedServer) -> None:
        server.route("GET", "/v2/templates/tpl-1/latest", json=template_json(version=3))
        assert LiveTemplateClient(server.context()).get_latest("tpl-1").version == 3

    def test_get_versions(self, server: ScriptedServer) -> None:
        server.route(
            "GET",
            "/v2/templates/tpl-1",
            json=[template_json(version=0), template_json(version=1)],
        )
        versions = LiveTemplateClient(server.context()).get_versions("tpl-1")
        assert [t.version for t in versions] == [0, 1]

    def test_missing_template_is_not_found(self, server: ScriptedServer) -> None:
        server.route(
            "GET", "/v2/templates/nope/latest", status=404, json={"error": "Template not found"},
        )
        with pytest.raises(NotFoundError, match="Template not found"):
            LiveTemplateClient(server.context()).get_latest("nope")

    def test_non_list_payload_is_api_error(self, server: ScriptedServer) -> None:
        server.route("GET", "/v2/templates", json={"oops": True})
        with pytest.raises(ApiError):
            LiveTemplateClient(server.context()).list()


class TestDecoding:
    def test_exports_are_rendered(self) -> None:
        payload = template_json(
            exports=[
                {
                    "type": "Instance",
                    "name": "golem:it/api",
                    "functions": [
                        {
                            "name": "add",
                            "parameters": [{"name": "value", "typ": {"type": "U64"}}],
                            "results": [],
                        },
                    ],
                },
            ],
        )
        template = LiveTemplateClient._parse_template(payload)
        assert template.exports == ("golem:it/api.{add}(value: u64)",)
        assert template.size == 1024

    def test_server_error_body_is_surfaced(self, server: ScriptedServer, wasm: Path) -> None:
        server.route(
            "POST", "/v2/templates", status=409, json={"error": "Template already exists"},
        )
        with pytest.raises(ApiError) as exc_info:
            LiveTemplateClient(server.context()).add("cart", wasm)
        assert exc_info.value.status_code == 409
        assert "Template already exists" in str(exc_info.value)

    def test_unreachable_server(self, wasm: Path) -> None:
        from golem_cli.exceptions import TransportError
        from golem_cli.infra.transport import build_context

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        context = build_context(
            httpx.URL("http://golem"), False, transport=httpx.MockTransport(refuse),
        )
        with pytest.raises(TransportError):
            LiveTemplateClient(context).list()
