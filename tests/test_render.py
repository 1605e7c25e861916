"""Tests for output rendering (cli/render.py)."""

from __future__ import annotations

import io
import json

import pytest
import yaml

from golem_cli.cli.render import render, to_json, to_yaml
from golem_cli.core.models import (
    Format,
    InvocationKey,
    Template,
    TemplateList,
    Worker,
    WorkerList,
    WorkerStatus,
)
from golem_cli.core.results import JsonResult, OkResult, StrResult


def _render(result: object, fmt: Format) -> str:
    out = io.StringIO()
    render(result, fmt, out=out)  # type: ignore[arg-type]
    return out.getvalue()


def _templates() -> TemplateList:
    return TemplateList(
        templates=(
            Template("tpl-1", 0, "shopping-cart", 1024, ("golem:it/api.{add}(value: u64)",)),
            Template("tpl-2", 3, "counter", 2048),
        ),
    )


class TestStrResult:
    @pytest.mark.parametrize("fmt", list(Format))
    def test_written_verbatim_in_every_format(self, fmt: Format) -> None:
        assert _render(StrResult("Deleted"), fmt) == "Deleted\n"

    def test_existing_newline_not_doubled(self) -> None:
        assert _render(StrResult("Done\n"), Format.YAML) == "Done\n"


class TestJsonResult:
    def test_json_format(self) -> None:
        text = _render(JsonResult({"ok": [1, 2]}), Format.JSON)
        assert json.loads(text) == {"ok": [1, 2]}
        assert '\n  "ok"' in text

    def test_yaml_is_default_rendering(self) -> None:
        text = _render(JsonResult([3]), Format.YAML)
        assert yaml.safe_load(text) == [3]

    def test_text_falls_back_to_yaml(self) -> None:
        assert _render(JsonResult({"a": 1}), Format.TEXT) == "a: 1\n"


class TestOkResult:
    def test_json_uses_structured_form(self) -> None:
        text = _render(OkResult(_templates()), Format.JSON)
        data = json.loads(text)
        assert [t["templateId"] for t in data] == ["tpl-1", "tpl-2"]
        assert data[0]["exports"] == ["golem:it/api.{add}(value: u64)"]

    def test_yaml_preserves_key_order(self) -> None:
        text = _render(OkResult(InvocationKey("key-1")), Format.YAML)
        assert text == "value: key-1\n"

    def test_yaml_worker_list(self) -> None:
        page = WorkerList(
            workers=(Worker("tpl-1", "w1", WorkerStatus.IDLE, 2),),
            cursor=None,
        )
        data = yaml.safe_load(_render(OkResult(page), Format.YAML))
        assert data["workers"][0]["status"] == "Idle"
        assert data["cursor"] is None

    def test_text_renders_table(self) -> None:
        templates = TemplateList(
            templates=(
                Template("tpl-1", 0, "shopping-cart", 1024),
                Template("tpl-2", 3, "counter", 2048),
            ),
        )
        text = _render(OkResult(templates), Format.TEXT)
        for header in ("ID", "Version", "Name", "Size", "Exports"):
            assert header in text
        assert "shopping-cart" in text
        assert "counter" in text


class TestSerialisers:
    def test_to_yaml_scalar_has_no_document_end(self) -> None:
        assert to_yaml(42) == "42\n"

    def test_to_yaml_keeps_unicode(self) -> None:
        assert "héllo" in to_yaml({"m": "héllo"})

    def test_to_json_keeps_unicode(self) -> None:
        assert to_json("héllo") == '"héllo"'
