"""Render a :data:`~golem_cli.core.results.GolemResult` to stdout.

Rules
-----
* Output goes to stdout only — diagnostics never pass through here.
* ``Str`` results are already rendered and ignore ``--format``.
* ``Json`` results are pretty JSON for ``json`` and YAML otherwise
  (``text`` has no tabular form for arbitrary values).
* ``Ok`` results defer to the object: a table for ``text``, its
  structured form for ``json``/``yaml``.
"""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO

import yaml
from rich.table import Table

from golem_cli.cli.console import get_stdout_console
from golem_cli.core.models import Format
from golem_cli.core.protocols import Renderable
from golem_cli.core.results import GolemResult, JsonResult, OkResult, StrResult


def to_json(value: Any) -> str:
    """Pretty JSON with two-space indent."""
    return json.dumps(value, indent=2, ensure_ascii=False)


def to_yaml(value: Any) -> str:
    """Block-style YAML, key order preserved."""
    text = yaml.safe_dump(
        value,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )
    # Bare scalars get an explicit document end marker; drop it.
    if text.endswith("\n...\n"):
        text = text[: -len("...\n")]
    return text


def _write(out: TextIO, text: str) -> None:
    if not text:
        return
    out.write(text if text.endswith("\n") else text + "\n")
    out.flush()


def _render_table(value: Renderable, out: TextIO) -> None:
    headers, rows = value.table()
    table = Table(show_header=True, header_style="bold", border_style="dim")
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    get_stdout_console(out).print(table)


def render(result: GolemResult, fmt: Format, *, out: TextIO | None = None) -> None:
    """Write *result* to *out* (default: the current ``sys.stdout``)."""
    stream = out if out is not None else sys.stdout

    if isinstance(result, StrResult):
        _write(stream, result.text)
    elif isinstance(result, JsonResult):
        _write(stream, to_json(result.value) if fmt is Format.JSON else to_yaml(result.value))
    elif isinstance(result, OkResult):
        if fmt is Format.TEXT:
            _render_table(result.value, stream)
        elif fmt is Format.JSON:
            _write(stream, to_json(result.value.to_structured()))
        else:
            _write(stream, to_yaml(result.value.to_structured()))
    else:
        raise TypeError(f"Unsupported result: {result!r}")
