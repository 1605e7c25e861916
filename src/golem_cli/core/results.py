"""Handler return carrier.

Every handler returns exactly one of three shapes, which the renderer
turns into stdout output:

* :class:`OkResult` — a :class:`~golem_cli.core.protocols.Renderable`
  domain object that knows its own table and structured form.
* :class:`StrResult` — an already rendered message.
* :class:`JsonResult` — a plain JSON value serialised per ``--format``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from golem_cli.core.protocols import Renderable


@dataclass(frozen=True, slots=True)
class OkResult:
    value: Renderable


@dataclass(frozen=True, slots=True)
class StrResult:
    text: str


@dataclass(frozen=True, slots=True)
class JsonResult:
    value: Any


GolemResult = Union[OkResult, StrResult, JsonResult]
