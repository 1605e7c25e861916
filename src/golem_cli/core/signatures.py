"""Render template export metadata as human-readable function signatures.

The control-plane describes every exported function with a recursive
type tree (``{"type": "List", "inner": {...}}`` and so on).  This module
flattens that tree into WIT-like text such as::

    golem:it/api.{add-item}(item: record { id: string, qty: u32 }) -> bool

Pure functions only; unknown shapes degrade to their ``type`` tag rather
than failing, so a newer server never breaks ``template list``.
"""

from __future__ import annotations

from typing import Any

_PRIMITIVES: dict[str, str] = {
    "Bool": "bool",
    "S8": "s8",
    "U8": "u8",
    "S16": "s16",
    "U16": "u16",
    "S32": "s32",
    "U32": "u32",
    "S64": "s64",
    "U64": "u64",
    "F32": "f32",
    "F64": "f64",
    "Chr": "char",
    "Str": "string",
}


def render_type(typ: Any) -> str:
    """Render one analysed type node."""
    if not isinstance(typ, dict):
        return "?"
    tag = str(typ.get("type", "?"))

    if tag in _PRIMITIVES:
        return _PRIMITIVES[tag]
    if tag == "List":
        return f"list<{render_type(typ.get('inner'))}>"
    if tag == "Option":
        return f"option<{render_type(typ.get('inner'))}>"
    if tag == "Tuple":
        items = ", ".join(render_type(item) for item in typ.get("items", []))
        return f"tuple<{items}>"
    if tag == "Result":
        return _render_result(typ)
    if tag == "Record":
        fields = ", ".join(
            f"{f.get('name')}: {render_type(f.get('typ'))}"
            for f in typ.get("fields", [])
        )
        return f"record {{ {fields} }}"
    if tag == "Variant":
        cases = ", ".join(_render_case(case) for case in typ.get("cases", []))
        return f"variant {{ {cases} }}"
    if tag == "Enum":
        return f"enum {{ {', '.join(typ.get('cases', []))} }}"
    if tag == "Flags":
        return f"flags {{ {', '.join(typ.get('names', []))} }}"
    if tag == "Handle":
        mode = "borrow" if typ.get("mode") == "Borrowed" else "own"
        return f"{mode}<handle<{typ.get('resource_id', '?')}>>"
    return tag.lower()


def _render_result(typ: dict[str, Any]) -> str:
    ok = typ.get("ok")
    err = typ.get("error")
    if ok is None and err is None:
        return "result"
    if err is None:
        return f"result<{render_type(ok)}>"
    if ok is None:
        return f"result<_, {render_type(err)}>"
    return f"result<{render_type(ok)}, {render_type(err)}>"


def _render_case(case: dict[str, Any]) -> str:
    if case.get("typ") is None:
        return str(case.get("name"))
    return f"{case.get('name')}({render_type(case.get('typ'))})"


def render_function(prefix: str, function: dict[str, Any]) -> str:
    """Render a single exported function, optionally inside an instance."""
    name = function.get("name", "?")
    params = ", ".join(
        f"{p.get('name')}: {render_type(p.get('typ'))}"
        for p in function.get("parameters", [])
    )
    head = f"{prefix}.{{{name}}}" if prefix else str(name)
    return f"{head}({params}){_render_results(function.get('results', []))}"


def _render_results(results: list[dict[str, Any]]) -> str:
    if not results:
        return ""
    if len(results) == 1 and results[0].get("name") is None:
        return f" -> {render_type(results[0].get('typ'))}"
    named = ", ".join(
        f"{r.get('name')}: {render_type(r.get('typ'))}" for r in results
    )
    return f" -> ({named})"


def render_exports(exports: list[Any]) -> tuple[str, ...]:
    """Flatten the export list of a template into one signature per function."""
    rendered: list[str] = []
    for export in exports:
        if not isinstance(export, dict):
            continue
        if export.get("type") == "Instance":
            instance = str(export.get("name", ""))
            rendered.extend(
                render_function(instance, fn) for fn in export.get("functions", [])
            )
        else:
            rendered.append(render_function("", export))
    return tuple(rendered)
