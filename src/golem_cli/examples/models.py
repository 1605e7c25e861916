"""Value types for the built-in example catalog."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any

from golem_cli.core.models import TableRows


class GuestLanguageTier(enum.IntEnum):
    """Support tier of a guest language; tier 1 is the best supported."""

    TIER1 = 1
    TIER2 = 2
    TIER3 = 3

    @classmethod
    def parse(cls, raw: str) -> GuestLanguageTier:
        """Accept ``1``, ``tier1`` or ``Tier1``."""
        text = raw.strip().lower()
        if text.startswith("tier"):
            text = text[len("tier"):]
        try:
            return cls(int(text))
        except ValueError as exc:
            raise ValueError(f"unknown tier {raw!r} (expected 1, 2 or 3)") from exc

    def __str__(self) -> str:
        return f"tier{self.value}"


class GuestLanguage(enum.Enum):
    """Languages an example can be written in."""

    RUST = ("rust", "Rust", GuestLanguageTier.TIER1)
    GO = ("go", "Go", GuestLanguageTier.TIER2)
    C = ("c", "C", GuestLanguageTier.TIER2)
    ZIG = ("zig", "Zig", GuestLanguageTier.TIER3)
    JS = ("js", "JavaScript", GuestLanguageTier.TIER2)
    TS = ("ts", "TypeScript", GuestLanguageTier.TIER2)
    PYTHON = ("python", "Python", GuestLanguageTier.TIER2)

    def __init__(self, id: str, display_name: str, tier: GuestLanguageTier) -> None:
        self.id = id
        self.display_name = display_name
        self.tier = tier

    @classmethod
    def parse(cls, raw: str) -> GuestLanguage:
        """Accept the short id or the display name, case-insensitively."""
        text = raw.strip().lower()
        for language in cls:
            if text in (language.id, language.display_name.lower()):
                return language
        known = ", ".join(language.id for language in cls)
        raise ValueError(f"unknown language {raw!r} (expected one of: {known})")

    def __str__(self) -> str:
        return self.id


_TEMPLATE_NAME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]*$")
_PACKAGE_PART_RE = re.compile(r"^[a-z][a-z0-9-]*$")


def is_valid_template_name(name: str) -> bool:
    """Names start with a letter and contain letters, digits, ``-`` or ``_``."""
    return bool(_TEMPLATE_NAME_RE.match(name))


@dataclass(frozen=True, slots=True)
class PackageName:
    """A ``namespace:name`` package identifier, e.g. ``golem:component``."""

    namespace: str
    name: str

    @classmethod
    def parse(cls, raw: str) -> PackageName:
        parts = raw.strip().split(":")
        if len(parts) != 2 or not all(_PACKAGE_PART_RE.match(p) for p in parts):
            raise ValueError(
                f"invalid package name {raw!r} (expected namespace:name, lowercase)"
            )
        return cls(namespace=parts[0], name=parts[1])

    def __str__(self) -> str:
        return f"{self.namespace}:{self.name}"


DEFAULT_PACKAGE_NAME = PackageName(namespace="golem", name="component")


@dataclass(frozen=True, slots=True)
class ExampleFile:
    """One file of an example; both *path* and *content* may hold placeholders."""

    path: str
    content: str
    executable: bool = False


@dataclass(frozen=True, slots=True)
class Example:
    name: str
    language: GuestLanguage
    description: str
    files: tuple[ExampleFile, ...]

    @property
    def tier(self) -> GuestLanguageTier:
        return self.language.tier


@dataclass(frozen=True, slots=True)
class ExampleList:
    """Renderable listing returned by ``list-examples``."""

    examples: tuple[Example, ...]

    def to_structured(self) -> list[dict[str, Any]]:
        return [
            {
                "name": example.name,
                "language": example.language.id,
                "tier": str(example.tier),
                "description": example.description,
            }
            for example in self.examples
        ]

    def table(self) -> TableRows:
        return (
            ("Name", "Language", "Tier", "Description"),
            [
                (e.name, e.language.display_name, str(e.tier), e.description)
                for e in self.examples
            ],
        )
