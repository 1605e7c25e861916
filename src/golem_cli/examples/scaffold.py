"""``new`` and ``list-examples`` — local, non-networked example commands."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from golem_cli.core.results import GolemResult, OkResult, StrResult
from golem_cli.examples.catalog import EXAMPLES
from golem_cli.examples.models import (
    DEFAULT_PACKAGE_NAME,
    Example,
    ExampleList,
    GuestLanguage,
    GuestLanguageTier,
    PackageName,
    is_valid_template_name,
)
from golem_cli.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)


def find_example(name: str, catalog: Iterable[Example] = EXAMPLES) -> Example:
    """Return the example called *name* or raise :class:`NotFoundError`."""
    for example in catalog:
        if example.name == name:
            return example
    raise NotFoundError(
        f"Unknown example {name!r}.",
        hint="Run `golem-cli list-examples` to see the available examples.",
    )


def _substitutions(template_name: str, package_name: PackageName) -> dict[str, str]:
    return {
        "{{template-name}}": template_name,
        "{{template_name}}": template_name.replace("-", "_"),
        "{{package-ns}}": package_name.namespace,
        "{{package-name}}": package_name.name,
        "{{package_ns}}": package_name.namespace.replace("-", "_"),
        "{{package_name}}": package_name.name.replace("-", "_"),
    }


def _expand(text: str, substitutions: dict[str, str]) -> str:
    for placeholder, value in substitutions.items():
        text = text.replace(placeholder, value)
    return text


def process_new(
    example: str,
    template_name: str,
    package_name: PackageName | None = None,
    *,
    root: Path | None = None,
) -> GolemResult:
    """Instantiate *example* into ``<root>/<template_name>/``.

    Parameters
    ----------
    example:
        Catalog name, e.g. ``rust-hello``.
    template_name:
        Name of the new template; also the target directory name.
    package_name:
        ``namespace:name`` used in generated interface files.  Defaults
        to ``golem:component``.
    root:
        Parent directory; defaults to the current working directory.

    Raises
    ------
    InvalidArgumentError
        If *template_name* is not a legal name.
    NotFoundError
        If the example is unknown.
    AlreadyExistsError
        If the target directory already exists.
    """
    if not is_valid_template_name(template_name):
        raise InvalidArgumentError(
            f"Illegal template name {template_name!r}.",
            hint="Use letters, digits, '-' and '_', starting with a letter.",
        )
    selected = find_example(example)
    package = package_name or DEFAULT_PACKAGE_NAME

    target = (root or Path.cwd()) / template_name
    if target.exists():
        raise AlreadyExistsError(f"Directory {target} already exists.")

    substitutions = _substitutions(template_name, package)
    logger.info("Instantiating %s into %s", selected.name, target)

    target.mkdir(parents=True)
    try:
        for file in selected.files:
            path = target / _expand(file.path, substitutions)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_expand(file.content, substitutions), encoding="utf-8")
            if file.executable:
                path.chmod(0o755)
            logger.debug("Wrote %s", path)
    except BaseException:
        # No half-written project is left behind.
        logger.debug("Removing partially written %s", target)
        shutil.rmtree(target, ignore_errors=True)
        raise

    return StrResult(
        f"Created {selected.language.display_name} template {template_name!r} "
        f"from example {selected.name!r} in {target}"
    )


def process_list_examples(
    min_tier: GuestLanguageTier | None = None,
    language: GuestLanguage | None = None,
    *,
    catalog: Iterable[Example] = EXAMPLES,
) -> GolemResult:
    """List catalog examples, keeping catalog order.

    *min_tier* keeps languages whose tier is at least as well supported
    (numerically lower or equal); *language* keeps a single language.
    """
    selected = tuple(
        example
        for example in catalog
        if (language is None or example.language is language)
        and (min_tier is None or example.tier <= min_tier)
    )
    return OkResult(ExampleList(examples=selected))
