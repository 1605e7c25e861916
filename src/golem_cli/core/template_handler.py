"""Template handler — validates and executes ``template`` sub-commands.

Depends on a :class:`~golem_cli.core.protocols.TemplateClient` injected
at construction time.  Besides the four user-facing sub-commands it
provides :meth:`TemplateHandler.find_by_name`, which the worker handler
borrows to turn a template name into a template id.

Guarantees
----------
* Local files are checked before any upload request is made.
* Name resolution is cached, so resolving the same name twice in one
  process yields the same id without a second request.
* Only :class:`~golem_cli.exceptions.GolemError` subclasses escape.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from golem_cli.core.commands import (
    AddTemplate,
    GetTemplate,
    ListTemplates,
    TemplateRef,
    TemplateSubcommand,
    UpdateTemplate,
)
from golem_cli.core.models import Template, TemplateId, TemplateList
from golem_cli.core.protocols import TemplateClient
from golem_cli.core.results import GolemResult, OkResult
from golem_cli.exceptions import AmbiguousError, InvalidConfigError, NotFoundError

logger = logging.getLogger(__name__)


class TemplateHandler:
    """Executes template sub-commands against a :class:`TemplateClient`.

    Parameters
    ----------
    client:
        Any object satisfying the :class:`TemplateClient` protocol.
    """

    def __init__(self, client: TemplateClient) -> None:
        self._client: TemplateClient = client
        self._resolved: dict[str, TemplateId] = {}

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, command: TemplateSubcommand) -> GolemResult:
        if isinstance(command, AddTemplate):
            self._check_readable(command.file)
            return OkResult(self._client.add(command.name, command.file))

        if isinstance(command, UpdateTemplate):
            self._check_readable(command.file)
            template_id = self.resolve(command.template)
            return OkResult(self._client.update(template_id, command.file))

        if isinstance(command, ListTemplates):
            templates = self._client.list(command.name)
            return OkResult(TemplateList(templates=tuple(templates)))

        if isinstance(command, GetTemplate):
            template_id = self.resolve(command.template)
            if command.version is None:
                return OkResult(self._client.get_latest(template_id))
            return OkResult(self._get_version(template_id, command.version))

        raise TypeError(f"Unsupported template command: {command!r}")

    # ------------------------------------------------------------------
    # Name resolution
    # ------------------------------------------------------------------

    def find_by_name(self, name: str) -> TemplateId:
        """Return the id of the single template called *name*.

        Raises
        ------
        NotFoundError
            No template has that name.
        AmbiguousError
            More than one distinct template has that name.
        """
        cached = self._resolved.get(name)
        if cached is not None:
            return cached

        matches = [t for t in self._client.list(name) if t.name == name]
        ids = list(dict.fromkeys(t.template_id for t in matches))
        if not ids:
            raise NotFoundError(
                f"Template {name!r} not found.",
                hint="Run `golem-cli template list` to see available templates.",
            )
        if len(ids) > 1:
            raise AmbiguousError(
                f"Template name {name!r} matches {len(ids)} templates:",
                ids,
                hint="Use --template-id to pick one.",
            )

        logger.debug("Resolved template %r to %s", name, ids[0])
        self._resolved[name] = ids[0]
        return ids[0]

    def resolve(self, ref: TemplateRef) -> TemplateId:
        """Return the id for *ref*, resolving names through :meth:`find_by_name`."""
        if ref.template_id is not None:
            return ref.template_id
        if ref.template_name is None:
            raise TypeError(f"Template reference without id or name: {ref!r}")
        return self.find_by_name(ref.template_name)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_version(self, template_id: TemplateId, version: int) -> Template:
        for template in self._client.get_versions(template_id):
            if template.version == version:
                return template
        raise NotFoundError(f"Template {template_id} has no version {version}.")

    @staticmethod
    def _check_readable(file: Path) -> None:
        """Raise :class:`InvalidConfigError` unless *file* is a readable file."""
        if not file.is_file():
            raise InvalidConfigError(f"Template file not found: {file}")
        if not os.access(file, os.R_OK):
            raise InvalidConfigError(f"Template file is not readable: {file}")
