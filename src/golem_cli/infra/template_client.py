"""httpx backed implementation of :class:`~golem_cli.core.protocols.TemplateClient`.

Speaks the ``/v2/templates`` family of the control-plane REST API and
decodes its JSON into :class:`~golem_cli.core.models.Template` values.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from golem_cli.core.models import Template, TemplateId
from golem_cli.core.signatures import render_exports
from golem_cli.exceptions import ApiError, InvalidConfigError
from golem_cli.infra.http import ApiClientBase

logger = logging.getLogger(__name__)


class LiveTemplateClient(ApiClientBase):
    """Concrete :class:`TemplateClient` talking to a running control-plane.

    This class satisfies the :class:`~golem_cli.core.protocols.TemplateClient`
    protocol structurally — no explicit inheritance required.
    """

    # ------------------------------------------------------------------
    # Protocol methods
    # ------------------------------------------------------------------

    def add(self, name: str, file: Path) -> Template:
        logger.info("Uploading new template %r from %s", name, file)
        query = json.dumps({"templateName": name})
        with _open_upload(file) as fh:
            data = self._request_json(
                "POST",
                self._path("templates"),
                files={
                    "query": (None, query, "application/json"),
                    "template": (file.name, fh, "application/octet-stream"),
                },
            )
        return self._parse_template(data)

    def update(self, template_id: TemplateId, file: Path) -> Template:
        logger.info("Uploading new version of template %s from %s", template_id, file)
        with _open_upload(file) as fh:
            data = self._request_json(
                "PUT",
                self._path("templates", template_id, "upload"),
                content=fh.read(),
                headers={"Content-Type": "application/octet-stream"},
            )
        return self._parse_template(data)

    def list(self, name: str | None = None) -> list[Template]:
        params = {"template-name": name} if name is not None else None
        data = self._request_json("GET", self._path("templates"), params=params)
        return self._parse_template_list(data)

    def get_latest(self, template_id: TemplateId) -> Template:
        data = self._request_json(
            "GET", self._path("templates", template_id, "latest"),
        )
        return self._parse_template(data)

    def get_versions(self, template_id: TemplateId) -> list[Template]:
        data = self._request_json("GET", self._path("templates", template_id))
        return self._parse_template_list(data)

    # ------------------------------------------------------------------
    # Raw JSON → domain-model parsers (pure)
    # ------------------------------------------------------------------

    @staticmethod
    def _parse_template(data: Any) -> Template:
        """Convert one template JSON object into a :class:`Template`."""
        if not isinstance(data, dict):
            raise ApiError(200, f"Unexpected template payload: {data!r}")
        versioned = data.get("versionedTemplateId") or {}
        metadata = data.get("metadata") or {}
        return Template(
            template_id=str(versioned.get("templateId", "")),
            version=int(versioned.get("version", 0)),
            name=str(data.get("templateName", "")),
            size=int(data.get("templateSize", 0)),
            exports=render_exports(metadata.get("exports") or []),
        )

    @classmethod
    def _parse_template_list(cls, data: Any) -> list[Template]:
        if not isinstance(data, list):
            raise ApiError(200, f"Expected a list of templates, got: {data!r}")
        return [cls._parse_template(entry) for entry in data]


def _open_upload(file: Path) -> Any:
    """Open *file* for upload, mapping OS errors to :class:`InvalidConfigError`."""
    try:
        return file.open("rb")
    except OSError as exc:
        raise InvalidConfigError(f"Cannot read template file {file}: {exc}") from exc
