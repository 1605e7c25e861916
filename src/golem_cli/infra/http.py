"""Request helpers shared by the live API clients.

This module is the **only** place that catches raw ``httpx`` exceptions.
Transport failures become :class:`~golem_cli.exceptions.TransportError`,
non-2xx responses become :class:`~golem_cli.exceptions.NotFoundError` or
:class:`~golem_cli.exceptions.ApiError` carrying the server's message.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from urllib.parse import quote

import httpx

from golem_cli.exceptions import ApiError, NotFoundError, TransportError
from golem_cli.infra.transport import Context

logger = logging.getLogger(__name__)

API_PREFIX: str = "/v2"


def server_message(response: httpx.Response) -> str:
    """Extract the human-readable error text from an error response body.

    Understands the three error shapes the control-plane produces:
    ``{"error": "..."}``, ``{"errors": [...]}`` and
    ``{"golemError": {...}}``.  Falls back to the raw body.
    """
    try:
        body: Any = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text.strip() or response.reason_phrase

    if isinstance(body, dict):
        if isinstance(body.get("error"), str):
            return body["error"]
        errors = body.get("errors")
        if isinstance(errors, list) and errors:
            return "; ".join(str(e) for e in errors)
        if "golemError" in body:
            return json.dumps(body["golemError"], sort_keys=True)
    return response.text.strip() or response.reason_phrase


def raise_for_status(response: httpx.Response) -> None:
    """Translate a non-2xx *response* into a domain exception."""
    if response.is_success:
        return
    message = server_message(response)
    logger.debug("Error body from %s: %s", response.request.url, message)
    if response.status_code == 404:
        raise NotFoundError(message)
    raise ApiError(response.status_code, message)


class ApiClientBase:
    """Common plumbing for the live clients: URL building and error mapping."""

    def __init__(self, context: Context) -> None:
        self._context: Context = context

    @staticmethod
    def _path(*segments: str) -> str:
        """Join URL segments under the API prefix, escaping each one."""
        return "/".join((API_PREFIX, *(quote(str(s), safe="") for s in segments)))

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._context.http_client.request(method, path, **kwargs)
        except httpx.TransportError as exc:
            raise TransportError(
                f"Cannot reach {self._context.base_url}: {exc}",
                hint="Check --golem-url / GOLEM_BASE_URL and that the server is running.",
            ) from exc
        raise_for_status(response)
        return response

    def _request_json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ApiError(
                response.status_code,
                f"Response is not valid JSON: {response.text[:200]!r}",
            ) from exc

    @contextmanager
    def _stream(self, method: str, path: str, **kwargs: Any) -> Iterator[httpx.Response]:
        """Open a streaming response; the socket is closed on exit.

        A server that drops or resets an established stream ends it
        normally; any failure before the response headers arrive is a
        :class:`TransportError`.
        """
        established = False
        try:
            with self._context.http_client.stream(method, path, **kwargs) as response:
                if not response.is_success:
                    response.read()
                    raise_for_status(response)
                established = True
                yield response
        except httpx.TransportError as exc:
            if not established:
                raise TransportError(
                    f"Stream from {self._context.base_url} failed: {exc}",
                    hint="Check --golem-url / GOLEM_BASE_URL and that the server is running.",
                ) from exc
            logger.info("Server closed the stream: %s", exc)
