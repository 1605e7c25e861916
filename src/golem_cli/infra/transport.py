"""Infrastructure: shared HTTP transport.

Builds the single connection-pooled :class:`httpx.Client` used by every
API client for the lifetime of the process.

Rules
-----
* One client per process; API clients borrow it through :class:`Context`.
* No global timeout — the control-plane enforces server-side bounds and
  ``worker connect`` is open-ended.
* Request/response tracing is emitted at DEBUG through event hooks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from golem_cli.version import __version__

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Context:
    """Base URL plus the shared HTTP client.

    Attributes
    ----------
    base_url : httpx.URL
        Root of the control-plane, e.g. ``http://localhost:9881``.
    http_client : httpx.Client
        Pooled client, read-only after construction.
    """

    base_url: httpx.URL
    http_client: httpx.Client

    def close(self) -> None:
        self.http_client.close()


def _log_request(request: httpx.Request) -> None:
    logger.debug("--> %s %s", request.method, request.url)


def _log_response(response: httpx.Response) -> None:
    request = response.request
    logger.debug(
        "<-- %s %s %s %s",
        response.status_code,
        response.reason_phrase,
        request.method,
        request.url,
    )


def build_context(
    base_url: httpx.URL,
    allow_insecure: bool,
    *,
    transport: httpx.BaseTransport | None = None,
) -> Context:
    """Create the process-wide :class:`Context`.

    Parameters
    ----------
    base_url:
        Validated control-plane URL.
    allow_insecure:
        When ``True`` invalid TLS certificates are accepted.
    transport:
        Optional transport override; tests pass an
        :class:`httpx.MockTransport` here.
    """
    if allow_insecure:
        logger.error("TLS certificate verification is disabled")

    client = httpx.Client(
        base_url=base_url,
        verify=not allow_insecure,
        timeout=None,
        headers={"User-Agent": f"golem-cli/{__version__}"},
        event_hooks={"request": [_log_request], "response": [_log_response]},
        transport=transport,
    )
    logger.debug("HTTP client ready for %s (insecure=%s)", base_url, allow_insecure)
    return Context(base_url=base_url, http_client=client)
