"""Process configuration resolved from flags, environment and defaults.

Every option that may come from more than one source goes through
:func:`resolve_setting`, which applies the fixed precedence
command-line flag → environment variable → built-in default.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

import httpx

from golem_cli.core.models import Format
from golem_cli.exceptions import InvalidConfigError

logger = logging.getLogger(__name__)

BASE_URL_ENV: str = "GOLEM_BASE_URL"
ALLOW_INSECURE_ENV: str = "GOLEM_ALLOW_INSECURE"
DEFAULT_BASE_URL: str = "http://localhost:9881"

# Values that read like "off" but, for compatibility, still enable
# insecure TLS.  Only the literal string "false" disables it.
_SUSPICIOUS_FALSE_VALUES = frozenset({"", "0", "no", "off", "False", "FALSE", "n"})


@dataclass(frozen=True, slots=True)
class Settings:
    """Resolved, validated settings shared by the whole process."""

    base_url: httpx.URL
    allow_insecure: bool
    format: Format = Format.YAML


def resolve_setting(
    flag: str | None,
    env_var: str,
    default: str,
    *,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the first value present among *flag*, ``$env_var``, *default*."""
    if flag is not None:
        return flag
    env = os.environ if environ is None else environ
    value = env.get(env_var)
    if value is not None:
        return value
    return default


def resolve_base_url(
    flag: str | None,
    *,
    environ: Mapping[str, str] | None = None,
) -> httpx.URL:
    """Resolve and validate the control-plane base URL.

    Raises
    ------
    InvalidConfigError
        If the value does not parse or is not an ``http``/``https`` URL
        with a host.
    """
    raw = resolve_setting(flag, BASE_URL_ENV, DEFAULT_BASE_URL, environ=environ)
    try:
        url = httpx.URL(raw.strip())
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidConfigError(f"Invalid base URL: {raw!r} ({exc})") from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise InvalidConfigError(
            f"Invalid base URL: {raw!r}",
            hint=f"Use --golem-url or {BASE_URL_ENV} with an http:// or https:// URL.",
        )
    return url


def resolve_allow_insecure(*, environ: Mapping[str, str] | None = None) -> bool:
    """Return whether TLS certificate verification should be disabled.

    Any value of ``GOLEM_ALLOW_INSECURE`` other than the literal string
    ``false`` enables insecure mode.  Values that look like a negative
    spelling are honoured as-is but logged at ERROR, so the default
    verbosity still shows the message.
    """
    env = os.environ if environ is None else environ
    value = env.get(ALLOW_INSECURE_ENV)
    if value is None or value == "false":
        return False
    if value in _SUSPICIOUS_FALSE_VALUES:
        logger.error(
            "%s=%r enables insecure TLS; set it to 'false' to keep "
            "certificate verification on",
            ALLOW_INSECURE_ENV,
            value,
        )
    return True


def load_settings(
    golem_url: str | None,
    output_format: Format,
    *,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build :class:`Settings` from parsed flags and the environment."""
    return Settings(
        base_url=resolve_base_url(golem_url, environ=environ),
        allow_insecure=resolve_allow_insecure(environ=environ),
        format=output_format,
    )
