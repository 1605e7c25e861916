"""Custom exception hierarchy for golem-cli.

All exceptions that cross layer boundaries must inherit from
:class:`GolemError`.  Raw third-party exceptions (e.g. from httpx)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Hierarchy
---------
GolemError
├── InvalidConfigError
├── InvalidArgumentError
├── NotFoundError
├── AmbiguousError
├── ApiError
├── TransportError
├── CancelledError
└── AlreadyExistsError
"""

from __future__ import annotations

from collections.abc import Sequence


class GolemError(Exception):
    """Base exception for all golem-cli errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Local input -----------------------------------------------------------

class InvalidConfigError(GolemError):
    """Raised for a bad base URL or an unreadable local file."""


class InvalidArgumentError(GolemError):
    """Raised when a command argument is syntactically valid but unusable."""


class AlreadyExistsError(GolemError):
    """Raised when a scaffold target directory is already present."""


# --- Lookup ----------------------------------------------------------------

class NotFoundError(GolemError):
    """Raised when a resource does not exist on the server or locally."""


class AmbiguousError(GolemError):
    """Raised when a template name matches more than one template."""

    def __init__(
        self,
        message: str,
        candidates: Sequence[str],
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.candidates: tuple[str, ...] = tuple(candidates)

    def __str__(self) -> str:
        lines = [super().__str__()]
        lines.extend(f"  - {candidate}" for candidate in self.candidates)
        return "\n".join(lines)


# --- Remote ----------------------------------------------------------------

class ApiError(GolemError):
    """Raised when the control-plane answers with a non-2xx status."""

    def __init__(
        self,
        status_code: int,
        server_message: str,
        *,
        hint: str | None = None,
    ) -> None:
        super().__init__(
            f"Server responded with HTTP {status_code}: {server_message}",
            hint=hint,
        )
        self.status_code: int = status_code
        self.server_message: str = server_message


class TransportError(GolemError):
    """Raised when the control-plane cannot be reached (refused, TLS, …)."""


# --- Lifecycle -------------------------------------------------------------

class CancelledError(GolemError):
    """Raised when the user interrupts an operation before it completed."""
