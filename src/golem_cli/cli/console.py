"""Rich consoles for the CLI layer.

Two streams, two roles: :data:`console` writes diagnostics to stderr,
while :func:`get_stdout_console` is used only by the renderer for
command output.  Neither binds the stream at import time, so redirected
``sys.stdout``/``sys.stderr`` are always honoured.
"""

from __future__ import annotations

from typing import TextIO

from rich.console import Console


def get_rich_console() -> Console:
	"""Create a Rich console instance targeting stderr."""
	return Console(stderr=True, highlight=False)


def get_stdout_console(file: TextIO | None = None) -> Console:
	"""Create a Rich console for command output (stdout unless *file* given)."""
	return Console(file=file, highlight=False, soft_wrap=True)


class _ConsoleProxy:
	"""``print``-compatible proxy creating a fresh stderr console per call."""

	def print(self, *objects: object) -> None:
		get_rich_console().print(*objects)


console = _ConsoleProxy()
