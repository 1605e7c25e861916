"""CLI application entry point and command routing for golem-cli.

This module is the **sole error boundary** for the entire application.
It catches :class:`~golem_cli.exceptions.GolemError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
on stderr and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the handlers
  in ``core`` and the local commands in ``examples``.
* The argparse namespace never leaves this module; it is converted into
  the typed commands of :mod:`golem_cli.core.commands` first.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

from rich.markup import escape

from golem_cli.cli import exit_codes
from golem_cli.cli.console import console
from golem_cli.cli.logging_setup import setup_logging
from golem_cli.cli.render import render
from golem_cli.config import load_settings
from golem_cli.core import commands as cmd
from golem_cli.core.models import Format, Verbosity
from golem_cli.core.results import GolemResult
from golem_cli.core.template_handler import TemplateHandler
from golem_cli.core.worker_handler import WorkerHandler
from golem_cli.examples import process_list_examples, process_new
from golem_cli.examples.models import GuestLanguage, GuestLanguageTier, PackageName
from golem_cli.exceptions import CancelledError, GolemError
from golem_cli.infra.template_client import LiveTemplateClient
from golem_cli.infra.transport import Context, build_context
from golem_cli.infra.worker_client import LiveWorkerClient
from golem_cli.version import __version__

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Top level, command (``template``) and action (``template list``).
_OPTION_LEVELS = 3


# ---------------------------------------------------------------------------
# Argument types
# ---------------------------------------------------------------------------

def _typed(parse: Callable[[str], T]) -> Callable[[str], T]:
    """Adapt a ``ValueError``-raising parser to argparse's diagnostics."""

    def convert(raw: str) -> T:
        try:
            return parse(raw)
        except ValueError as exc:
            raise argparse.ArgumentTypeError(str(exc)) from exc

    return convert


def _parse_env(raw: str) -> tuple[str, str]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise ValueError(f"invalid environment variable {raw!r} (expected KEY=VALUE)")
    return key, value


def _non_negative(raw: str) -> int:
    value = int(raw)
    if value < 0:
        raise ValueError(f"expected a non-negative integer, got {raw!r}")
    return value


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _global_options(level: int) -> argparse.ArgumentParser:
    """Options accepted before and after each sub-command.

    Defaults are suppressed so a value given at any level survives;
    :func:`main` fills in the real defaults.  Each nesting *level* counts
    ``-v`` into its own attribute, since a sub-parser's namespace replaces
    the values its parent already parsed.
    """
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    common.add_argument(
        "-F",
        "--format",
        type=Format,
        choices=list(Format),
        help="Output format (default: yaml).",
    )
    common.add_argument(
        "-u",
        "--golem-url",
        metavar="URL",
        help="Golem base URL. Default: GOLEM_BASE_URL or http://localhost:9881.",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="count",
        dest=f"verbose_{level}",
        help="More log output on stderr (-v warn, -vv info, -vvv debug, -vvvv trace).",
    )
    common.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Disable logging.",
    )
    return common


def verbose_count(args: argparse.Namespace) -> int:
    """Total ``-v`` flags given across every command level."""
    return sum(getattr(args, f"verbose_{level}", 0) for level in range(_OPTION_LEVELS))


def _add_template_ref(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-T", "--template-id", help="Template id.")
    group.add_argument("-t", "--template-name", help="Template name.")


def _template_ref(args: argparse.Namespace) -> cmd.TemplateRef:
    return cmd.TemplateRef(template_id=args.template_id, template_name=args.template_name)


def _add_worker_name(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-w", "--worker-name", required=True, help="Worker name.")


def _parameters(args: argparse.Namespace) -> cmd.Parameters:
    return cmd.Parameters(inline=args.parameters, file=args.parameters_file)


def _add_invoke_options(parser: argparse.ArgumentParser) -> None:
    _add_template_ref(parser)
    _add_worker_name(parser)
    parser.add_argument("-f", "--function", required=True, help="Fully qualified function name.")
    params = parser.add_mutually_exclusive_group()
    params.add_argument("-j", "--parameters", help="Function parameters as JSON.")
    params.add_argument(
        "-p", "--parameters-file", type=Path, help="File containing the JSON parameters.",
    )
    parser.add_argument(
        "-k", "--invocation-key", help="Invocation key from `worker invocation-key`.",
    )


def _build_template_parser(
    subparsers: Any, command_options: argparse.ArgumentParser,
    action_options: argparse.ArgumentParser,
) -> None:
    template = subparsers.add_parser(
        "template", parents=[command_options], help="Upload and manage templates.",
    )
    actions = template.add_subparsers(dest="action", metavar="ACTION", required=True)

    add = actions.add_parser("add", parents=[action_options], help="Upload a new template.")
    add.add_argument("-t", "--template-name", required=True, help="Name of the new template.")
    add.add_argument("template_file", type=Path, help="Compiled WASM component.")
    add.set_defaults(build=lambda a: cmd.AddTemplate(name=a.template_name, file=a.template_file))

    update = actions.add_parser(
        "update", parents=[action_options], help="Upload a new version of a template.",
    )
    _add_template_ref(update)
    update.add_argument("template_file", type=Path, help="Compiled WASM component.")
    update.set_defaults(
        build=lambda a: cmd.UpdateTemplate(template=_template_ref(a), file=a.template_file),
    )

    list_ = actions.add_parser("list", parents=[action_options], help="List templates.")
    list_.add_argument("-t", "--template-name", help="Only templates with this name.")
    list_.set_defaults(build=lambda a: cmd.ListTemplates(name=a.template_name))

    get = actions.add_parser("get", parents=[action_options], help="Show a template.")
    _add_template_ref(get)
    get.add_argument("--version", type=_typed(_non_negative), help="Specific version.")
    get.set_defaults(
        build=lambda a: cmd.GetTemplate(template=_template_ref(a), version=a.version),
    )


def _build_worker_parser(
    subparsers: Any, command_options: argparse.ArgumentParser,
    action_options: argparse.ArgumentParser,
) -> None:
    worker = subparsers.add_parser(
        "worker", parents=[command_options], help="Create, invoke and control workers.",
    )
    actions = worker.add_subparsers(dest="action", metavar="ACTION", required=True)

    add = actions.add_parser("add", parents=[action_options], help="Create a worker.")
    _add_template_ref(add)
    _add_worker_name(add)
    add.add_argument(
        "-e",
        "--env",
        action="append",
        type=_typed(_parse_env),
        default=[],
        metavar="KEY=VALUE",
        help="Environment variable (repeatable).",
    )
    add.add_argument("args", nargs="*", help="Worker arguments.")
    add.set_defaults(
        build=lambda a: cmd.AddWorker(
            template=_template_ref(a),
            worker_name=a.worker_name,
            env=tuple(a.env),
            args=tuple(a.args),
        ),
    )

    list_ = actions.add_parser("list", parents=[action_options], help="List workers of a template.")
    _add_template_ref(list_)
    list_.add_argument(
        "--filter", action="append", default=[], dest="filters", help="Filter (repeatable).",
    )
    list_.add_argument("--count", type=_typed(_non_negative), help="Page size.")
    list_.add_argument("--cursor", type=_typed(_non_negative), help="Cursor of the page.")
    list_.add_argument("--precise", action="store_true", help="Request precise metadata.")
    list_.set_defaults(
        build=lambda a: cmd.ListWorkers(
            template=_template_ref(a),
            filters=tuple(a.filters),
            count=a.count,
            cursor=a.cursor,
            precise=a.precise,
        ),
    )

    invoke = actions.add_parser(
        "invoke", parents=[action_options], help="Invoke a function without waiting.",
    )
    _add_invoke_options(invoke)
    invoke.set_defaults(
        build=lambda a: cmd.Invoke(
            template=_template_ref(a),
            worker_name=a.worker_name,
            function=a.function,
            parameters=_parameters(a),
            invocation_key=a.invocation_key,
        ),
    )

    invoke_and_await = actions.add_parser(
        "invoke-and-await", parents=[action_options], help="Invoke a function and wait for the result.",
    )
    _add_invoke_options(invoke_and_await)
    invoke_and_await.add_argument(
        "--use-stdio", action="store_true", help="Use the stdio calling convention.",
    )
    invoke_and_await.set_defaults(
        build=lambda a: cmd.InvokeAndAwait(
            template=_template_ref(a),
            worker_name=a.worker_name,
            function=a.function,
            parameters=_parameters(a),
            invocation_key=a.invocation_key,
            use_stdio=a.use_stdio,
        ),
    )

    simple: list[tuple[str, str, Callable[..., Any]]] = [
        ("delete", "Delete a worker.", cmd.DeleteWorker),
        ("get", "Show worker metadata.", cmd.GetWorker),
        ("invocation-key", "Obtain a single-use invocation key.", cmd.GetInvocationKey),
        ("connect", "Stream the worker's output until interrupted.", cmd.Connect),
        ("interrupt", "Interrupt a running worker.", cmd.Interrupt),
        ("simulated-crash", "Simulate a crash and recover the worker.", cmd.SimulatedCrash),
    ]
    for name, help_text, command_type in simple:
        sub = actions.add_parser(name, parents=[action_options], help=help_text)
        _add_template_ref(sub)
        _add_worker_name(sub)
        sub.set_defaults(
            build=lambda a, t=command_type: t(template=_template_ref(a), worker_name=a.worker_name),
        )


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``golem-cli template …`` / ``golem-cli worker …`` — remote commands
    * ``golem-cli new …`` / ``golem-cli list-examples`` — local scaffolding
    * ``golem-cli --version``
    """
    command_options = _global_options(1)
    action_options = _global_options(2)
    parser = argparse.ArgumentParser(
        prog="golem-cli",
        description="Command line interface for the open-source Golem platform.",
        parents=[_global_options(0)],
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    _build_template_parser(subparsers, command_options, action_options)
    _build_worker_parser(subparsers, command_options, action_options)

    new = subparsers.add_parser(
        "new", parents=[command_options], help="Create a new template project from an example.",
    )
    new.add_argument("-e", "--example", required=True, help="Example name.")
    new.add_argument("-t", "--template-name", required=True, help="Name of the new template.")
    new.add_argument(
        "-p",
        "--package-name",
        type=_typed(PackageName.parse),
        help="Package name as namespace:name (default: golem:component).",
    )

    list_examples = subparsers.add_parser(
        "list-examples", parents=[command_options], help="List the built-in examples.",
    )
    list_examples.add_argument(
        "-m", "--min-tier", type=_typed(GuestLanguageTier.parse), help="Minimum language tier.",
    )
    list_examples.add_argument(
        "-l", "--language", type=_typed(GuestLanguage.parse), help="Only this language.",
    )
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_remote(args: argparse.Namespace, context: Context) -> GolemResult:
    """Build the handler graph on *context* and dispatch one command."""
    templates = TemplateHandler(LiveTemplateClient(context))
    command = args.build(args)

    if args.command == "template":
        return templates.handle(command)

    workers = WorkerHandler(LiveWorkerClient(context), templates)
    return workers.handle(command)


def _handle_local(args: argparse.Namespace) -> GolemResult:
    if args.command == "new":
        return process_new(args.example, args.template_name, args.package_name)
    return process_list_examples(args.min_tier, args.language)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the golem-cli CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.  Parse failures exit with
        :data:`exit_codes.USAGE_ERROR` through argparse's ``SystemExit``.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    setup_logging(Verbosity.from_flags(verbose_count(args), getattr(args, "quiet", False)))
    output_format: Format = getattr(args, "format", Format.YAML)

    if args.command in ("new", "list-examples"):
        result = _handle_local(args)
    else:
        settings = load_settings(getattr(args, "golem_url", None), output_format)
        context = build_context(settings.base_url, settings.allow_insecure)
        try:
            result = _handle_remote(args, context)
        finally:
            context.close()

    render(result, output_format)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Error boundary
# ---------------------------------------------------------------------------

def _error_kind(exc: GolemError) -> str:
    """``InvalidArgumentError`` → ``InvalidArgument``."""
    name = type(exc).__name__
    return name[: -len("Error")] if name.endswith("Error") and name != "GolemError" else name


def run(argv: list[str] | None = None) -> int:
    """Run :func:`main` inside the error boundary and return the exit code."""
    try:
        return main(argv)
    except GolemError as exc:
        console.print(f"[bold red]Error ({_error_kind(exc)}):[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        if isinstance(exc, CancelledError):
            return exit_codes.KEYBOARD_INTERRUPT
        return exit_codes.GENERAL_ERROR
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        return exit_codes.KEYBOARD_INTERRUPT
    except Exception as exc:  # noqa: BLE001
        logger.debug("Unexpected error", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        return exit_codes.GENERAL_ERROR


def cli() -> None:
    """Top-level entry point invoked by the console script.

    This function wraps :func:`run` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    sys.exit(run())
