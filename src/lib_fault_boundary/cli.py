"""CLI adapter for ``lib_fault_boundary`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the bundled boundaries on the command line so operators can inspect
section stores and probe devices, and so the error taxonomy has one visible
top-level handler: every :class:`TranslatedError` that reaches a command is
printed once and mapped to a stable exit code keyed only on its kind.

Contents
--------
* :data:`EXIT_CODES` – ``ErrorKind`` to process exit code.
* :func:`cli` – root command wiring traceback handling and settings.
* :func:`cli_info` / :func:`cli_kinds` – metadata and taxonomy listing.
* :func:`cli_sections` / :func:`cli_section` – section store access.
* :func:`cli_probe` – opens a simulated device with optional scripted failures.
* :func:`cli_fail` – raises an untranslated failure for traceback testing.
* :func:`main` – entry point used by ``console_scripts`` registration.
"""

from __future__ import annotations

import functools
import json
import sys
from importlib import metadata
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Final, Mapping, Optional, Sequence, TypeVar

import lib_cli_exit_tools
import rich_click as click

from .adapters.device.boundary import DeviceBoundary
from .adapters.device.driver import GenericDeviceError, ResponseTimeout, SimulatedDriver, Unlocked
from .adapters.file_store.boundary import FileSectionStore
from .application.retry import call_with_retry
from .domain.errors import ErrorKind, TranslatedError
from .observability import bind_trace_id, log_translated_error
from .settings import Settings, load_settings
from .testing import i_should_fail

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000

EXIT_CODES: Final[Mapping[ErrorKind, int]] = MappingProxyType(
    {
        ErrorKind.INVALID_ARGUMENT: 22,
        ErrorKind.NOT_FOUND: 2,
        ErrorKind.PERMISSION_DENIED: 13,
        ErrorKind.DEVICE_UNAVAILABLE: 19,
        ErrorKind.STORAGE_FAILURE: 5,
        ErrorKind.TIMEOUT: 110,
        ErrorKind.UNKNOWN: 1,
    }
)

_SIMULATED_FAILURES: Final[Mapping[str, Callable[[str], BaseException] | None]] = MappingProxyType(
    {
        "none": None,
        "response-timeout": ResponseTimeout,
        "unlocked": Unlocked,
        "generic": GenericDeviceError,
    }
)

F = TypeVar("F", bound=Callable[..., Any])


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_fault_boundary")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def exit_code_for(error: TranslatedError) -> int:
    """Return the process exit code for *error*.

    Examples
    --------
    >>> exit_code_for(TranslatedError("not_found", "retrieve_section", "missing"))
    2
    """

    return EXIT_CODES.get(error.kind, 1)


def _exit_on_translated_error(func: F) -> F:
    """Print a translated error once and exit with its kind-specific code."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except TranslatedError as error:
            click.echo(f"Error: {error}", err=True)
            raise SystemExit(exit_code_for(error)) from error

    return wrapper  # type: ignore[return-value]


@click.group(
    help="Fault-isolation boundaries for unreliable collaborators",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_fault_boundary",
    message="lib_fault_boundary version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
@_exit_on_translated_error
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference and runtime settings.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and binds the configured
        trace identifier.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    settings = load_settings()
    ctx.obj["settings"] = settings
    bind_trace_id(settings.trace_id)
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_fault_boundary")
    except metadata.PackageNotFoundError:
        click.echo("lib_fault_boundary (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_fault_boundary')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("kinds", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_kinds() -> None:
    """List every error kind with the exit code the CLI uses for it."""

    for kind in ErrorKind:
        click.echo(f"{kind.value}\t{EXIT_CODES[kind]}")


@cli.command("sections", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path", type=click.Path(path_type=Path, dir_okay=True, file_okay=True))
@_exit_on_translated_error
def cli_sections(path: Path) -> None:
    """Print the section names of the document at PATH as a JSON array."""

    store = FileSectionStore(path, sink=log_translated_error)
    click.echo(json.dumps(list(store.list_sections())))


@cli.command("section", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("path", type=click.Path(path_type=Path, dir_okay=True, file_okay=True))
@click.argument("name")
@click.option("--indent", type=int, default=None, help="Pretty-print JSON output with the provided indent size")
@_exit_on_translated_error
def cli_section(path: Path, name: str, indent: Optional[int]) -> None:
    """Print section NAME of the document at PATH as JSON."""

    store = FileSectionStore(path, sink=log_translated_error)
    click.echo(store.retrieve_section(name).to_json(indent=indent))


@cli.command("probe", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--fail",
    "failure",
    type=click.Choice(tuple(_SIMULATED_FAILURES), case_sensitive=False),
    default="none",
    show_default=True,
    help="Driver failure raised while opening the simulated device",
)
@click.option("--failures", type=click.IntRange(min=0), default=1, show_default=True, help="How many opens fail")
@click.option("--attempts", type=click.IntRange(min=1), default=None, help="Override the configured retry attempts")
@click.pass_context
@_exit_on_translated_error
def cli_probe(ctx: click.Context, failure: str, failures: int, attempts: Optional[int]) -> None:
    """Open a simulated device, query its identity, and drain queued events.

    Opening is retried for the kinds listed in ``LIB_FAULT_BOUNDARY_RETRY__ON``.
    """

    settings: Settings = ctx.obj["settings"]
    factory = _SIMULATED_FAILURES[failure.lower()]
    scripted = [factory(f"simulated {failure}") for _ in range(failures)] if factory else []
    boundary = DeviceBoundary(SimulatedDriver(open_failures=scripted), sink=log_translated_error)

    def _probe() -> dict[str, object]:
        with boundary.session() as session:
            return {"identity": session.query("*IDN?"), "events": list(session.pending_events())}

    result = call_with_retry(
        _probe,
        retry_on=settings.retry_on,
        attempts=attempts or settings.retry_attempts,
        delay=settings.retry_delay,
    )
    click.echo(json.dumps(result))


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_fail() -> None:
    """Raise an untranslated failure to exercise generic traceback handling."""

    i_should_fail()


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_fault_boundary",
            )
        except TranslatedError as error:
            click.echo(f"Error: {error}", err=True)
            return exit_code_for(error)
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
