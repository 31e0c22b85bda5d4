"""CLI adapter for ``lib_fatal_assert`` built on ``lib_cli_exit_tools``.

Purpose
-------
Offer a small operator-facing surface: confirm the installation, show the
settings the environment would produce, and print a sample failure report so
the report layout can be checked in a terminal or CI log.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_settings` – prints environment-derived settings as JSON.
* :func:`cli_fail` – writes a demo failure report and exits non-zero.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The ``fail`` command runs in its own :class:`~lib_fatal_assert.core.AssertionContext`
whose terminator raises :class:`SystemExit`, so ``lib_cli_exit_tools`` decides
the final exit code exactly as for every other command.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from importlib import metadata
from typing import Final, Iterator, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import DEFAULT_PREFIX, EnvSettingsLoader
from .adapters.terminators.default import raise_system_exit
from .core import AssertionContext
from .predicates import never
from .testing import DEMO_MESSAGE

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version("lib_fatal_assert")
    except metadata.PackageNotFoundError:
        return "0.0.0"


class _StaticDump:
    """Diagnostic entry with a fixed dump, used by the demo failure."""

    def __init__(self, text: str) -> None:
        self._text = text

    def dump(self) -> str:
        return self._text


@click.group(
    help="Fatal runtime assertions with diagnostic reports",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_fatal_assert",
    message="lib_fatal_assert version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_fatal_assert")
    except metadata.PackageNotFoundError:
        click.echo("lib_fatal_assert (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_fatal_assert')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("settings", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--prefix", default=DEFAULT_PREFIX, show_default=True, help="Environment variable prefix")
def cli_settings(prefix: str) -> None:
    """Print the settings the current environment produces, as JSON."""

    settings = EnvSettingsLoader().load(prefix)
    click.echo(json.dumps(settings.as_dict(), sort_keys=True))


@cli.command("fail", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--message", default=DEMO_MESSAGE, show_default=True, help="Assertion message")
@click.option(
    "--data",
    "pairs",
    nargs=2,
    multiple=True,
    metavar="KEY VALUE",
    help="Context pair added to the report (repeatable)",
)
def cli_fail(message: str, pairs: Sequence[tuple[str, str]]) -> None:
    """Write a demo failure report to stderr and exit with the configured code."""

    context = AssertionContext(
        settings=EnvSettingsLoader().load(DEFAULT_PREFIX).with_overrides(enabled=True),
        sink=sys.stderr,
        terminator=raise_system_exit,
    )
    context.add_diagnostic_data("cli", _StaticDump(f"command=fail pairs={len(pairs)}"))
    data = [item for pair in pairs for item in pair]
    never(message, *data, context=context)


@contextmanager
def _preserved_traceback_config(enabled: bool) -> Iterator[None]:
    """Restore ``lib_cli_exit_tools.config`` traceback flags on exit when *enabled*."""

    config = lib_cli_exit_tools.config
    saved = {name: getattr(config, name, False) for name in ("traceback", "traceback_force_color")}
    try:
        yield
    finally:
        if enabled:
            for name, value in saved.items():
                setattr(config, name, value)


def _exit_code_for(exc: BaseException) -> int:
    """Print *exc* through the shared printer and map it to an exit status."""

    verbose = bool(lib_cli_exit_tools.config.traceback)
    lib_cli_exit_tools.print_exception_message(
        trace_back=verbose,
        length_limit=_TRACEBACK_VERBOSE_LIMIT if verbose else _TRACEBACK_SUMMARY_LIMIT,
    )
    return lib_cli_exit_tools.get_system_exit_code(exc)


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit status instead of raising."""

    arguments = None if argv is None else list(argv)
    with _preserved_traceback_config(restore_traceback):
        try:
            return lib_cli_exit_tools.run_cli(cli, argv=arguments, prog_name="lib_fatal_assert")
        except BaseException as exc:  # noqa: BLE001 - every failure becomes an exit status
            return _exit_code_for(exc)


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
