"""CLI entry point for partest."""
from __future__ import annotations

import shlex
import sys
from typing import Any, Dict, Optional, Tuple

import click

from partest import __version__, bootstrap
from partest.config import build_options, check_options, load_config
from partest.core.models import EXIT_FATAL, EXIT_NO_RESULT, EXIT_SUCCESS
from partest.core.ordering import ORDER_POLICIES, ORDER_RANDOM, build_queue, resolve_seed
from partest.core.runner import Runner
from partest.discovery import SuiteLoader
from partest.errors import ConfigurationError, CoordinatorError

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"partest {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Print worker output for failures and report destinations.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the partest version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Run independent test units in parallel."""

    bootstrap()
    ctx.obj = CliState(verbose=verbose)


def _report_option(name: str, help_text: str) -> Any:
    return click.option(name, type=click.Path(dir_okay=True), help=help_text)


@cli.command()
@click.argument("path", required=False, type=click.Path())
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML config file; command line options take precedence.",
)
@click.option("-p", "--processes", type=int, help="Number of worker processes (default: CPU count).")
@click.option("--functional", is_flag=True, help="Run individual test methods instead of whole suites.")
@click.option("--order-by", type=click.Choice(ORDER_POLICIES), help="Order in which units are dispatched.")
@click.option("--random-order-seed", type=int, help="Seed for --order-by random.")
@click.option("--filter", "unit_filters", type=str, help="Comma-separated unit id filters (supports globs).")
@click.option("--command", "command", type=str, help="Worker command template, e.g. 'pytest {unit} --junitxml={log}'.")
@click.option("--timeout", type=float, help="Per-unit timeout in seconds enforced by the worker pool.")
@click.option("--coverage-test-limit", type=int, help="Raw coverage snapshots kept before compaction.")
@click.option(
    "--coverage-text",
    is_flag=False,
    flag_value="",
    default=None,
    help="Write a text coverage summary to PATH, or to the console when no PATH is given.",
)
@_report_option("--coverage-json", "Write JSON coverage to PATH.")
@_report_option("--coverage-cobertura", "Write Cobertura XML coverage to PATH.")
@_report_option("--coverage-clover", "Write Clover XML coverage to PATH.")
@_report_option("--coverage-lcov", "Write an LCOV tracefile to PATH.")
@_report_option("--coverage-html", "Write an HTML coverage page to PATH (directory or file).")
@_report_option("--log-junit", "Write the consolidated JUnit XML log to PATH.")
@_report_option("--log-json", "Write a JSON run summary to PATH.")
@click.option("--no-colors", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.option("--list", "list_only", is_flag=True, help="List units in dispatch order without running.")
@click.pass_obj
def run(
    state: CliState,
    path: Optional[str],
    config_path: Optional[str],
    unit_filters: Optional[str],
    command: Optional[str],
    functional: bool,
    no_colors: bool,
    list_only: bool,
    **values: Any,
) -> None:
    """Execute the test units found below PATH."""

    overrides: Dict[str, Any] = dict(values)
    overrides.update(
        path=path,
        filter=_split_csv(unit_filters) or None,
        command=tuple(shlex.split(command)) if command else None,
        functional=True if functional else None,
        colors=False if no_colors else None,
        verbose=True if state.verbose else None,
    )
    try:
        config = load_config(config_path) if config_path else {}
        options = build_options(config, **overrides)
        if list_only:
            check_options(options)
            _list_units(options)
            return
        runner = Runner(options)
        runner.run()
    except ConfigurationError as exc:
        raise click.UsageError(str(exc)) from exc
    except CoordinatorError:
        raise click.exceptions.Exit(EXIT_FATAL)
    exit_code = runner.exit_code
    raise click.exceptions.Exit(EXIT_SUCCESS if exit_code == EXIT_NO_RESULT else exit_code)


def _list_units(options: Any) -> None:
    loader = SuiteLoader(options.path, functional=options.functional, filters=options.filter)
    loader.load()
    seed = resolve_seed(options.order_by, options.random_order_seed)
    if options.order_by == ORDER_RANDOM:
        click.echo(f"Random order seed: {seed}", err=True)
    for unit in build_queue(loader.units(), options.order_by, seed):
        click.echo(unit.identifier())


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="partest", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


def _split_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return tuple()
    parts = [part.strip() for part in value.split(",") if part.strip()]
    return tuple(parts)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
