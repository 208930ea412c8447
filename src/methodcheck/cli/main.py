"""CLI entry point for methodcheck."""
from __future__ import annotations

import dataclasses
import logging
import sys
from typing import Optional, Sequence, Tuple

import click

from methodcheck import __version__, bootstrap
from methodcheck.core.errors import MethodCheckError
from methodcheck.plan import MethodPlan, all_passed, load_plan, run_plan, select_methods
from methodcheck.reporting import JsonReporter, TerminalReporter

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"methodcheck {__version__}")
    raise click.exceptions.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the methodcheck version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Verify candidate methods against reference solutions."""

    _configure_logging(verbose)
    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.option(
    "--plan",
    "plan_path",
    type=click.Path(exists=True, dir_okay=False),
    required=True,
    help="YAML plan file.",
)
@click.option("--method", "method_filters", multiple=True, help="Method name to run (repeatable, supports globs).")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), help="Per-invocation timeout in seconds.")
@click.option("--list", "list_only", is_flag=True, help="List matched methods without running.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def run(
    state: CliState,
    plan_path: str,
    method_filters: Tuple[str, ...],
    timeout: Optional[float],
    list_only: bool,
    report_format: str,
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Run the header check and test cases for every planned method."""

    try:
        plan = load_plan(plan_path)
        if timeout is not None:
            plan = dataclasses.replace(plan, settings=dataclasses.replace(plan.settings, timeout=timeout))
        if list_only:
            for method in select_methods(plan, method_filters):
                click.echo(_describe_method(method))
            return
        if report_format == "json":
            reporter = JsonReporter(report_path)
        else:
            reporter = TerminalReporter(use_color=not no_color, verbose=state.verbose)
        reports = run_plan(plan, reporter=reporter, methods=method_filters)
    except (MethodCheckError, OSError, ImportError, AttributeError, TypeError) as exc:
        raise click.ClickException(str(exc)) from exc
    raise click.exceptions.Exit(0 if all_passed(reports) else 1)


def _describe_method(method: MethodPlan) -> str:
    text = method.name
    if method.reference != method.name:
        text += f" (reference: {method.reference})"
    details = [f"cases={len(method.cases)}"]
    if method.rounds:
        details.append(f"rounds={method.rounds}")
    return f"{text} {' '.join(details)}"


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(argv) if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="methodcheck", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
