"""Terminal reporter rendering progress and summaries."""
from __future__ import annotations

import time
from typing import Sequence

import click
from colorama import Fore, Style, just_fix_windows_console

from methodcheck.core.results import Error, TestCaseFailure
from methodcheck.plan.models import MethodPlan, MethodReport, SuitePlan

from .base import Reporter
from .render import format_exception, render_result, status_of

STATUS_COLORS = {
    "passed": Fore.GREEN,
    "failed": Fore.RED,
    "error": Fore.YELLOW,
}
STATUS_LABELS = {
    "passed": "PASS",
    "failed": "FAIL",
    "error": "ERROR",
}


class TerminalReporter(Reporter):
    """Human-readable reporter that streams to stdout."""

    def __init__(self, *, use_color: bool = True, verbose: bool = False) -> None:
        if use_color:
            just_fix_windows_console()
        self._use_color = use_color
        self._verbose = verbose
        self._start_time = 0.0

    def on_start(self, plan: SuitePlan, methods: Sequence[MethodPlan]) -> None:
        self._start_time = time.perf_counter()
        click.echo(
            self._paint(
                f"Verifying {len(methods)} method(s) of {plan.candidate.label()} "
                f"against {plan.reference.label()} timeout={plan.settings.timeout}s",
                Fore.CYAN,
            )
        )

    def on_method_result(self, report: MethodReport, index: int, total: int) -> None:
        status = "passed" if report.passed else "failed"
        ms = report.duration_s * 1000
        click.echo(f"[{index}/{total}] {report.name} -> {self._status(status)} ({ms:.2f} ms)")
        for result in report.results:
            result_status = status_of(result)
            click.echo(f"    {self._status(result_status, width=5)} {render_result(result)}")
            if self._verbose or result_status != "passed":
                self._print_details(result)

    def on_complete(self, reports: Sequence[MethodReport]) -> None:
        duration = time.perf_counter() - self._start_time
        results = [result for report in reports for result in report.results]
        passed = sum(1 for result in results if result.passed)
        errors = sum(1 for result in results if isinstance(result, Error))
        failed = len(results) - passed - errors
        color = Fore.GREEN if passed == len(results) else Fore.RED
        click.echo(
            self._paint(
                f"Summary: methods={len(reports)} total={len(results)} passed={passed} "
                f"failed={failed} errors={errors} duration={duration:.2f}s",
                color,
            )
        )

    def _print_details(self, result: object) -> None:
        if isinstance(result, Error) and result.reason:
            click.echo(f"          reason: {result.reason}")
        if isinstance(result, TestCaseFailure) and result.exception is not None:
            click.echo(f"          raised: {format_exception(result.exception)}")

    def _status(self, status: str, *, width: int = 0) -> str:
        label = STATUS_LABELS.get(status, status.upper())
        if width:
            label = label.ljust(width)
        return self._paint(label, STATUS_COLORS.get(status, ""))

    def _paint(self, text: str, color: str) -> str:
        if not self._use_color or not color:
            return text
        return f"{color}{text}{Style.RESET_ALL}"
