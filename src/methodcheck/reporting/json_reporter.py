"""JSON reporter writing a schema-validated run summary."""
from __future__ import annotations

import json
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import click
from jsonschema import Draft7Validator

from methodcheck.core.results import Error, InfiniteLoop, Result, TestCaseFailure, TestCaseSuccess
from methodcheck.plan.models import MethodPlan, MethodReport, SuitePlan

from .base import Reporter
from .render import format_exception, render_result, status_of
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION

_validator = Draft7Validator(JSON_SCHEMA_V1)


class JsonReporter(Reporter):
    """Collects reports and emits one JSON document at the end of the run.

    The document goes to ``path`` when given, otherwise to stdout.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self._path = Path(path).expanduser() if path else None
        self._start_time = 0.0
        self._timeout: Optional[float] = None
        self.payload: Optional[Dict[str, Any]] = None

    def on_start(self, plan: SuitePlan, methods: Sequence[MethodPlan]) -> None:
        self._start_time = time.perf_counter()
        self._timeout = plan.settings.timeout

    def on_complete(self, reports: Sequence[MethodReport]) -> None:
        payload = build_payload(reports, duration_s=time.perf_counter() - self._start_time, timeout=self._timeout)
        _validator.validate(payload)
        self.payload = payload
        text = json.dumps(payload, indent=2)
        if self._path is None:
            click.echo(text)
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(text + "\n", encoding="utf-8")


def build_payload(
    reports: Sequence[MethodReport], *, duration_s: float = 0.0, timeout: Optional[float] = None
) -> Dict[str, Any]:
    results = [result for report in reports for result in report.results]
    statuses = [status_of(result) for result in results]
    summary: Dict[str, Any] = {
        "methods": len(reports),
        "total": len(results),
        "passed": statuses.count("passed"),
        "failed": statuses.count("failed"),
        "errors": statuses.count("error"),
        "duration_s": duration_s,
    }
    if timeout is not None:
        summary["timeout_s"] = timeout
    return {
        "schema_version": SCHEMA_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "summary": summary,
        "methods": [
            {
                "name": report.name,
                "reference": report.method.reference,
                "passed": report.passed,
                "duration_ms": report.duration_s * 1000,
                "results": [_serialize_result(result) for result in report.results],
            }
            for report in reports
        ],
    }


def _serialize_result(result: Result) -> Dict[str, Any]:
    entry: Dict[str, Any] = {
        "kind": result.kind,
        "status": status_of(result),
        "message": render_result(result),
    }
    if isinstance(result, (TestCaseSuccess, TestCaseFailure)):
        entry["arguments"] = [repr(argument) for argument in result.arguments]
    if isinstance(result, TestCaseSuccess):
        entry["actual"] = repr(result.output)
    if isinstance(result, TestCaseFailure):
        entry["expected"] = repr(result.expected)
        if not isinstance(result, InfiniteLoop):
            entry["actual"] = repr(result.actual)
        if result.exception is not None:
            entry["exception"] = format_exception(result.exception)
    if isinstance(result, Error) and result.reason:
        entry["reason"] = result.reason
    return entry
