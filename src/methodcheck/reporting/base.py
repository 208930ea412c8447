"""Reporter interface shared by terminal and JSON outputs."""
from __future__ import annotations

from typing import Sequence

from methodcheck.plan.models import MethodPlan, MethodReport, SuitePlan


class Reporter:
    """Receives progress callbacks from ``run_plan``; every hook is optional."""

    def on_start(self, plan: SuitePlan, methods: Sequence[MethodPlan]) -> None:
        return None

    def on_method_result(self, report: MethodReport, index: int, total: int) -> None:
        return None

    def on_complete(self, reports: Sequence[MethodReport]) -> None:
        return None
