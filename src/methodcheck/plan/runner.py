"""Executes plan files one method session at a time."""
from __future__ import annotations

import fnmatch
import logging
import time
from typing import Any, List, Optional, Sequence, Tuple

from methodcheck.core.errors import ConfigurationError
from methodcheck.core.members import Member
from methodcheck.core.session import VerificationSession
from methodcheck.generators import TestCaseGenerator, as_generator, create_generator, resolve_generator
from methodcheck.utils import load_from_source

from .models import GeneratorConfig, MethodPlan, MethodReport, SuitePlan

logger = logging.getLogger(__name__)


def select_methods(plan: SuitePlan, patterns: Optional[Sequence[str]] = None) -> Tuple[MethodPlan, ...]:
    """Filter plan methods by name; patterns support globs."""

    if not patterns:
        return plan.methods
    selected = tuple(
        method for method in plan.methods if any(fnmatch.fnmatchcase(method.name, pattern) for pattern in patterns)
    )
    if not selected:
        raise ConfigurationError(f"No methods matched: {', '.join(patterns)}")
    return selected


def run_plan(
    plan: SuitePlan,
    *,
    reporter: Any = None,
    methods: Optional[Sequence[str]] = None,
) -> List[MethodReport]:
    """Verify every selected method and return one report per method.

    ``reporter`` receives ``on_start``, ``on_method_result`` and
    ``on_complete`` calls as the run progresses.
    """

    selected = select_methods(plan, methods)
    candidate = plan.candidate.resolve()
    reference_owner = plan.reference.resolve()
    if reporter is not None:
        reporter.on_start(plan, selected)
    reports: List[MethodReport] = []
    total = len(selected)
    for index, method in enumerate(selected, start=1):
        logger.debug("verifying %s (%d/%d)", method.name, index, total)
        start = time.perf_counter()
        generator = _build_generator(method, reference_owner)
        session = VerificationSession(
            candidate,
            reference_owner,
            method.reference,
            method.cases,
            generator,
            method.rounds,
            settings=plan.settings,
            method_name=method.name,
        )
        results = session.run_all_tests_then_end()
        report = MethodReport(method=method, results=tuple(results), duration_s=time.perf_counter() - start)
        reports.append(report)
        if reporter is not None:
            reporter.on_method_result(report, index, total)
    if reporter is not None:
        reporter.on_complete(reports)
    return reports


def _build_generator(method: MethodPlan, reference_owner: Any) -> Optional[TestCaseGenerator]:
    config = method.generator
    if config is None or method.rounds == 0:
        return None
    if config.is_custom:
        return _load_custom_generator(config)
    descriptor = Member.of(reference_owner, method.reference).signature()
    try:
        return create_generator(config.name, descriptor, seed=config.seed, params=config.params)
    except KeyError as exc:
        raise ConfigurationError(str(exc.args[0])) from exc
    except TypeError as exc:
        raise ConfigurationError(f"Cannot generate arguments for {descriptor.label()}: {exc}") from exc


def _load_custom_generator(config: GeneratorConfig) -> TestCaseGenerator:
    if config.path is not None:
        return resolve_generator(config.path)
    assert config.source is not None
    module = load_from_source(config.source)
    attr = config.attr or "generate"
    if not hasattr(module, attr):
        raise ConfigurationError(f"Generator '{attr}' not found in {config.source}")
    return as_generator(getattr(module, attr))
