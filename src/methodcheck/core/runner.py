"""Runs one test case against the candidate and the reference."""
from __future__ import annotations

import copy
import logging
from functools import partial
from typing import Any, Sequence

from .comparator import values_equal
from .errors import ConfigurationError, InvocationSetupError, InvocationTargetError, TaskInterrupted
from .executor import BoundedExecutor, Cancelled, Completed, Raised
from .members import Member
from .models import TestCase, VerificationSettings
from .results import Error, InfiniteLoop, Result, TestCaseFailure, TestCaseSuccess
from .signature import SignatureDescriptor

logger = logging.getLogger(__name__)


def invoke(member: Member, arguments: Sequence[Any]) -> Any:
    """Bind ``member`` and call it; errors from its own code are wrapped.

    Binding errors (for example an owner class that cannot be instantiated
    without arguments) propagate unwrapped.
    """

    target = member.bind()
    try:
        return target(*arguments)
    except TaskInterrupted:
        raise
    except BaseException as exc:
        raise InvocationTargetError(member.plain_name, exc) from exc


class InvocationRunner:
    """Maps the outcomes of paired invocations onto the result taxonomy."""

    def __init__(
        self,
        descriptor: SignatureDescriptor,
        candidate: Member,
        reference: Member,
        executor: BoundedExecutor,
        settings: VerificationSettings,
    ) -> None:
        self._descriptor = descriptor
        self._candidate = candidate
        self._reference = reference
        self._executor = executor
        self._settings = settings

    @property
    def method_name(self) -> str:
        return self._descriptor.name

    def run_test_case(self, case: TestCase) -> Result:
        name = self.method_name
        arguments = case.arguments
        logger.debug("running %s%s", name, case.identifier())
        # each side gets private copies so mutations cannot leak across invocations
        try:
            candidate_arguments = copy.deepcopy(arguments)
            reference_arguments = copy.deepcopy(arguments)
        except Exception as exc:
            raise ConfigurationError(f"Test case {case.identifier()} cannot be copied: {exc}") from exc
        candidate_future = self._executor.submit(partial(invoke, self._candidate, candidate_arguments))
        reference_future = self._executor.submit(partial(invoke, self._reference, reference_arguments))

        reference_outcome = self._executor.await_result(reference_future, self._settings.timeout)
        if not isinstance(reference_outcome, Completed):
            self._executor.abandon(candidate_future)
            reason = _describe_reference_problem(reference_outcome)
            logger.error("reference %s%s failed: %s", name, case.identifier(), reason)
            return Error(name, reason=reason)
        expected = reference_outcome.value

        outcome = self._executor.await_result(candidate_future, self._settings.timeout)
        if isinstance(outcome, Cancelled):
            return InfiniteLoop(name, arguments, expected, timeout=outcome.timeout)
        if isinstance(outcome, Raised):
            if isinstance(outcome.cause, InvocationTargetError):
                logger.debug("candidate %s raised %r", name, outcome.cause.cause)
                return TestCaseFailure(name, arguments, expected, None, exception=outcome.cause.cause)
            raise InvocationSetupError(
                f"Could not invoke '{self._candidate.qualified_name()}': {outcome.cause!r}"
            ) from outcome.cause
        actual = outcome.value
        if self._matches(expected, actual):
            return TestCaseSuccess(name, arguments, actual)
        return TestCaseFailure(name, arguments, expected, actual)

    def _matches(self, expected: Any, actual: Any) -> bool:
        if self._descriptor.is_void:
            return True
        if actual is None and self._settings.none_matches_any:
            return True
        return values_equal(expected, actual)


def _describe_reference_problem(outcome: Any) -> str:
    if isinstance(outcome, Cancelled):
        return f"timed out after {outcome.timeout:g}s"
    cause = outcome.cause
    if isinstance(cause, InvocationTargetError):
        cause = cause.cause
    return f"{type(cause).__name__}: {cause}"
