"""Verification session: header check, then test execution, then teardown."""
from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from functools import cached_property
from typing import Any, Iterable, Iterator, List, Optional, Sequence

from methodcheck.generators import as_generator

from .errors import ConfigurationError, MemberAccessError, SessionClosedError
from .executor import BoundedExecutor
from .members import Member, MemberTable, ensure_access, resolve_member
from .models import TestCase, VerificationSettings
from .results import (
    HeaderSuccess,
    MethodNotFound,
    MethodSecurity,
    Result,
    WrongParameterTypes,
    WrongReturnType,
)
from .runner import InvocationRunner
from .signature import SignatureDescriptor, explain_arguments

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    HEADER_CHECK = "header-check"
    TEST_EXECUTION = "test-execution"
    DONE = "done"


class VerificationSession:
    """Verifies one candidate member against one reference operation.

    The session owns its worker pool from construction until ``end()``.
    Explicit cases are validated eagerly, so an incompatible case prevents
    the session (and its pool) from ever being created.
    """

    def __init__(
        self,
        candidate: Any,
        reference_type: Any,
        reference: Any,
        cases: Optional[Iterable[Sequence[Any]]] = None,
        generator: Any = None,
        generation_rounds: int = 0,
        *,
        settings: Optional[VerificationSettings] = None,
        method_name: Optional[str] = None,
    ) -> None:
        self._settings = settings or VerificationSettings()
        self._reference = Member.of(reference_type, reference)
        try:
            ensure_access(self._reference, allow_private=True)
        except MemberAccessError as exc:
            raise ConfigurationError(f"The reference cannot be invoked: {exc.reason}") from exc
        self._descriptor = self._reference.signature()
        if method_name:
            # the candidate is looked up under this name instead of the reference's
            self._descriptor = dataclasses.replace(self._descriptor, name=method_name)
        self._members = MemberTable.from_type(candidate)

        if generation_rounds < 0:
            raise ConfigurationError("generation_rounds cannot be negative")
        if generation_rounds and generator is None:
            raise ConfigurationError("generation_rounds requires a test case generator")
        self._generator = as_generator(generator) if generator is not None else None
        self._generation_rounds = generation_rounds

        explicit: List[TestCase] = []
        for raw in cases or ():
            case = TestCase.of(raw)
            problem = explain_arguments(case, self._descriptor)
            if problem is not None:
                raise ConfigurationError(
                    f"Test case {case.identifier()} is incompatible with {self._descriptor.label()}: {problem}"
                )
            explicit.append(case)
        self._cases = tuple(explicit)

        self._executor = BoundedExecutor(
            self._settings.max_workers,
            interrupt_on_timeout=self._settings.interrupt_on_timeout,
            thread_name_prefix=f"methodcheck-{self._descriptor.name}",
        )
        self._state = SessionState.HEADER_CHECK
        self._header: Optional[Result] = None

    @property
    def descriptor(self) -> SignatureDescriptor:
        return self._descriptor

    @property
    def method_name(self) -> str:
        return self._descriptor.name

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def settings(self) -> VerificationSettings:
        return self._settings

    @property
    def cases(self) -> Sequence[TestCase]:
        return self._cases

    @cached_property
    def candidate_member(self) -> Optional[Member]:
        return resolve_member(self._members, self._descriptor.name, self._descriptor)

    def test_method_header(self) -> Result:
        """Check presence, access, parameter types and return type, in order."""

        self._ensure_open()
        if self._header is None:
            self._header = self._check_header()
            if self._header.passed:
                self._state = SessionState.TEST_EXECUTION
            logger.debug("header check for %s: %s", self.method_name, self._header.kind)
        return self._header

    def run_test_cases(self) -> List[Result]:
        """Run explicit cases, then generated ones; empty if the header failed."""

        if not self.test_method_header().passed:
            return []
        member = self.candidate_member
        assert member is not None  # guaranteed by a passing header check
        runner = InvocationRunner(self._descriptor, member, self._reference, self._executor, self._settings)
        return [runner.run_test_case(case) for case in self.iter_test_cases()]

    def iter_test_cases(self) -> Iterator[TestCase]:
        yield from self._cases
        for _ in range(self._generation_rounds):
            assert self._generator is not None
            case = TestCase.of(self._generator.generate())
            problem = explain_arguments(case, self._descriptor)
            if problem is not None:
                raise ConfigurationError(
                    f"Generated case {case.identifier()} is incompatible with "
                    f"{self._descriptor.label()}: {problem}"
                )
            yield case

    def run_all_tests_then_end(self) -> List[Result]:
        """Run the header check and, if it passes, every test case; then end."""

        try:
            results: List[Result] = [self.test_method_header()]
            results.extend(self.run_test_cases())
            return results
        finally:
            self.end()

    def end(self) -> None:
        """Release the worker pool. Safe to call more than once."""

        if self._state is SessionState.DONE:
            return
        self._state = SessionState.DONE
        self._executor.shutdown()

    def __enter__(self) -> "VerificationSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.end()

    def _ensure_open(self) -> None:
        if self._state is SessionState.DONE:
            raise SessionClosedError(f"The session for '{self.method_name}' has already ended")

    def _check_header(self) -> Result:
        name = self._descriptor.name
        member = self.candidate_member
        if member is None:
            return MethodNotFound(name)
        try:
            ensure_access(member, allow_private=self._settings.allow_private)
        except MemberAccessError as exc:
            return MethodSecurity(name, reason=exc.reason)
        actual = member.try_signature()
        if actual is None or actual.parameter_types != self._descriptor.parameter_types:
            return WrongParameterTypes(
                name,
                self._descriptor.parameter_types,
                actual.parameter_types if actual is not None else None,
            )
        if actual.return_type != self._descriptor.return_type:
            return WrongReturnType(name, self._descriptor.return_type, actual.return_type)
        return HeaderSuccess(name)
