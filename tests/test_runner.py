import threading

import pytest

from methodcheck.core import TestCase, VerificationSettings
from methodcheck.core.errors import ConfigurationError, InvocationSetupError, InvocationTargetError
from methodcheck.core.executor import BoundedExecutor
from methodcheck.core.members import Member
from methodcheck.core.results import Error, TestCaseFailure, TestCaseSuccess
from methodcheck.core.runner import InvocationRunner, invoke


class Reference:
    @staticmethod
    def append_one(values: list) -> list:
        values.append(1)
        return values

    @staticmethod
    def halve(value: int) -> float:
        return value / 2


class Candidate:
    def append_one(self, values: list) -> list:
        values.append(1)
        return values

    def halve(self, value: int) -> float:
        raise ValueError("not implemented")


class NeedsArguments:
    def __init__(self, seed: int) -> None:
        self.seed = seed

    def halve(self, value: int) -> float:
        return value / 2


def _runner(candidate: Member, reference: Member) -> InvocationRunner:
    executor = BoundedExecutor(2)
    return InvocationRunner(reference.signature(), candidate, reference, executor, VerificationSettings(timeout=1.0))


def test_uncopyable_arguments_are_a_configuration_error() -> None:
    runner = _runner(Member.of(Candidate, "append_one"), Member.of(Reference, "append_one"))
    with pytest.raises(ConfigurationError) as excinfo:
        runner.run_test_case(TestCase.of([[threading.Lock()]]))
    assert "cannot be copied" in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, TypeError)


def test_invoke_wraps_errors_from_invoked_code() -> None:
    member = Member.of(Candidate, "halve")
    with pytest.raises(InvocationTargetError) as excinfo:
        invoke(member, (2,))
    assert isinstance(excinfo.value.cause, ValueError)


def test_invoke_lets_binding_errors_through() -> None:
    member = Member.of(NeedsArguments, "halve")
    with pytest.raises(TypeError):
        invoke(member, (2,))


def test_arguments_are_copied_per_invocation() -> None:
    runner = _runner(Member.of(Candidate, "append_one"), Member.of(Reference, "append_one"))
    original = [0]
    result = runner.run_test_case(TestCase.of([original]))
    assert isinstance(result, TestCaseSuccess)
    assert result.output == [0, 1]
    assert original == [0]


def test_candidate_exception_becomes_failure() -> None:
    runner = _runner(Member.of(Candidate, "halve"), Member.of(Reference, "halve"))
    result = runner.run_test_case(TestCase.of([3]))
    assert isinstance(result, TestCaseFailure)
    assert result.expected == 1.5
    assert result.actual is None
    assert isinstance(result.exception, ValueError)


def test_uninstantiable_candidate_is_fatal() -> None:
    runner = _runner(Member.of(NeedsArguments, "halve"), Member.of(Reference, "halve"))
    with pytest.raises(InvocationSetupError):
        runner.run_test_case(TestCase.of([3]))


def test_reference_exception_becomes_error() -> None:
    runner = _runner(Member.of(Reference, "halve"), Member.of(Candidate, "halve"))
    result = runner.run_test_case(TestCase.of([3]))
    assert isinstance(result, Error)
    assert result.reason == "ValueError: not implemented"
    assert not result.passed
