import math

import numpy as np
import pytest

from methodcheck.core import ConfigurationError, VerificationSettings
from methodcheck.core.errors import SessionClosedError
from methodcheck.core.results import (
    Error,
    HeaderSuccess,
    InfiniteLoop,
    MethodNotFound,
    MethodSecurity,
    TestCaseFailure,
    TestCaseSuccess,
    WrongParameterTypes,
    WrongReturnType,
)
from methodcheck.core.session import SessionState, VerificationSession
from methodcheck.core.types import TypeTag

FAST = VerificationSettings(timeout=0.5)


class TrainSolutions:
    @staticmethod
    def solveTrainProblem(eastTrainSpeed: float, westTrainSpeed: float, townDistance: float) -> float:
        combined = np.float64(eastTrainSpeed) + np.float64(westTrainSpeed)
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(townDistance) / combined * 60)


class TrainPractice:
    def solveTrainProblem(self, eastTrainSpeed: float, westTrainSpeed: float, townDistance: float) -> float:
        combined = np.float64(eastTrainSpeed) + np.float64(westTrainSpeed)
        with np.errstate(divide="ignore", invalid="ignore"):
            return float(np.float64(townDistance) / combined * 60)


class NaivePractice:
    def solveTrainProblem(self, eastTrainSpeed: float, westTrainSpeed: float, townDistance: float) -> float:
        return townDistance / (eastTrainSpeed + westTrainSpeed) * 60


class Solutions:
    @staticmethod
    def collatzCount(n: int) -> int:
        if n < 1:
            return -1
        count = 0
        while n > 1:
            count += 1
            n = n // 2 if n % 2 == 0 else 3 * n + 1
        return count

    @staticmethod
    def isMultiple(a: int, b: int) -> bool:
        return a % b == 0

    @staticmethod
    def find(values: list, target: int) -> int:
        return values.index(target) if target in values else -1

    @staticmethod
    def record(message: str) -> None:
        return None


class Looping:
    def collatzCount(self, n: int) -> int:
        count = 0
        while n != 1:
            # never terminates for n < 1
            count += 1
            n = n // 2 if n % 2 == 0 else 3 * n + 1
            if n < 1:
                n = 0
        return count


class WrongHeaders:
    def collatzCount(self, n: str) -> str:
        return n

    def isMultiple(self, a: int, b: int) -> int:
        return int(a % b == 0)


class Lenient:
    def find(self, values: list, target: int) -> int:
        return None

    def record(self, message: str) -> None:
        print(message)


class Restricted:
    find = 3

    @staticmethod
    def _hidden(n: int) -> int:
        return n


class Empty:
    pass


def _run(candidate, reference_name, cases=None, **kwargs):
    session = VerificationSession(candidate, Solutions, reference_name, cases, **kwargs)
    return session.run_all_tests_then_end()


def test_missing_method_stops_after_header() -> None:
    results = _run(Empty, "collatzCount", [[3]])
    assert results == [MethodNotFound("collatzCount")]


def test_parameter_types_checked_before_return_type() -> None:
    (result,) = _run(WrongHeaders, "collatzCount", [[3]])
    assert isinstance(result, WrongParameterTypes)
    assert result.expected == (TypeTag.of(int),)
    assert result.actual == (TypeTag.of(str),)


def test_wrong_return_type() -> None:
    (result,) = _run(WrongHeaders, "isMultiple", [[4, 2]])
    assert result == WrongReturnType("isMultiple", TypeTag.of(bool), TypeTag.of(int))


def test_identical_implementation_passes_every_case() -> None:
    class Copy:
        collatzCount = Solutions.__dict__["collatzCount"]

    results = _run(Copy, "collatzCount", [[1], [6], [27], [0]])
    assert results[0] == HeaderSuccess("collatzCount")
    assert all(isinstance(result, TestCaseSuccess) for result in results[1:])
    assert [result.output for result in results[1:]] == [0, 8, 111, -1]


def test_infinite_loop_does_not_affect_other_cases() -> None:
    results = _run(Looping, "collatzCount", [[6], [-4], [7]], settings=FAST)
    kinds = [type(result) for result in results]
    assert kinds == [HeaderSuccess, TestCaseSuccess, InfiniteLoop, TestCaseSuccess]
    loop = results[2]
    assert loop.arguments == (-4,)
    assert loop.expected == -1
    assert loop.actual is None
    assert loop.timeout == 0.5


def test_incompatible_case_prevents_construction() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        VerificationSession(Solutions, Solutions, "isMultiple", [[1, "x"]])
    assert "isMultiple(int, int) -> bool" in str(excinfo.value)


def test_output_of_another_scalar_type_fails() -> None:
    class Counts:
        @staticmethod
        def collatzCount(n: int) -> int:
            return True

        @staticmethod
        def isMultiple(a: int, b: int) -> bool:
            return 1.0

    results = _run(Counts, "collatzCount", [[2]])
    assert results[1] == TestCaseFailure("collatzCount", (2,), 1, True)
    results = _run(Counts, "isMultiple", [[4, 2]])
    assert results[1] == TestCaseFailure("isMultiple", (4, 2), True, 1.0)


def test_numpy_integers_are_accepted() -> None:
    results = _run(Solutions, "isMultiple", [[np.int64(9), np.int32(3)]])
    assert isinstance(results[1], TestCaseSuccess)
    assert bool(results[1].output) is True


def test_train_problem_end_to_end() -> None:
    rng = np.random.default_rng(5)

    def generate():
        return tuple(rng.random(3) * rng.integers(0, 100, size=3))

    session = VerificationSession(
        TrainPractice,
        TrainSolutions,
        TrainSolutions.solveTrainProblem,
        [[0.0, 0.0, 0.0], [-100.0, 100.0, 0.3]],
        generate,
        10,
    )
    results = session.run_all_tests_then_end()
    assert len(results) == 13
    assert all(result.passed for result in results)
    assert math.isnan(results[1].output)
    assert results[2].output == math.inf


def test_train_problem_naive_division_fails() -> None:
    session = VerificationSession(
        NaivePractice, TrainSolutions, "solveTrainProblem", [[0.0, 0.0, 0.0], [30.0, 50.0, 20.0]]
    )
    results = session.run_all_tests_then_end()
    failure = results[1]
    assert isinstance(failure, TestCaseFailure)
    assert math.isnan(failure.expected)
    assert isinstance(failure.exception, ZeroDivisionError)
    assert isinstance(results[2], TestCaseSuccess)
    assert results[2].output == 15.0


def test_none_output_is_compared_unless_lenient() -> None:
    strict = _run(Lenient, "find", [[[1, 2], 2]])
    assert isinstance(strict[1], TestCaseFailure)
    lenient = _run(Lenient, "find", [[[1, 2], 2]], settings=VerificationSettings(none_matches_any=True))
    assert isinstance(lenient[1], TestCaseSuccess)
    assert lenient[1].output is None


def test_void_methods_pass_whatever_they_return() -> None:
    results = _run(Lenient, "record", [["hello"]])
    assert isinstance(results[1], TestCaseSuccess)


def test_non_callable_member_is_a_security_failure() -> None:
    (result,) = _run(Restricted, "find", [[[1], 1]])
    assert isinstance(result, MethodSecurity)


def test_private_access_policy() -> None:
    class Reference:
        @staticmethod
        def _hidden(n: int) -> int:
            return n

    allowed = VerificationSession(Restricted, Reference, "_hidden", [[1]]).run_all_tests_then_end()
    assert all(result.passed for result in allowed)
    denied = VerificationSession(
        Restricted, Reference, "_hidden", [[1]], settings=VerificationSettings(allow_private=False)
    ).run_all_tests_then_end()
    assert isinstance(denied[0], MethodSecurity)
    assert len(denied) == 1


def test_reference_failure_is_reported_as_error() -> None:
    results = _run(Solutions, "isMultiple", [[4, 0], [4, 2]])
    assert isinstance(results[1], Error)
    assert "ZeroDivisionError" in results[1].reason
    assert isinstance(results[2], TestCaseSuccess)


def test_generated_cases_follow_explicit_ones() -> None:
    values = iter(range(1, 4))
    results = _run(Solutions, "collatzCount", [[6]], generator=lambda: (next(values),), generation_rounds=3)
    assert [result.arguments for result in results[1:]] == [(6,), (1,), (2,), (3,)]


def test_generator_object_is_used() -> None:
    class Fives:
        def generate(self):
            return [5]

    results = _run(Solutions, "collatzCount", generator=Fives(), generation_rounds=2)
    assert [result.arguments for result in results[1:]] == [(5,), (5,)]


def test_bad_generated_case_is_fatal_and_ends_session() -> None:
    session = VerificationSession(Solutions, Solutions, "collatzCount", generator=lambda: ("x",), generation_rounds=1)
    with pytest.raises(ConfigurationError):
        session.run_all_tests_then_end()
    assert session.state is SessionState.DONE


def test_rounds_validation() -> None:
    with pytest.raises(ConfigurationError):
        VerificationSession(Solutions, Solutions, "collatzCount", generation_rounds=2)
    with pytest.raises(ConfigurationError):
        VerificationSession(Solutions, Solutions, "collatzCount", generator=lambda: (1,), generation_rounds=-1)


def test_header_failure_runs_no_cases() -> None:
    session = VerificationSession(Empty, Solutions, "collatzCount", [[3]])
    assert session.run_test_cases() == []
    assert session.state is SessionState.HEADER_CHECK
    session.end()


def test_teardown_is_idempotent() -> None:
    with VerificationSession(Solutions, Solutions, "collatzCount", [[3]]) as session:
        assert session.test_method_header() is session.test_method_header()
        assert session.state is SessionState.TEST_EXECUTION
    assert session.state is SessionState.DONE
    session.end()
    session.end()
    with pytest.raises(SessionClosedError):
        session.test_method_header()


def test_candidate_name_override() -> None:
    class Practice:
        def countSteps(self, n: int) -> int:
            return Solutions.collatzCount(n)

    session = VerificationSession(Practice, Solutions, "collatzCount", [[6]], method_name="countSteps")
    results = session.run_all_tests_then_end()
    assert session.method_name == "countSteps"
    assert all(result.passed for result in results)
