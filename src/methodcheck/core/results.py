"""Result taxonomy produced by header checks and test case runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .types import TypeTag


@dataclass(frozen=True)
class Result:
    """Outcome emitted for one method; never mutated after creation."""

    method_name: str

    kind = "result"

    @property
    def passed(self) -> bool:
        return False


# === success branch ===


@dataclass(frozen=True)
class Success(Result):
    kind = "success"

    @property
    def passed(self) -> bool:
        return True


@dataclass(frozen=True)
class HeaderSuccess(Success):
    kind = "header-success"


@dataclass(frozen=True)
class TestCaseSuccess(Success):
    """A test case whose output matched the reference."""

    __test__ = False

    arguments: Tuple[Any, ...]
    output: Any

    kind = "test-case-success"


# === failure branch ===


@dataclass(frozen=True)
class Failure(Result):
    kind = "failure"


@dataclass(frozen=True)
class HeaderFailure(Failure):
    kind = "header-failure"


@dataclass(frozen=True)
class MethodNotFound(HeaderFailure):
    kind = "method-not-found"


@dataclass(frozen=True)
class WrongParameterTypes(HeaderFailure):
    """``actual`` is None when the candidate's signature could not be read."""

    expected: Tuple[TypeTag, ...]
    actual: Optional[Tuple[TypeTag, ...]]

    kind = "wrong-parameter-types"


@dataclass(frozen=True)
class WrongReturnType(HeaderFailure):
    expected: TypeTag
    actual: TypeTag

    kind = "wrong-return-type"


@dataclass(frozen=True)
class MethodSecurity(HeaderFailure):
    """The candidate member exists but may not be invoked."""

    reason: str = ""

    kind = "method-security"


@dataclass(frozen=True)
class TestCaseFailure(Failure):
    """Output mismatch; ``exception`` is set when the candidate raised."""

    __test__ = False

    arguments: Tuple[Any, ...]
    expected: Any
    actual: Any
    exception: Optional[BaseException] = field(default=None, compare=False)

    kind = "test-case-failure"


@dataclass(frozen=True)
class InfiniteLoop(TestCaseFailure):
    """The candidate did not finish within the time budget."""

    actual: Any = field(default=None, init=False)
    timeout: Optional[float] = field(default=None, compare=False)

    kind = "infinite-loop"


# === reference problems ===


@dataclass(frozen=True)
class Error(Result):
    """The reference implementation failed; not attributable to the candidate."""

    reason: str = field(default="", compare=False)

    kind = "error"
