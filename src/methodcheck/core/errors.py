"""Exception hierarchy shared by the verification engine."""
from __future__ import annotations


class MethodCheckError(Exception):
    """Base class for every fatal methodcheck error."""


class ConfigurationError(MethodCheckError, ValueError):
    """The test suite itself is wrong (bad cases, generator, plan, reference)."""


class MemberAccessError(ConfigurationError):
    """A member exists but cannot be invoked with the current access policy."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"'{name}' cannot be invoked: {reason}")
        self.name = name
        self.reason = reason


class InvocationSetupError(MethodCheckError, RuntimeError):
    """An invocation failed outside of the invoked code itself."""


class SessionClosedError(MethodCheckError, RuntimeError):
    """Raised when a torn down session or executor is used again."""


class InvocationTargetError(Exception):
    """Wraps an exception raised by the invoked member's own code."""

    def __init__(self, name: str, cause: BaseException) -> None:
        super().__init__(f"'{name}' raised {type(cause).__name__}: {cause}")
        self.name = name
        self.cause = cause


class TaskInterrupted(BaseException):
    """Injected into a worker thread whose task ran past its deadline.

    Derives from ``BaseException`` so ``except Exception`` blocks in the
    interrupted code do not swallow it.
    """
