"""Human-readable messages for every result type."""
from __future__ import annotations

from functools import singledispatch
from typing import Any, Optional, Sequence

from methodcheck.core.results import (
    Error,
    Failure,
    HeaderSuccess,
    InfiniteLoop,
    MethodNotFound,
    MethodSecurity,
    Result,
    Success,
    TestCaseFailure,
    TestCaseSuccess,
    WrongParameterTypes,
    WrongReturnType,
)
from methodcheck.core.types import TypeTag


def format_arguments(arguments: Sequence[Any]) -> str:
    return ", ".join(repr(argument) for argument in arguments)


def format_types(tags: Optional[Sequence[TypeTag]]) -> str:
    if tags is None:
        return "<unreadable>"
    return "(" + ", ".join(tag.display_name for tag in tags) + ")"


def format_exception(exc: BaseException) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


@singledispatch
def render_result(result: Result) -> str:
    return f"<{result.method_name}> produced a {result.kind} result."


@render_result.register(Success)
def _render_success(result: Success) -> str:
    return f"<{result.method_name}> had a general success!"


@render_result.register(HeaderSuccess)
def _render_header_success(result: HeaderSuccess) -> str:
    return f"The header for <{result.method_name}> looks good!"


@render_result.register(TestCaseSuccess)
def _render_case_success(result: TestCaseSuccess) -> str:
    call = f"{result.method_name}({format_arguments(result.arguments)})"
    return f"Success! <{call}> returned <{result.output!r}>."


@render_result.register(Failure)
def _render_failure(result: Failure) -> str:
    return f"Failure! <{result.method_name}> had a general failure."


@render_result.register(MethodNotFound)
def _render_not_found(result: MethodNotFound) -> str:
    return f"Failure! The method <{result.method_name}> couldn't be found..."


@render_result.register(WrongParameterTypes)
def _render_wrong_parameters(result: WrongParameterTypes) -> str:
    return (
        f"Failure! <{result.method_name}> should have the parameter types <{format_types(result.expected)}> "
        f"but instead has <{format_types(result.actual)}>."
    )


@render_result.register(WrongReturnType)
def _render_wrong_return(result: WrongReturnType) -> str:
    return (
        f"Failure! <{result.method_name}> should have return type <{result.expected.display_name}>, "
        f"but instead has <{result.actual.display_name}>."
    )


@render_result.register(MethodSecurity)
def _render_security(result: MethodSecurity) -> str:
    text = f"Failure! <{result.method_name}> cannot be invoked"
    return f"{text}: {result.reason}." if result.reason else f"{text}."


@render_result.register(TestCaseFailure)
def _render_case_failure(result: TestCaseFailure) -> str:
    call = f"{result.method_name}({format_arguments(result.arguments)})"
    if result.exception is not None:
        return (
            f"Failure! <{call}> should output <{result.expected!r}> "
            f"but instead raised <{format_exception(result.exception)}>."
        )
    return f"Failure! <{call}> should output <{result.expected!r}> but instead outputs <{result.actual!r}>."


@render_result.register(InfiniteLoop)
def _render_infinite_loop(result: InfiniteLoop) -> str:
    call = f"{result.method_name}({format_arguments(result.arguments)})"
    return f"Failure! <{call}> should output <{result.expected!r}> but took too long -- is there an infinite loop?"


@render_result.register(Error)
def _render_error(result: Error) -> str:
    return f"There was an error (not your fault) trying to deal with <{result.method_name}>..."


def status_of(result: Result) -> str:
    """Collapse a result into ``passed``, ``failed`` or ``error``."""

    if result.passed:
        return "passed"
    if isinstance(result, Error):
        return "error"
    return "failed"
