"""Signature descriptors and the argument validator."""
from __future__ import annotations

import inspect
import logging
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .errors import ConfigurationError
from .types import TypeKind, TypeTag

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True)
class SignatureDescriptor:
    """Name, parameter tags and return tag of an operation."""

    name: str
    parameter_types: Tuple[TypeTag, ...]
    return_type: TypeTag
    parameter_names: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ConfigurationError("A signature descriptor requires a non-empty name")

    @property
    def arity(self) -> int:
        return len(self.parameter_types)

    @property
    def is_void(self) -> bool:
        return self.return_type.kind is TypeKind.VOID

    def label(self) -> str:
        params = ", ".join(tag.display_name for tag in self.parameter_types)
        return f"{self.name}({params}) -> {self.return_type.display_name}"


def describe(operation: Any, *, name: Optional[str] = None, receiver: bool = False) -> SignatureDescriptor:
    """Extract the signature of ``operation``.

    ``receiver`` drops the leading ``self``/``cls`` parameter of unbound
    instance and class methods. Only positional parameters are described;
    ``*args`` becomes a single variadic tuple tag.
    """

    function = unwrap(operation)
    if not callable(function):
        raise ConfigurationError(f"{operation!r} is not callable")
    try:
        signature = inspect.signature(function)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Cannot introspect the signature of {operation!r}") from exc
    hints = _type_hints(function)
    parameters = list(signature.parameters.values())
    if receiver and parameters:
        parameters = parameters[1:]
    tags: list[TypeTag] = []
    names: list[str] = []
    for parameter in parameters:
        annotation = hints.get(parameter.name, parameter.annotation)
        if parameter.kind in _POSITIONAL:
            tags.append(TypeTag.of(annotation))
            names.append(parameter.name)
        elif parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            element = object if annotation is inspect.Parameter.empty else annotation
            tags.append(TypeTag.of(tuple[element, ...]))  # type: ignore[valid-type]
            names.append(f"*{parameter.name}")
    return_annotation = hints.get("return", signature.return_annotation)
    return SignatureDescriptor(
        name=name or getattr(function, "__name__", ""),
        parameter_types=tuple(tags),
        return_type=TypeTag.of(return_annotation),
        parameter_names=tuple(names),
    )


def unwrap(operation: Any) -> Any:
    """Return the plain function behind static/class method wrappers."""

    if isinstance(operation, (staticmethod, classmethod)):
        return operation.__func__
    return operation


def validate_signature(member: Any, descriptor: SignatureDescriptor) -> bool:
    """True if the member's parameter tags equal the descriptor's, pairwise."""

    actual = member.try_signature()
    if actual is None:
        return False
    return actual.parameter_types == descriptor.parameter_types


def validate_arguments(arguments: Any, descriptor: SignatureDescriptor) -> bool:
    """True if a test case (or raw argument sequence) fits the descriptor."""

    return explain_arguments(arguments, descriptor) is None


def explain_arguments(arguments: Any, descriptor: SignatureDescriptor) -> Optional[str]:
    """Describe the first reason ``arguments`` do not fit, or return None."""

    values: Sequence[Any] = getattr(arguments, "arguments", arguments)
    if len(values) != descriptor.arity:
        return f"expected {descriptor.arity} argument(s), got {len(values)}"
    for index, (tag, value) in enumerate(zip(descriptor.parameter_types, values)):
        if not tag.accepts(value):
            return (
                f"argument {index} ({value!r}) is a {type(value).__name__}, "
                f"expected {tag.display_name}"
            )
    return None


def _type_hints(function: Any) -> Mapping[str, Any]:
    try:
        return typing.get_type_hints(function)
    except (NameError, TypeError, AttributeError) as exc:
        logger.debug("resolving annotations of %r one at a time: %s", function, exc)
    raw = getattr(function, "__annotations__", None) or {}
    namespace = getattr(function, "__globals__", None) or {}
    return {key: _resolve_annotation(value, namespace) for key, value in raw.items()}


def _annotation_holder() -> None:
    pass


def _resolve_annotation(value: Any, namespace: Dict[str, Any]) -> Any:
    """Resolve one annotation; a forward reference that cannot be resolved stays textual."""
    if not isinstance(value, str):
        return value
    holder = types.FunctionType(_annotation_holder.__code__, namespace)
    holder.__annotations__ = {"value": value}
    try:
        return typing.get_type_hints(holder)["value"]
    except (NameError, TypeError, AttributeError, SyntaxError) as exc:
        logger.debug("annotation %r left unresolved: %s", value, exc)
        return value
