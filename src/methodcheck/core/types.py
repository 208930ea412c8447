"""Type tags describing the shape of parameters and return values."""
from __future__ import annotations

import inspect
import types
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

import numpy as np


class TypeKind(str, Enum):
    """Semantic family of a declared type."""

    INTEGER = "integer"
    FLOATING = "floating"
    BOOLEAN = "boolean"
    STRING = "string"
    BYTES = "bytes"
    COMPLEX = "complex"
    COMPOSITE = "composite"
    VOID = "void"
    ANY = "any"


_SCALAR_KINDS: Mapping[type, TypeKind] = {
    int: TypeKind.INTEGER,
    float: TypeKind.FLOATING,
    bool: TypeKind.BOOLEAN,
    str: TypeKind.STRING,
    bytes: TypeKind.BYTES,
    complex: TypeKind.COMPLEX,
}

# NumPy scalars are the boxed form of the builtin scalar types: a value of any
# listed class is accepted wherever the builtin type is declared.
BOXED_EQUIVALENTS: Mapping[type, Tuple[type, ...]] = {
    int: (np.integer,),
    float: (np.floating,),
    bool: (np.bool_,),
    complex: (np.complexfloating,),
    str: (np.str_,),
    bytes: (np.bytes_,),
}


@dataclass(frozen=True)
class TypeTag:
    """A resolved annotation plus its semantic kind.

    Two tags are equal only when their annotations are equal; there is no
    widening or narrowing between tags.
    """

    annotation: Any
    kind: TypeKind

    @classmethod
    def of(cls, annotation: Any) -> "TypeTag":
        if annotation is inspect.Parameter.empty or annotation is Any:
            return cls(Any, TypeKind.ANY)
        if annotation is None or annotation is type(None):
            return cls(None, TypeKind.VOID)
        if isinstance(annotation, type) and annotation in _SCALAR_KINDS:
            return cls(annotation, _SCALAR_KINDS[annotation])
        return cls(annotation, TypeKind.COMPOSITE)

    @property
    def runtime_type(self) -> Optional[type]:
        """Class a value must have to match this tag exactly, if any."""

        origin = typing.get_origin(self.annotation)
        if origin is not None:
            return origin if isinstance(origin, type) and not _is_union(self.annotation) else None
        if isinstance(self.annotation, type):
            return self.annotation
        return None

    @property
    def display_name(self) -> str:
        if self.kind is TypeKind.VOID:
            return "None"
        if self.kind is TypeKind.ANY:
            return "Any"
        if isinstance(self.annotation, str):
            return self.annotation
        if isinstance(self.annotation, type) and typing.get_origin(self.annotation) is None:
            return self.annotation.__qualname__
        return repr(self.annotation).replace("typing.", "")

    def accepts(self, value: Any) -> bool:
        """Return True if ``value`` may be passed where this tag is declared."""

        if value is None or self.kind is TypeKind.ANY:
            return True
        if _is_union(self.annotation):
            return any(TypeTag.of(member).accepts(value) for member in typing.get_args(self.annotation))
        if isinstance(self.annotation, str):
            # unresolved forward reference
            return type(value).__name__ == self.annotation.rpartition(".")[-1]
        runtime = self.runtime_type
        if runtime is None:
            return True
        if type(value) is runtime or is_boxed(value, runtime):
            return True
        return inspect.isabstract(runtime) and isinstance(value, runtime)

    def __str__(self) -> str:
        return self.display_name


def is_boxed(value: Any, target: type) -> bool:
    """True if ``value`` is a boxed scalar corresponding to ``target``."""

    return any(isinstance(value, boxed) for boxed in BOXED_EQUIVALENTS.get(target, ()))


def _is_union(annotation: Any) -> bool:
    origin = typing.get_origin(annotation)
    return origin is typing.Union or origin is types.UnionType
