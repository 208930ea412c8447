"""Generator scaffolding for methodcheck."""
from __future__ import annotations

import string
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Sequence, Tuple

import numpy as np

from methodcheck.core.signature import SignatureDescriptor
from methodcheck.core.types import TypeKind, TypeTag
from methodcheck.utils import import_string

_ALPHABET = tuple(string.ascii_letters + string.digits)


class TestCaseGenerator(Protocol):
    """Protocol all generators must follow: one argument tuple per call."""

    def generate(self) -> Sequence[Any]:
        ...


GeneratorFactory = Callable[..., TestCaseGenerator]


@dataclass
class CallableGenerator:
    """Adapts a zero-argument callable returning an argument sequence."""

    func: Callable[[], Sequence[Any]]

    def generate(self) -> Sequence[Any]:
        return self.func()


@dataclass
class RandomArgumentGenerator:
    """Draws one random value per parameter from a NumPy generator."""

    parameter_types: Sequence[TypeTag]
    seed: Optional[int] = None
    low: float = -100.0
    high: float = 100.0
    max_length: int = 8
    rng: np.random.Generator = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must not exceed high ({self.high})")
        self.rng = np.random.default_rng(self.seed)

    @classmethod
    def for_signature(cls, descriptor: SignatureDescriptor, **params: Any) -> "RandomArgumentGenerator":
        return cls(descriptor.parameter_types, **params)

    def generate(self) -> Tuple[Any, ...]:
        return tuple(self._generate_value(tag) for tag in self.parameter_types)

    def _generate_value(self, tag: TypeTag) -> Any:
        kind = tag.kind
        if kind is TypeKind.INTEGER:
            return int(self.rng.integers(int(self.low), int(self.high), endpoint=True))
        if kind is TypeKind.FLOATING:
            return float(self.rng.uniform(self.low, self.high))
        if kind is TypeKind.BOOLEAN:
            return bool(self.rng.integers(0, 2))
        if kind is TypeKind.COMPLEX:
            return complex(self.rng.uniform(self.low, self.high), self.rng.uniform(self.low, self.high))
        if kind is TypeKind.STRING:
            return "".join(self.rng.choice(_ALPHABET, size=self._length()))
        if kind is TypeKind.BYTES:
            return self.rng.integers(0, 256, size=self._length(), dtype=np.uint8).tobytes()
        if typing.get_origin(tag.annotation) in (typing.Union, types.UnionType):
            options = [arg for arg in typing.get_args(tag.annotation) if arg is not type(None)]
            return self._generate_value(TypeTag.of(options[0]))
        raise TypeError(f"Unsupported parameter type '{tag.display_name}' for generator")

    def _length(self) -> int:
        return int(self.rng.integers(0, self.max_length, endpoint=True))


_REGISTRY: Dict[str, GeneratorFactory] = {}


def register_generator(name: str, factory: GeneratorFactory) -> None:
    """Register ``factory(descriptor, *, seed, params)`` under ``name``."""

    key = name.lower()
    if key in _REGISTRY:
        raise ValueError(f"Generator '{name}' already registered")
    _REGISTRY[key] = factory


def generator_names() -> Tuple[str, ...]:
    return tuple(sorted(_REGISTRY))


def create_generator(
    name: str,
    descriptor: SignatureDescriptor,
    *,
    seed: Optional[int] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> TestCaseGenerator:
    factory = _REGISTRY.get(name.lower())
    if factory is None:
        supported = ", ".join(generator_names())
        raise KeyError(f"Unknown generator '{name}'. Registered generators: {supported}")
    return factory(descriptor, seed=seed, params=dict(params or {}))


def as_generator(obj: Any) -> TestCaseGenerator:
    """Accept a generator object, a generator class or a zero-argument callable."""

    if isinstance(obj, type):
        obj = obj()
    if callable(getattr(obj, "generate", None)):
        return obj
    if callable(obj):
        return CallableGenerator(obj)
    raise TypeError(f"{obj!r} does not implement 'generate' and is not callable")


def resolve_generator(path: str) -> TestCaseGenerator:
    """Import a generator from a dotted path string."""

    return as_generator(import_string(path))


def _random_factory(
    descriptor: SignatureDescriptor, *, seed: Optional[int], params: Mapping[str, Any]
) -> TestCaseGenerator:
    return RandomArgumentGenerator.for_signature(
        descriptor,
        seed=seed,
        low=float(params.get("low", -100.0)),
        high=float(params.get("high", 100.0)),
        max_length=int(params.get("max_length", 8)),
    )


register_generator("builtin.random", _random_factory)
