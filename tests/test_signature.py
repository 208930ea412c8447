import pytest

from methodcheck.core import ConfigurationError, TestCase, describe, validate_arguments
from methodcheck.core.signature import SignatureDescriptor, explain_arguments
from methodcheck.core.types import TypeKind, TypeTag


def solve(a: int, b: float) -> float:
    return a * b


class Holder:
    def scale(self, value: int, factor: int = 2) -> int:
        return value * factor

    @classmethod
    def build(cls, name: str) -> "Holder":
        return cls()


def test_describe_plain_function() -> None:
    descriptor = describe(solve)
    assert descriptor.name == "solve"
    assert descriptor.parameter_types == (TypeTag.of(int), TypeTag.of(float))
    assert descriptor.parameter_names == ("a", "b")
    assert descriptor.return_type == TypeTag.of(float)
    assert descriptor.arity == 2
    assert descriptor.label() == "solve(int, float) -> float"


def test_describe_drops_receiver() -> None:
    descriptor = describe(Holder.scale, receiver=True)
    assert descriptor.parameter_types == (TypeTag.of(int), TypeTag.of(int))
    assert describe(Holder.__dict__["build"], receiver=True).return_type == TypeTag.of(Holder)


def test_describe_variadic_and_void() -> None:
    def log_all(*values: int) -> None:
        return None

    descriptor = describe(log_all)
    assert descriptor.parameter_types == (TypeTag.of(tuple[int, ...]),)
    assert descriptor.parameter_names == ("*values",)
    assert descriptor.is_void


def test_missing_annotations_become_any() -> None:
    def loose(a, b):
        return a

    descriptor = describe(loose)
    assert all(tag.kind is TypeKind.ANY for tag in descriptor.parameter_types)
    assert descriptor.return_type.kind is TypeKind.ANY


def test_unresolvable_annotation_stays_textual() -> None:
    def odd(value: "Missing") -> int:  # noqa: F821
        return 1

    descriptor = describe(odd)
    assert descriptor.parameter_types[0].annotation == "Missing"


def test_resolvable_annotations_survive_an_unresolvable_one() -> None:
    def mixed(count: "int", value: "Missing") -> "bool":  # noqa: F821
        return True

    descriptor = describe(mixed)
    assert descriptor.parameter_types[0] == TypeTag.of(int)
    assert descriptor.parameter_types[1].annotation == "Missing"
    assert descriptor.return_type == TypeTag.of(bool)


def test_empty_name_rejected() -> None:
    with pytest.raises(ConfigurationError):
        SignatureDescriptor(name="", parameter_types=(), return_type=TypeTag.of(None))


def test_non_callable_rejected() -> None:
    with pytest.raises(ConfigurationError):
        describe(42)


def test_validate_arguments() -> None:
    descriptor = describe(solve)
    assert validate_arguments((1, 2.5), descriptor)
    assert validate_arguments(TestCase.of([1, 2.5]), descriptor)
    assert not validate_arguments((1,), descriptor)
    assert not validate_arguments((1, 2), descriptor)


def test_explain_arguments_messages() -> None:
    def pair(a: int, b: int) -> int:
        return a + b

    descriptor = describe(pair)
    assert explain_arguments((1, 2), descriptor) is None
    assert explain_arguments((1,), descriptor) == "expected 2 argument(s), got 1"
    assert explain_arguments((1, "x"), descriptor) == "argument 1 ('x') is a str, expected int"
