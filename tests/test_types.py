import inspect
from typing import Any, Optional

import numpy as np

from methodcheck.core.types import TypeKind, TypeTag, is_boxed


def test_scalar_kinds() -> None:
    assert TypeTag.of(int).kind is TypeKind.INTEGER
    assert TypeTag.of(float).kind is TypeKind.FLOATING
    assert TypeTag.of(bool).kind is TypeKind.BOOLEAN
    assert TypeTag.of(str).kind is TypeKind.STRING
    assert TypeTag.of(list[int]).kind is TypeKind.COMPOSITE


def test_missing_annotation_and_none() -> None:
    assert TypeTag.of(inspect.Parameter.empty) == TypeTag.of(Any)
    assert TypeTag.of(inspect.Parameter.empty).kind is TypeKind.ANY
    assert TypeTag.of(None) == TypeTag.of(type(None))
    assert TypeTag.of(None).kind is TypeKind.VOID


def test_tags_compare_by_exact_annotation() -> None:
    assert TypeTag.of(int) != TypeTag.of(float)
    assert TypeTag.of(int) != TypeTag.of(bool)
    assert TypeTag.of(list[int]) == TypeTag.of(list[int])
    assert TypeTag.of(list[int]) != TypeTag.of(list[float])


def test_exact_runtime_class_required() -> None:
    tag = TypeTag.of(int)
    assert tag.accepts(3)
    assert not tag.accepts(3.0)
    assert not tag.accepts(True)
    assert not TypeTag.of(float).accepts(1)


def test_numpy_scalars_are_boxed_equivalents() -> None:
    assert TypeTag.of(int).accepts(np.int64(3))
    assert TypeTag.of(int).accepts(np.int8(3))
    assert TypeTag.of(float).accepts(np.float32(1.5))
    assert TypeTag.of(bool).accepts(np.bool_(True))
    assert not TypeTag.of(int).accepts(np.float64(3.0))
    assert is_boxed(np.str_("a"), str)
    assert not is_boxed(np.int64(1), float)


def test_none_is_accepted_everywhere() -> None:
    assert TypeTag.of(int).accepts(None)
    assert TypeTag.of(list[int]).accepts(None)


def test_generic_and_union_tags() -> None:
    assert TypeTag.of(list[int]).accepts([1, 2])
    assert not TypeTag.of(list[int]).accepts((1, 2))
    assert TypeTag.of(Optional[int]).accepts(4)
    assert not TypeTag.of(Optional[int]).accepts("4")
    assert TypeTag.of(int | str).accepts("4")


def test_unresolved_annotation_matches_by_class_name() -> None:
    class Widget:
        pass

    tag = TypeTag.of("Widget")
    assert tag.kind is TypeKind.COMPOSITE
    assert tag.accepts(Widget())
    assert not tag.accepts(object())


def test_display_names() -> None:
    assert TypeTag.of(int).display_name == "int"
    assert TypeTag.of(None).display_name == "None"
    assert TypeTag.of(inspect.Parameter.empty).display_name == "Any"
    assert TypeTag.of(list[int]).display_name == "list[int]"
    assert str(TypeTag.of(Optional[int])) == "Optional[int]"
