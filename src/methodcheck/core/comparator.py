"""Value equality deciding whether a candidate output matches the reference."""
from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Optional

import numpy as np

from .types import BOXED_EQUIVALENTS

logger = logging.getLogger(__name__)


def values_equal(expected: Any, actual: Any) -> bool:
    """Structural equality with bit-faithful float semantics.

    Scalars only match within one family: ``True`` never equals ``1`` and
    ``1`` never equals ``1.0``, while a NumPy scalar matches the builtin it
    boxes. Floats compare the way boxed doubles do: every NaN equals every
    other NaN and ``0.0`` differs from ``-0.0``. Lists, tuples and dicts
    compare element-wise; NumPy arrays compare by shape and contents.
    """

    if isinstance(expected, np.ndarray) or isinstance(actual, np.ndarray):
        return _arrays_equal(expected, actual)
    family = _scalar_family(expected)
    if family is not _scalar_family(actual):
        return False
    if family is float:
        return _floats_equal(float(expected), float(actual))
    if family is complex:
        return _floats_equal(expected.real, actual.real) and _floats_equal(expected.imag, actual.imag)
    if isinstance(expected, list) and isinstance(actual, list):
        return _sequences_equal(expected, actual)
    if isinstance(expected, tuple) and isinstance(actual, tuple):
        return _sequences_equal(expected, actual)
    if isinstance(expected, Mapping) and isinstance(actual, Mapping):
        if expected.keys() != actual.keys():
            return False
        return all(values_equal(expected[key], actual[key]) for key in expected)
    try:
        outcome = expected == actual
    except Exception as exc:  # a broken __eq__ on a returned object counts as a mismatch
        logger.debug("equality check raised %s; treating values as different", exc)
        return False
    if isinstance(outcome, np.ndarray):
        return bool(outcome.all())
    return bool(outcome)


def _sequences_equal(expected: Any, actual: Any) -> bool:
    if len(expected) != len(actual):
        return False
    return all(values_equal(exp, act) for exp, act in zip(expected, actual))


def _arrays_equal(expected: Any, actual: Any) -> bool:
    left = np.asarray(expected)
    right = np.asarray(actual)
    if left.shape != right.shape:
        return False
    try:
        return bool(np.array_equal(left, right, equal_nan=True))
    except TypeError:
        # equal_nan is only defined for numeric dtypes
        return bool(np.array_equal(left, right))


def _floats_equal(expected: float, actual: float) -> bool:
    if math.isnan(expected) or math.isnan(actual):
        return math.isnan(expected) and math.isnan(actual)
    return expected == actual and math.copysign(1.0, expected) == math.copysign(1.0, actual)


def _scalar_family(value: Any) -> Optional[type]:
    # bool subclasses int, so it is checked first
    if isinstance(value, (bool, np.bool_)):
        return bool
    for builtin, boxed in BOXED_EQUIVALENTS.items():
        if builtin is not bool and isinstance(value, (builtin, boxed)):
            return builtin
    return None
