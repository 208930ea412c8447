"""Test case generator exports."""
from .base import (
    CallableGenerator,
    RandomArgumentGenerator,
    TestCaseGenerator,
    as_generator,
    create_generator,
    generator_names,
    register_generator,
    resolve_generator,
)

__all__ = [
    "CallableGenerator",
    "RandomArgumentGenerator",
    "TestCaseGenerator",
    "as_generator",
    "create_generator",
    "generator_names",
    "register_generator",
    "resolve_generator",
]
