"""Core models and helpers exposed at the package level."""
from .errors import (
    ConfigurationError,
    InvocationSetupError,
    InvocationTargetError,
    MemberAccessError,
    MethodCheckError,
    SessionClosedError,
    TaskInterrupted,
)
from .models import DEFAULT_MAX_WORKERS, METHOD_TIMEOUT, TestCase, VerificationSettings
from .signature import SignatureDescriptor, describe, validate_arguments, validate_signature
from .types import BOXED_EQUIVALENTS, TypeKind, TypeTag

__all__ = [
    "BOXED_EQUIVALENTS",
    "ConfigurationError",
    "DEFAULT_MAX_WORKERS",
    "InvocationSetupError",
    "InvocationTargetError",
    "METHOD_TIMEOUT",
    "MemberAccessError",
    "MethodCheckError",
    "SessionClosedError",
    "SignatureDescriptor",
    "TaskInterrupted",
    "TestCase",
    "TypeKind",
    "TypeTag",
    "VerificationSettings",
    "describe",
    "validate_arguments",
    "validate_signature",
]
