"""Core dataclasses shared across methodcheck subsystems."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError

# Seconds an invocation may run before it is considered stuck.
METHOD_TIMEOUT = 3.0
# Worker threads backing one session's executor.
DEFAULT_MAX_WORKERS = 16


@dataclass(frozen=True)
class VerificationSettings:
    """Tunable policy for one verification session."""

    timeout: float = METHOD_TIMEOUT
    max_workers: int = DEFAULT_MAX_WORKERS
    allow_private: bool = True
    none_matches_any: bool = False
    interrupt_on_timeout: bool = True

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")
        if self.max_workers < 2:
            raise ConfigurationError("max_workers must be at least 2 (candidate and reference run together)")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "VerificationSettings":
        if not data:
            return cls()
        return cls(
            timeout=float(data.get("timeout", METHOD_TIMEOUT)),
            max_workers=int(data.get("max_workers", DEFAULT_MAX_WORKERS)),
            allow_private=bool(data.get("allow_private", True)),
            none_matches_any=bool(data.get("none_matches_any", False)),
            interrupt_on_timeout=bool(data.get("interrupt_on_timeout", True)),
        )


@dataclass(frozen=True)
class TestCase:
    """One concrete argument tuple passed to both implementations."""

    __test__ = False

    arguments: Tuple[Any, ...]

    @classmethod
    def of(cls, value: Any) -> "TestCase":
        if isinstance(value, TestCase):
            return value
        if isinstance(value, np.ndarray):
            return cls(arguments=tuple(value))
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise ConfigurationError(f"A test case must be a sequence of arguments, got {value!r}")
        return cls(arguments=tuple(value))

    def __len__(self) -> int:
        return len(self.arguments)

    def identifier(self) -> str:
        return "(" + ", ".join(repr(arg) for arg in self.arguments) + ")"
