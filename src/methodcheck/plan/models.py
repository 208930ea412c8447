"""Data models for plan files."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

from methodcheck.core.models import TestCase, VerificationSettings
from methodcheck.core.results import Result
from methodcheck.utils import resolve_target


@dataclass(frozen=True)
class TargetRef:
    """Where a candidate or reference owner lives.

    Either ``path`` (``pkg.module:Attr``) or ``source`` (a Python file,
    optionally narrowed to the attribute ``name``) is set.
    """

    source: Optional[Path] = None
    name: Optional[str] = None
    path: Optional[str] = None

    def resolve(self) -> Any:
        return resolve_target(self.source, self.name, self.path)

    def label(self) -> str:
        if self.path:
            return self.path
        text = str(self.source)
        return f"{text}:{self.name}" if self.name else text


@dataclass(frozen=True)
class GeneratorConfig:
    name: str = "builtin.random"
    seed: Optional[int] = None
    params: Mapping[str, Any] = field(default_factory=dict)
    source: Optional[Path] = None
    attr: Optional[str] = None
    path: Optional[str] = None

    @property
    def is_custom(self) -> bool:
        return self.source is not None or self.path is not None


@dataclass(frozen=True)
class MethodPlan:
    name: str
    reference: str
    cases: Tuple[TestCase, ...] = ()
    generator: Optional[GeneratorConfig] = None
    rounds: int = 0


@dataclass(frozen=True)
class SuitePlan:
    candidate: TargetRef
    reference: TargetRef
    methods: Tuple[MethodPlan, ...]
    settings: VerificationSettings = field(default_factory=VerificationSettings)
    plan_dir: Path = Path(".")


@dataclass(frozen=True)
class MethodReport:
    """Everything one session produced for a single method."""

    method: MethodPlan
    results: Tuple[Result, ...]
    duration_s: float = 0.0

    @property
    def name(self) -> str:
        return self.method.name

    @property
    def passed(self) -> bool:
        return bool(self.results) and all(result.passed for result in self.results)

    def count(self, *, passed: bool) -> int:
        return sum(1 for result in self.results if result.passed is passed)


def all_passed(reports: Sequence[MethodReport]) -> bool:
    return all(report.passed for report in reports)
