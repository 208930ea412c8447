"""YAML loader and validation for plan files."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Optional

import yaml
from jsonschema import Draft7Validator

from methodcheck.core.errors import ConfigurationError
from methodcheck.core.models import TestCase, VerificationSettings

from .models import GeneratorConfig, MethodPlan, SuitePlan, TargetRef

_TARGET_SCHEMA = {
    "type": ["string", "object"],
    "properties": {
        "source": {"type": "string", "minLength": 1},
        "name": {"type": "string"},
        "path": {"type": "string", "minLength": 1},
    },
    "additionalProperties": False,
}

PLAN_SCHEMA = {
    "type": "object",
    "required": ["candidate", "reference", "methods"],
    "properties": {
        "candidate": _TARGET_SCHEMA,
        "reference": _TARGET_SCHEMA,
        "settings": {
            "type": "object",
            "properties": {
                "timeout": {"type": "number", "exclusiveMinimum": 0},
                "max_workers": {"type": "integer", "minimum": 2},
                "allow_private": {"type": "boolean"},
                "none_matches_any": {"type": "boolean"},
                "interrupt_on_timeout": {"type": "boolean"},
            },
            "additionalProperties": False,
        },
        "methods": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": ["string", "object"],
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "reference": {"type": "string", "minLength": 1},
                    "cases": {"type": "array", "items": {"type": "array"}},
                    "generator": {"type": ["string", "object"]},
                    "rounds": {"type": "integer", "minimum": 0},
                },
            },
        },
    },
}
_validator = Draft7Validator(PLAN_SCHEMA)


def load_plan(path: str) -> SuitePlan:
    """Load and validate a plan file."""

    plan_path = Path(path).expanduser().resolve()
    try:
        raw = yaml.safe_load(plan_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Plan file {plan_path} is not valid YAML: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise ConfigurationError("Plan file must contain a mapping at the top level")
    errors = sorted(_validator.iter_errors(raw), key=lambda e: [str(part) for part in e.path])
    if errors:
        messages = "; ".join(f"{'/'.join(map(str, err.path)) or 'root'}: {err.message}" for err in errors)
        raise ConfigurationError(f"Plan schema validation failed: {messages}")
    base = plan_path.parent
    methods = tuple(_parse_method(item, base) for item in raw["methods"])
    names = [method.name for method in methods]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ConfigurationError(f"Duplicate method entries: {', '.join(duplicates)}")
    return SuitePlan(
        candidate=_parse_target(raw["candidate"], base),
        reference=_parse_target(raw["reference"], base),
        methods=methods,
        settings=VerificationSettings.from_mapping(raw.get("settings")),
        plan_dir=base,
    )


def _parse_target(raw: Any, base: Path) -> TargetRef:
    if isinstance(raw, str):
        if raw.endswith(".py"):
            return TargetRef(source=(base / raw).resolve())
        return TargetRef(path=raw)
    path = raw.get("path")
    source = raw.get("source")
    if bool(path) == bool(source):
        raise ConfigurationError("A target needs exactly one of 'path' or 'source'")
    if path:
        return TargetRef(path=str(path))
    name = raw.get("name")
    return TargetRef(source=(base / source).resolve(), name=str(name) if name else None)


def _parse_method(raw: Any, base: Path) -> MethodPlan:
    if isinstance(raw, str):
        return MethodPlan(name=raw, reference=raw)
    name = str(raw["name"]).strip()
    cases: List[TestCase] = [TestCase.of(item) for item in raw.get("cases") or []]
    generator = _parse_generator(raw.get("generator"), base)
    rounds = int(raw.get("rounds", 0))
    if rounds and generator is None:
        generator = GeneratorConfig()
    return MethodPlan(
        name=name,
        reference=str(raw.get("reference") or name),
        cases=tuple(cases),
        generator=generator,
        rounds=rounds,
    )


def _parse_generator(raw: Any, base: Path) -> Optional[GeneratorConfig]:
    if raw is None:
        return None
    if isinstance(raw, str):
        if ":" in raw:
            return GeneratorConfig(path=raw)
        return GeneratorConfig(name=raw)
    seed = raw.get("seed")
    params = raw.get("params") or {}
    if not isinstance(params, Mapping):
        raise ConfigurationError("generator.params must be a mapping")
    source = raw.get("source")
    path = raw.get("path")
    if source and path:
        raise ConfigurationError("generator accepts 'source' or 'path', not both")
    if source:
        return GeneratorConfig(
            source=(base / source).resolve(),
            attr=str(raw.get("name", "generate")),
            seed=int(seed) if seed is not None else None,
            params=dict(params),
        )
    return GeneratorConfig(
        name=str(raw.get("name", "builtin.random")),
        seed=int(seed) if seed is not None else None,
        params=dict(params),
        path=str(path) if path else None,
    )
