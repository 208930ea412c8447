"""Helpers for locating candidate, reference and generator objects."""
from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Optional


def import_string(path: str) -> Any:
    """Return the attribute at the given dotted path.

    Supports ``module:attr`` or ``module.attr`` syntax.
    """

    if not path:
        raise ValueError("Empty import path provided")
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, sep, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ValueError(f"Invalid import path '{path}'")
    module = importlib.import_module(module_name)
    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise AttributeError(f"Module '{module_name}' has no attribute '{attr}'") from exc
    return target


def load_from_source(source: Path) -> ModuleType:
    """Execute the Python file at ``source`` and return it as a module."""

    path = source.expanduser().resolve()
    if not path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    module_name = f"methodcheck_source_{path.stem}_{hash(str(path)) & 0xFFFF:x}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Unable to load module from {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def resolve_target(source: Optional[Path], name: Optional[str], path: Optional[str] = None) -> Any:
    """Resolve a plan target given either a source file or an import path.

    With a source file, ``name`` selects an attribute of the loaded module
    (dotted names reach nested classes); without it the module itself is the
    target.
    """

    if path:
        return import_string(path)
    if source is None:
        raise ValueError("A target needs either 'path' or 'source'")
    target: Any = load_from_source(source)
    for part in (name or "").split("."):
        if not part:
            continue
        if not hasattr(target, part):
            raise AttributeError(f"'{part}' not found in {source}")
        target = getattr(target, part)
    return target
