"""Shared helpers."""
from .importing import import_string, load_from_source, resolve_target

__all__ = ["import_string", "load_from_source", "resolve_target"]
