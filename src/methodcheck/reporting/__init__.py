"""Reporting helpers."""
from .base import Reporter
from .json_reporter import JsonReporter, build_payload
from .render import render_result, status_of
from .schema import JSON_SCHEMA_V1, SCHEMA_VERSION
from .terminal import TerminalReporter

__all__ = [
    "JSON_SCHEMA_V1",
    "JsonReporter",
    "Reporter",
    "SCHEMA_VERSION",
    "TerminalReporter",
    "build_payload",
    "render_result",
    "status_of",
]
