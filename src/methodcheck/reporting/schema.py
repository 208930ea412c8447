"""JSON schema definition for reporter output."""
from __future__ import annotations

SCHEMA_VERSION = "1.0.0"

JSON_SCHEMA_V1 = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "methodcheck report",
    "type": "object",
    "required": ["schema_version", "generated_at", "summary", "methods"],
    "properties": {
        "schema_version": {"type": "string"},
        "generated_at": {"type": "string", "format": "date-time"},
        "summary": {
            "type": "object",
            "required": ["methods", "total", "passed", "failed", "errors", "duration_s"],
            "properties": {
                "methods": {"type": "integer"},
                "total": {"type": "integer"},
                "passed": {"type": "integer"},
                "failed": {"type": "integer"},
                "errors": {"type": "integer"},
                "timeout_s": {"type": "number"},
                "duration_s": {"type": "number"},
            },
        },
        "methods": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name", "reference", "passed", "duration_ms", "results"],
                "properties": {
                    "name": {"type": "string"},
                    "reference": {"type": "string"},
                    "passed": {"type": "boolean"},
                    "duration_ms": {"type": "number"},
                    "results": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "required": ["kind", "status", "message"],
                            "properties": {
                                "kind": {"type": "string"},
                                "status": {"enum": ["passed", "failed", "error"]},
                                "message": {"type": "string"},
                                "arguments": {"type": "array", "items": {"type": "string"}},
                                "expected": {"type": "string"},
                                "actual": {"type": "string"},
                                "exception": {"type": "string"},
                                "reason": {"type": "string"},
                            },
                        },
                    },
                },
            },
        },
    },
}
