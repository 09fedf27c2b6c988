"""
Course document shape validation

Client documents arrive as loosely typed JSON. Rather than rejecting a whole
write because one field has an unexpected shape, each known top-level field
is checked against its own JSON schema and a failing value is treated as
absent by the merge engine.
"""

from typing import Any, Dict
from jsonschema import Draft7Validator, SchemaError
import logging

logger = logging.getLogger(__name__)

_STRING = {"type": "string"}
_ARRAY = {"type": "array"}
_OBJECT = {"type": "object"}

COURSE_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "subject": _STRING,
        "combinedText": _STRING,
        "course_context": _STRING,
        "course_language_code": _STRING,
        "course_language_name": _STRING,
        "course_notes": _STRING,
        "course_icon": _STRING,
        "course_quick_summary": _STRING,
        "files": {"type": "array", "items": {"type": "object"}},
        "course_file_ids": {"type": "array", "items": _STRING},
        "topics": {"type": "array", "items": {"type": "object"}},
        "tree": {
            "type": "object",
            "properties": {"topics": _ARRAY},
        },
        "nodes": {
            "type": "object",
            "additionalProperties": {"type": ["object", "string", "null"]},
        },
        "progress": _OBJECT,
        "topic_notes": {
            "type": "object",
            "additionalProperties": {"type": ["string", "null"]},
        },
        "reviewSchedules": {
            "type": "object",
            "additionalProperties": {"type": ["object", "null"]},
        },
        "reviewedTopics": {
            "type": "object",
            "additionalProperties": {"type": ["number", "null"]},
        },
        "examDates": {"type": "array", "items": {"type": "object"}},
        "practiceLogs": _ARRAY,
        "surgeLog": _ARRAY,
    },
}

_field_validators: Dict[str, Draft7Validator] = {}


def load_course_schema() -> Dict[str, Any]:
    """Return the course document schema after checking it is well formed."""
    Draft7Validator.check_schema(COURSE_DOCUMENT_SCHEMA)
    return COURSE_DOCUMENT_SCHEMA


def _validator_for(field: str):
    validator = _field_validators.get(field)
    if validator is None:
        schema = COURSE_DOCUMENT_SCHEMA["properties"].get(field)
        if schema is None:
            return None
        validator = Draft7Validator(schema)
        _field_validators[field] = validator
    return validator


def field_has_expected_shape(field: str, value: Any) -> bool:
    """Check one top-level field value; unknown fields always pass."""
    validator = _validator_for(field)
    if validator is None:
        return True
    return validator.is_valid(value)


def malformed_fields(document: Any) -> list:
    """Names of top-level fields whose value does not match the schema."""
    if not isinstance(document, dict):
        return []
    return [
        field
        for field, value in document.items()
        if value is not None and not field_has_expected_shape(field, value)
    ]


async def get_validation_status() -> Dict[str, Any]:
    """FastAPI dependency reporting validation health for /health/detailed."""
    status = {
        "schema_loaded": False,
        "validation_working": False,
        "known_fields": 0,
    }
    try:
        schema = load_course_schema()
        status["schema_loaded"] = True
        status["known_fields"] = len(schema["properties"])
        status["validation_working"] = (
            field_has_expected_shape("topics", [{"name": "Limits"}])
            and not field_has_expected_shape("topics", "Limits")
        )
    except SchemaError as exc:
        logger.error(f"Course document schema is invalid: {exc}")
    return status
