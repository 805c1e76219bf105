"""
Schema Validation - JSON Schema validation of desired resource state.

Provides functions to validate a resource schema and to validate desired
state against it before any remote call is made.
"""

import copy
import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from jsonschema import Draft7Validator

logger = logging.getLogger(__name__)

# Provider-schema keywords that are not part of JSON Schema
_PROVIDER_KEYWORDS = (
    "typeName",
    "readOnlyProperties",
    "writeOnlyProperties",
    "createOnlyProperties",
    "primaryIdentifier",
)


def to_json_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Strip provider-only keywords so the schema is plain Draft 7."""
    return {k: v for k, v in schema.items() if k not in _PROVIDER_KEYWORDS}


def validate_resource_schema(schema: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate that a resource schema is a valid JSON Schema.

    Args:
        schema: The resource schema to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        Draft7Validator.check_schema(to_json_schema(schema))
        return True, None
    except Exception as e:
        return False, f"Invalid schema: {str(e)}"


def validate_spec_against_schema(
    spec: Dict[str, Any],
    schema: Dict[str, Any],
    required: Optional[Iterable[str]] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Validate desired resource state against a resource schema.

    Args:
        spec: The desired resource state to validate
        schema: The resource schema to validate against
        required: Override the schema's required properties (used by verbs
            that only need part of the model, e.g. list)

    Returns:
        Tuple of (is_valid, error_message)
    """
    json_schema = to_json_schema(schema)
    if required is not None:
        json_schema = copy.deepcopy(json_schema)
        json_schema["required"] = list(required)

    try:
        validator = Draft7Validator(
            json_schema, format_checker=Draft7Validator.FORMAT_CHECKER
        )
        errors = sorted(validator.iter_errors(spec), key=lambda e: e.json_path)

        if not errors:
            return True, None

        # Collect all validation errors
        error_messages = []
        for error in errors:
            path = ".".join(str(p) for p in error.absolute_path) or "(root)"
            error_messages.append(f"{path}: {error.message}")

        return False, "; ".join(error_messages)

    except Exception as e:
        logger.error(f"Unexpected error during validation: {e}")
        return False, f"Validation failed: {str(e)}"
