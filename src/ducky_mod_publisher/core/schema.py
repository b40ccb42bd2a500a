"""JSON Schema validation for Workshop update details.

This module loads the bundled JSON Schema and validates update details
before they are handed to the Workshop backend.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import ValidationError as SchemaValidationError

from .types import UpdateDetails

# Path to the schema file bundled with the package
SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "workshop_update.schema.json"


@lru_cache(maxsize=1)
def load_schema() -> dict[str, Any]:
    """Load the JSON schema from disk.

    Returns:
        Dictionary containing the JSON Schema.

    Raises:
        FileNotFoundError: If schema file doesn't exist
        json.JSONDecodeError: If schema is invalid JSON
    """
    if not SCHEMA_PATH.exists():
        raise FileNotFoundError(f"Schema file not found: {SCHEMA_PATH}")

    with SCHEMA_PATH.open("r", encoding="utf-8") as f:
        return json.load(f)  # type: ignore[no-any-return]


def validate_update_details(details: UpdateDetails) -> None:
    """Validate update details against the JSON Schema.

    Args:
        details: The update details to validate

    Raises:
        jsonschema.ValidationError: If the details don't conform to the schema
        FileNotFoundError: If schema file is missing
        json.JSONDecodeError: If schema is invalid
    """
    schema = load_schema()
    jsonschema.validate(instance=dict(details), schema=schema)


def validate_update_details_with_error_details(
    details: UpdateDetails,
) -> tuple[bool, str | None]:
    """Validate update details and return detailed error information.

    Args:
        details: The update details to validate

    Returns:
        Tuple of (is_valid, error_message). error_message is None if valid.
    """
    try:
        validate_update_details(details)
        return True, None
    except SchemaValidationError as e:
        error_path = " -> ".join(str(p) for p in e.path) if e.path else "root"
        error_msg = f"Validation error at {error_path}: {e.message}"

        if e.instance:
            error_msg += f"\nInvalid value: {e.instance}"

        return False, error_msg
    except (FileNotFoundError, json.JSONDecodeError) as e:
        return False, f"Schema error: {e}"
