"""Validation of a mod directory before NuGet packaging."""

from pathlib import Path

from ...core.types import ModMetadata, ValidationResult
from ...core.validator import (
    validate_binary_artifacts,
    validate_directory_exists,
    validate_identifier,
    validate_required_fields,
    validate_version,
)


def validate_mod(mod_dir: Path, metadata: ModMetadata, description: str = "") -> ValidationResult:
    """Validate a mod directory for NuGet packaging.

    Every check runs, so the result lists all problems at once.

    Args:
        mod_dir: Path to the mod directory
        metadata: Parsed mod metadata
        description: Description found by the content resolver

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()

    if not validate_directory_exists(Path(mod_dir), result):
        return result

    validate_binary_artifacts(Path(mod_dir), metadata.name, result)
    validate_version(metadata.version, result)
    validate_identifier(metadata.name, result)
    validate_required_fields(metadata, result, resolved_description=description)

    return result
