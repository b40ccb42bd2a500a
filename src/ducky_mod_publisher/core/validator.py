"""Checks shared by the NuGet and Steam validators.

Each check appends to a ValidationResult instead of raising, so callers
can run every check and report all problems at once.
"""

import re
from pathlib import Path

from ..errors import ValidationError
from .metadata import (
    IDENTIFIER_PATTERN,
    MAX_IDENTIFIER_LENGTH,
    METADATA_FILENAME,
    VERSION_SUGGESTIONS,
    is_valid_semver,
)
from .types import ModMetadata, ValidationResult

DEFAULT_BINARY_PATTERN = r"\.dll$"


def find_binary_artifacts(mod_dir: Path, pattern: str = DEFAULT_BINARY_PATTERN) -> list[Path]:
    """Find binary artifacts anywhere under mod_dir, sorted by path.

    Args:
        mod_dir: Path to the mod directory
        pattern: Case-insensitive regex matched against file names
    """
    regex = re.compile(pattern, re.IGNORECASE)
    return sorted(
        path for path in Path(mod_dir).rglob("*") if path.is_file() and regex.search(path.name)
    )


def validate_directory_exists(mod_dir: Path, result: ValidationResult) -> bool:
    """Check that mod_dir is a directory.

    Returns:
        True if the directory exists; other checks should be skipped otherwise
    """
    if Path(mod_dir).is_dir():
        return True

    result.errors.append(
        ValidationError(
            f"Directory does not exist: {mod_dir}",
            [
                "Ensure the mod directory path is correct",
                "Create the directory if it does not exist",
            ],
        )
    )
    return False


def validate_binary_artifacts(
    mod_dir: Path,
    name: str,
    result: ValidationResult,
    pattern: str = DEFAULT_BINARY_PATTERN,
) -> None:
    """Check that at least one artifact exists and one is named after the mod.

    Zero artifacts and "artifacts exist but none match" are reported as
    distinct errors.

    Args:
        mod_dir: Path to the mod directory
        name: Expected artifact base name (the mod identifier)
        result: Result to append errors to
        pattern: Regex selecting artifact file names
    """
    artifacts = find_binary_artifacts(mod_dir, pattern)

    if not artifacts:
        result.errors.append(
            ValidationError(
                "No DLL files found in mod directory",
                [
                    "Add at least one DLL file to the mod",
                    "DLL files are required for game mods",
                ],
            )
        )
        return

    if any(path.stem == name for path in artifacts):
        return

    count = len(artifacts)
    noun = "DLL" if count == 1 else "DLLs"
    names = ", ".join(path.name for path in artifacts)
    result.errors.append(
        ValidationError(
            f'No DLL file matches mod name "{name}" (found {count} {noun})',
            [
                f'Ensure at least one DLL is named "{name}.dll"',
                f"Current DLLs: {names}",
            ],
        )
    )


def validate_version(version: str, result: ValidationResult) -> None:
    if not is_valid_semver(version):
        result.errors.append(
            ValidationError(f"Invalid version format: {version}", VERSION_SUGGESTIONS)
        )


def validate_identifier(identifier: str, result: ValidationResult) -> None:
    """Check identifier length and grammar as separate errors."""
    if not identifier or len(identifier) > MAX_IDENTIFIER_LENGTH:
        length = len(identifier) if identifier else 0
        result.errors.append(
            ValidationError(
                f"Invalid NuGet ID length: {length} characters (max {MAX_IDENTIFIER_LENGTH})",
                ["Use a shorter name for your mod"],
            )
        )
        return

    if not IDENTIFIER_PATTERN.match(identifier):
        result.errors.append(
            ValidationError(
                f"Invalid NuGet ID format: {identifier}",
                [
                    "NuGet IDs must start with a letter or underscore",
                    "Allowed characters: letters, digits, dots, hyphens, underscores",
                    "Example: MyMod.Example",
                ],
            )
        )


def validate_required_fields(
    metadata: ModMetadata,
    result: ValidationResult,
    resolved_description: str = "",
) -> None:
    """Check required fields; a missing description is only a warning.

    Args:
        metadata: Parsed mod metadata
        result: Result to append errors and warnings to
        resolved_description: Description found by the content resolver
    """
    for field_name in ("name", "version"):
        if not getattr(metadata, field_name):
            result.errors.append(
                ValidationError(
                    f"Missing required field: {field_name}",
                    [f'Add "{field_name}" field to {METADATA_FILENAME}'],
                )
            )

    if not metadata.description and not resolved_description.strip():
        result.warnings.append(
            f'Missing recommended field: description (add "description" to {METADATA_FILENAME} '
            "or provide a readme)"
        )
