"""Validation of a mod directory before a Steam Workshop upload."""

from pathlib import Path

from ...config import DEFAULT_STEAM_APP_ID, get_steam_app_id
from ...core.metadata import METADATA_FILENAME
from ...core.types import ModMetadata, ValidationResult
from ...core.validator import validate_binary_artifacts, validate_directory_exists
from ...errors import ConfigError, ValidationError
from .upload import PREVIEW_FILENAME


class SteamValidator:
    """Checks a mod directory against the Workshop upload requirements.

    Directory existence gates the other directory checks; every other
    check runs regardless of earlier failures.
    """

    def __init__(self, app_id: int | None = None):
        self.app_id = app_id

    def validate(self, mod_dir: Path, metadata: ModMetadata | None = None) -> ValidationResult:
        """Run every check.

        Args:
            mod_dir: Path to the mod directory
            metadata: Parsed metadata; enables the binary-artifact check

        Returns:
            ValidationResult with all errors found
        """
        result = self.check_directory(mod_dir)
        if metadata is not None and Path(mod_dir).is_dir():
            validate_binary_artifacts(Path(mod_dir), metadata.name, result)
        return result

    def check_directory(self, mod_dir: Path) -> ValidationResult:
        """Run the checks that do not need parsed metadata."""
        mod_dir = Path(mod_dir)
        result = ValidationResult()

        self.validate_app_id(result)

        if not validate_directory_exists(mod_dir, result):
            return result

        if not (mod_dir / METADATA_FILENAME).is_file():
            result.errors.append(
                ValidationError(
                    f"{METADATA_FILENAME} not found in mod directory",
                    [
                        f"Create an {METADATA_FILENAME} file in the mod directory",
                        "Include required fields: name, version",
                    ],
                )
            )

        if not (mod_dir / PREVIEW_FILENAME).is_file():
            result.errors.append(
                ValidationError(
                    f"{PREVIEW_FILENAME} not found in mod directory",
                    [
                        f"Add a {PREVIEW_FILENAME} image to the mod directory",
                        "Recommended size: 512x512 pixels or larger",
                    ],
                )
            )

        if not any(mod_dir.iterdir()):
            result.errors.append(
                ValidationError(
                    "Mod directory is empty",
                    [
                        "Add mod files to the directory",
                        f"Include at least {METADATA_FILENAME} and some content",
                    ],
                )
            )

        return result

    def validate_app_id(self, result: ValidationResult) -> None:
        try:
            app_id = self.app_id if self.app_id is not None else get_steam_app_id()
        except ConfigError as e:
            result.errors.append(ValidationError(e.message, e.suggestions))
            return

        if app_id <= 0:
            result.errors.append(
                ValidationError(
                    f"Invalid Steam App ID: {app_id}",
                    [
                        "Set the STEAM_APP_ID environment variable to a valid App ID",
                        f"Default App ID is {DEFAULT_STEAM_APP_ID}",
                    ],
                )
            )
