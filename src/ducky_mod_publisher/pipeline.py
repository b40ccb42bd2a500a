"""Publishing pipeline for mod directories.

This module provides the main interface for packaging a mod. The
pipeline is format-agnostic: it parses metadata, resolves content,
validates, and delegates the actual packaging to a Publisher.
"""

import logging
from pathlib import Path

from .core.content import load_description, load_release_notes
from .core.metadata import METADATA_FILENAME, parse_metadata_file
from .core.types import ValidationResult
from .errors import DuckyError, ValidationError
from .publishers.base import PreparedMod, Publisher, PublishResult

logger = logging.getLogger(__name__)


class PublishPipeline:
    """Main interface for publishing a mod.

    Publishers register themselves via FormatRegistry and are normally
    created through it.

    Example:
        >>> # Via registry (recommended)
        >>> from ducky_mod_publisher import FormatRegistry
        >>> pipeline = FormatRegistry.create_pipeline('nuget', output_dir=Path('pkg'))
        >>> result = pipeline.run(Path('MyMod'))
        >>>
        >>> # Direct instantiation (advanced)
        >>> from ducky_mod_publisher.platforms.nuget import NuGetPublisher
        >>> pipeline = PublishPipeline(NuGetPublisher(output_dir=Path('pkg')))
    """

    def __init__(self, publisher: Publisher):
        self.publisher = publisher

    def prepare(self, mod_dir: Path) -> PreparedMod:
        """Parse metadata and resolve description and release notes.

        Raises:
            FileSystemError: If info.ini is missing or a content file is unreadable
            ValidationError: If info.ini is invalid
        """
        mod_dir = Path(mod_dir).resolve()

        metadata = parse_metadata_file(mod_dir)
        logger.info("Parsed: %s v%s", metadata.name, metadata.version)

        description = load_description(mod_dir, metadata)
        release_notes = load_release_notes(mod_dir, metadata)
        logger.debug(
            "Loaded description (%d characters) and release notes (%d characters)",
            len(description),
            len(release_notes),
        )

        return PreparedMod(
            mod_dir=mod_dir,
            metadata=metadata,
            description=description,
            release_notes=release_notes,
        )

    def validate(self, mod_dir: Path) -> tuple[PreparedMod | None, ValidationResult]:
        """Run every check for the publisher's format.

        Metadata is only parsed when info.ini exists; otherwise the
        directory checks are returned on their own. A metadata error is
        added to the directory errors instead of replacing them.

        Returns:
            Tuple of (prepared mod or None, validation result)
        """
        mod_dir = Path(mod_dir)
        result = self.publisher.check_directory(mod_dir)

        if not result.valid and not (mod_dir / METADATA_FILENAME).is_file():
            return None, result

        try:
            prepared = self.prepare(mod_dir)
        except DuckyError as e:
            result.errors.append(e)
            return None, result

        result.extend(self.publisher.validate(prepared))
        return prepared, result

    def run(self, mod_dir: Path, **kwargs) -> PublishResult:
        """Validate and publish a mod.

        Args:
            mod_dir: Path to the mod directory
            **kwargs: Options passed to the publisher

        Returns:
            PublishResult from the publisher

        Raises:
            ValidationError: If validation fails
            DuckyError: If publishing fails
        """
        prepared, result = self.validate(mod_dir)

        for warning in result.warnings:
            logger.warning(warning)

        if prepared is None or not result.valid:
            raise validation_failure(result)

        logger.info("Validation passed")
        return self.publisher.publish(prepared, **kwargs)


def validation_failure(result: ValidationResult) -> ValidationError:
    """Fold the errors of a failed result into one ValidationError."""
    details = "\n".join(f"  - {error.message}" for error in result.errors)

    suggestions: list[str] = []
    for error in result.errors:
        for suggestion in error.suggestions:
            if suggestion not in suggestions:
                suggestions.append(suggestion)

    return ValidationError(f"Mod validation failed:\n{details}", suggestions)
