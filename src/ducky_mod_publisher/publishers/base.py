"""Base publisher class for packaging mods into a target format.

This module defines the interface that every publishing format (NuGet,
Steam Workshop) implements, plus the records passed between the
pipeline and a publisher.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ..core.types import ModMetadata, ValidationResult


@dataclass
class PreparedMod:
    """A mod directory with its parsed metadata and resolved content."""

    mod_dir: Path
    metadata: ModMetadata
    description: str = ""
    release_notes: str = ""


@dataclass
class PublishResult:
    """Outcome of a successful publish."""

    format: str
    artifact: Path | None = None  # e.g. the .nupkg file
    published_file_id: int | None = None  # Workshop item, if any
    created: bool = False  # True if a new remote item was created


class Publisher(ABC):
    """Abstract base class for publishing formats.

    Publishers validate a prepared mod against their format's rules and
    then package and/or upload it.
    """

    name: str = ""

    def check_directory(self, mod_dir: Path) -> ValidationResult:
        """Run checks that do not need parsed metadata.

        The default implementation has no such checks.
        """
        return ValidationResult()

    @abstractmethod
    def validate(self, prepared: PreparedMod) -> ValidationResult:
        """Validate a prepared mod.

        Args:
            prepared: Mod directory with parsed metadata and content

        Returns:
            ValidationResult listing every problem found
        """

    @abstractmethod
    def publish(self, prepared: PreparedMod, **kwargs) -> PublishResult:
        """Package and/or upload a validated mod.

        Args:
            prepared: Mod directory with parsed metadata and content
            **kwargs: Format-specific options

        Returns:
            PublishResult describing what was produced

        Raises:
            DuckyError: If publishing fails
        """
