"""Type definitions shared by the parser, validators and publishers.

This module defines the records that flow between the core engines:
parsed mod metadata, collected package files, localized Workshop
content and validation results.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypedDict

if TYPE_CHECKING:
    from ..errors import DuckyError


class UpdateDetails(TypedDict, total=False):
    """Details of one Workshop item update, as passed to the backend."""

    title: str
    description: str  # BBCode
    change_note: str
    preview_path: str
    content_path: str
    visibility: int  # 0 = public
    language: str  # Steam language code
    tags: list[str]


@dataclass
class ModMetadata:
    """Validated metadata parsed from a mod's ``info.ini``.

    Optional fields are ``None`` when absent from the file, never an
    empty string. ``published_file_id`` is the only field that changes
    after parsing (set once the Workshop item has been created).
    """

    name: str
    version: str
    display_name: str | None = None
    description: str | None = None
    readme: str | None = None  # File path relative to mod dir, or inline text
    release_notes: str | None = None  # File path relative to mod dir, or inline text
    author: str | None = None
    icon: str | None = None
    tags: list[str] | None = None
    dependencies: list[str] | None = None  # "id" or "id:version"
    project_url: str | None = None
    license: str | None = None
    copyright: str | None = None
    published_file_id: int | None = None

    @property
    def title(self) -> str:
        """Display name if set, otherwise the identifier."""
        return self.display_name or self.name


@dataclass(frozen=True)
class CollectedFile:
    """A file to include in a package."""

    source: str  # Absolute path on disk
    target: str  # Path relative to package root


@dataclass(frozen=True)
class LocalizedDescription:
    language: str  # Steam language code (e.g. "schinese")
    content: str  # BBCode


@dataclass(frozen=True)
class LocalizedTitle:
    language: str
    title: str


@dataclass
class ValidationResult:
    """Outcome of a validation run.

    ``errors`` block packaging; ``warnings`` are informational.
    """

    errors: list["DuckyError"] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def extend(self, other: "ValidationResult") -> None:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
