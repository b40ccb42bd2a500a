"""Metadata parsing for mod directories.

This module reads the ``info.ini`` dialect used by mods, validates the
identifier and version fields, and persists the Workshop identity back
into the file once an item has been published.
"""

import logging
import re
from pathlib import Path

from ..errors import FileSystemError, ValidationError
from .tokenizer import parse_list
from .types import ModMetadata

logger = logging.getLogger(__name__)

METADATA_FILENAME = "info.ini"

MAX_IDENTIFIER_LENGTH = 100

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9._-]*$")

# https://semver.org/spec/v2.0.0.html
SEMVER_PATTERN = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)

SECTION_PATTERN = re.compile(r"^\[([^\]]+)\]$")
KEY_VALUE_PATTERN = re.compile(r"^([^=]+)=(.*)$")

REQUIRED_FIELDS = ("name", "version")

IDENTIFIER_SUGGESTIONS = [
    "Identifiers must start with a letter or underscore",
    "Allowed characters: letters, digits, dots, hyphens, underscores",
    f"Maximum length: {MAX_IDENTIFIER_LENGTH} characters",
    "Example: MyMod.Example",
]

VERSION_SUGGESTIONS = [
    "Version must follow SemVer 2.0 format",
    "Examples: 1.0.0, 2.1.0-beta, 3.0.0-rc.1+build.123",
]


def is_valid_identifier(identifier: str) -> bool:
    """Check a package identifier against the NuGet ID grammar."""
    if not identifier or len(identifier) > MAX_IDENTIFIER_LENGTH:
        return False
    return IDENTIFIER_PATTERN.match(identifier) is not None


def is_valid_semver(version: str) -> bool:
    """Check a version string against the SemVer 2.0 grammar."""
    return SEMVER_PATTERN.match(version) is not None


def parse_ini(content: str) -> dict[str, dict[str, str]]:
    """Parse INI text into ``{section: {key: value}}``.

    The default section (before any header) is stored under ``""``.
    ``#`` starts a comment anywhere on a line.

    Args:
        content: Raw file content

    Returns:
        Mapping of section name to its key/value pairs
    """
    sections: dict[str, dict[str, str]] = {"": {}}
    current = ""

    for line in content.splitlines():
        active = line.strip()
        comment_index = active.find("#")
        if comment_index >= 0:
            active = active[:comment_index].strip()

        if not active:
            continue

        section_match = SECTION_PATTERN.match(active)
        if section_match:
            current = section_match.group(1)
            sections.setdefault(current, {})
            continue

        pair_match = KEY_VALUE_PATTERN.match(active)
        if pair_match:
            key = pair_match.group(1).strip()
            value = pair_match.group(2).strip()
            sections[current][key] = value

    return sections


def _optional(values: dict[str, str], key: str) -> str | None:
    value = values.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_published_file_id(value: str | None) -> int | None:
    if not value:
        return None
    try:
        published_id = int(value)
    except ValueError:
        logger.warning("Ignoring non-numeric publishedFileId: %s", value)
        return None
    return published_id if published_id > 0 else None


def parse_metadata_content(content: str) -> ModMetadata:
    """Parse and validate ``info.ini`` content.

    Args:
        content: Raw INI text

    Returns:
        Validated ModMetadata

    Raises:
        ValidationError: If required fields are missing or name/version are invalid
    """
    values = parse_ini(content)[""]

    missing = [key for key in REQUIRED_FIELDS if not values.get(key)]
    if missing:
        raise ValidationError(
            f"Missing required fields in {METADATA_FILENAME}: {', '.join(missing)}",
            [
                f"Add the missing fields to {METADATA_FILENAME}",
                f"Required fields: {', '.join(REQUIRED_FIELDS)}",
            ],
        )

    name = values["name"].strip()
    if not is_valid_identifier(name):
        raise ValidationError(f"Invalid mod name: {name}", IDENTIFIER_SUGGESTIONS)

    version = values["version"].strip()
    if not is_valid_semver(version):
        raise ValidationError(f"Invalid version format: {version}", VERSION_SUGGESTIONS)

    return ModMetadata(
        name=name,
        version=version,
        display_name=_optional(values, "displayName"),
        description=_optional(values, "description"),
        readme=_optional(values, "readme"),
        release_notes=_optional(values, "releaseNotes"),
        author=_optional(values, "author"),
        icon=_optional(values, "icon"),
        tags=parse_list(values.get("tags")),
        dependencies=parse_list(values.get("dependencies")),
        project_url=_optional(values, "projectUrl") or _optional(values, "homepage"),
        license=_optional(values, "license"),
        copyright=_optional(values, "copyright"),
        published_file_id=_parse_published_file_id(_optional(values, "publishedFileId")),
    )


def read_text_file(path: Path) -> str:
    """Read a UTF-8 text file.

    Raises:
        FileSystemError: If the file cannot be read
    """
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileSystemError(
            f"Failed to read file: {path}",
            ["Ensure the file exists and you have permission to read it"],
        ) from e


def parse_metadata_file(mod_dir: Path) -> ModMetadata:
    """Parse the metadata file of a mod directory.

    Args:
        mod_dir: Path to the mod directory

    Returns:
        Validated ModMetadata

    Raises:
        FileSystemError: If info.ini does not exist in mod_dir
        ValidationError: If the content is invalid
    """
    info_path = Path(mod_dir) / METADATA_FILENAME
    if not info_path.is_file():
        raise FileSystemError(
            f"{METADATA_FILENAME} not found in {mod_dir}",
            [
                f"Ensure {METADATA_FILENAME} exists in the mod directory",
                f"The {METADATA_FILENAME} file should contain mod metadata",
            ],
        )

    return parse_metadata_content(read_text_file(info_path))


def save_published_file_id(mod_dir: Path, published_file_id: int) -> None:
    """Persist a Workshop identity as a top-level ``publishedFileId`` key.

    An existing top-level entry is replaced. Otherwise the entry is
    inserted after the ``version`` line, before the first section
    header, or at the end of the file, in that order of preference.

    Args:
        mod_dir: Path to the mod directory
        published_file_id: Identity returned by the Workshop

    Raises:
        FileSystemError: If info.ini cannot be read or written
    """
    info_path = Path(mod_dir) / METADATA_FILENAME
    try:
        content = info_path.read_text(encoding="utf-8")
    except OSError as e:
        raise FileSystemError(
            f"Failed to update {METADATA_FILENAME}: {e}",
            [f"Ensure {METADATA_FILENAME} exists and is writable"],
        ) from e

    entry = f"publishedFileId = {published_file_id}"
    lines = content.splitlines()
    first_section = next(
        (i for i, line in enumerate(lines) if line.strip().startswith("[")),
        len(lines),
    )

    def key_of(line: str) -> str | None:
        match = KEY_VALUE_PATTERN.match(line.strip())
        return match.group(1).strip() if match else None

    top_level = range(first_section)
    existing = next((i for i in top_level if key_of(lines[i]) == "publishedFileId"), None)

    if existing is not None:
        lines[existing] = entry
    else:
        version_line = next((i for i in top_level if key_of(lines[i]) == "version"), None)
        if version_line is not None:
            lines.insert(version_line + 1, entry)
        else:
            lines.insert(first_section, entry)

    trailing_newline = "\n" if content.endswith("\n") else ""
    try:
        info_path.write_text("\n".join(lines) + trailing_newline, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(
            f"Failed to update {METADATA_FILENAME}: {e}",
            [f"Ensure {METADATA_FILENAME} exists and is writable"],
        ) from e

    logger.debug("Saved publishedFileId %s to %s", published_file_id, info_path)


def get_published_file_id(metadata: ModMetadata) -> int | None:
    return metadata.published_file_id


def has_published_file_id(metadata: ModMetadata) -> bool:
    return metadata.published_file_id is not None
