"""Resolution of description and release-notes content for a mod.

Both resolvers walk a fixed precedence chain and return the first
content found. An empty string means nothing was found and is a valid
result, not an error.
"""

import logging
from pathlib import Path

from .collector import validate_path_safety
from .metadata import read_text_file
from .types import ModMetadata

logger = logging.getLogger(__name__)

DESCRIPTION_DIR = "description"
RELEASE_NOTES_FILENAME = "releaseNotes.md"

# Sidecar description files checked when no readme is configured
DESCRIPTION_FALLBACKS = ("zh.md", "en.md")


def _resolve_pointer(mod_dir: Path, value: str | None) -> str | None:
    """Resolve a field that may name a file or hold inline text.

    A file at ``mod_dir/value`` wins over the literal value. The file must
    lie inside mod_dir.
    """
    if not value:
        return None

    candidate = mod_dir / value
    try:
        is_file = candidate.is_file()
    except (OSError, ValueError):
        # Inline text that is not a usable path (too long, NUL bytes)
        is_file = False

    if is_file:
        validate_path_safety(candidate, mod_dir)
        logger.debug("Loading content from %s", candidate)
        return read_text_file(candidate)

    if value.strip():
        return value

    return None


def load_description(mod_dir: Path, metadata: ModMetadata) -> str:
    """Load the package description for a mod.

    Precedence:
        1. ``readme`` as a file path relative to mod_dir
        2. ``readme`` as inline text
        3. ``description/zh.md``
        4. ``description/en.md``
        5. The ``description`` metadata field
        6. Empty string

    Args:
        mod_dir: Path to the mod directory
        metadata: Parsed mod metadata

    Returns:
        Description text, or "" if nothing was found

    Raises:
        FileSystemError: If a file exists outside mod_dir or cannot be read
    """
    mod_dir = Path(mod_dir)

    content = _resolve_pointer(mod_dir, metadata.readme)
    if content is not None:
        return content

    for filename in DESCRIPTION_FALLBACKS:
        sidecar = mod_dir / DESCRIPTION_DIR / filename
        if sidecar.is_file():
            logger.debug("Loading description from %s", sidecar)
            return read_text_file(sidecar)

    return metadata.description or ""


def load_release_notes(mod_dir: Path, metadata: ModMetadata) -> str:
    """Load release notes for a mod.

    Precedence:
        1. ``releaseNotes`` as a file path relative to mod_dir
        2. ``releaseNotes`` as inline text
        3. ``releaseNotes.md`` in mod_dir
        4. Empty string

    Raises:
        FileSystemError: If a file exists outside mod_dir or cannot be read
    """
    mod_dir = Path(mod_dir)

    content = _resolve_pointer(mod_dir, metadata.release_notes)
    if content is not None:
        return content

    default_file = mod_dir / RELEASE_NOTES_FILENAME
    if default_file.is_file():
        return read_text_file(default_file)

    return ""
