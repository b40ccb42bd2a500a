"""Collection of the files that go into a package.

This module walks a mod directory and produces the source/target pairs
listed in the generated manifest, with path validation to keep every
source inside the mod directory.
"""

import logging
import os
import re
from pathlib import Path

from ..errors import FileSystemError, ValidationError
from .types import CollectedFile
from .validator import find_binary_artifacts

logger = logging.getLogger(__name__)

PREVIEW_FILENAME = "preview.png"
ICON_FILENAME = "icon.png"

# File names never copied into a package
EXCLUDED_PATTERNS = [
    re.compile(r"^info\.ini$", re.IGNORECASE),
    re.compile(r"\.nupkg$", re.IGNORECASE),
    re.compile(r"\.nuspec$", re.IGNORECASE),
    re.compile(r"^preview\.png$", re.IGNORECASE),
    re.compile(r"^icon\.png$", re.IGNORECASE),
]

SIZE_UNITS = ("B", "KB", "MB", "GB")


def validate_path_safety(path: Path, base_dir: Path) -> None:
    """Validate that a path stays within the base directory.

    Args:
        path: Path to validate
        base_dir: Base directory that path must be within

    Raises:
        FileSystemError: If path escapes the base directory
    """
    resolved_path = path.resolve()
    resolved_base = base_dir.resolve()

    if not resolved_path.is_relative_to(resolved_base):
        raise FileSystemError(
            f"Invalid path: {path} is outside the allowed directory",
            ["Ensure all paths are within the mod directory"],
        )


def is_excluded(filename: str) -> bool:
    return any(pattern.search(filename) for pattern in EXCLUDED_PATTERNS)


def collect_files(mod_dir: Path) -> list[CollectedFile]:
    """Collect the files to package from a mod directory.

    Binary artifacts come first, then ``preview.png`` packaged as
    ``icon.png``, then every remaining file except metadata, previous
    build outputs and hidden files. Targets use forward slashes.

    Args:
        mod_dir: Path to the mod directory

    Returns:
        Collected files in package order

    Raises:
        ValidationError: If mod_dir is not a directory
        FileSystemError: If a file resolves outside mod_dir
    """
    mod_dir = Path(mod_dir)
    if not mod_dir.is_dir():
        raise ValidationError(
            f"Mod directory does not exist: {mod_dir}",
            ["Check that the path is correct", "Ensure the directory exists"],
        )

    root = mod_dir.resolve()
    files: list[CollectedFile] = []
    seen: set[str] = set()

    def add(source: Path, target: str) -> None:
        if target in seen:
            return
        validate_path_safety(source, root)
        seen.add(target)
        files.append(CollectedFile(source=str(source.resolve()), target=target))

    for artifact in find_binary_artifacts(root):
        add(artifact, artifact.relative_to(root).as_posix())

    preview = root / PREVIEW_FILENAME
    if preview.is_file():
        add(preview, ICON_FILENAME)

    for dirpath, dirnames, filenames in os.walk(root):
        # Skip hidden directories such as .git
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))

        for filename in sorted(filenames):
            if filename.startswith(".") or is_excluded(filename):
                continue

            file_path = Path(dirpath) / filename
            add(file_path, file_path.relative_to(root).as_posix())

    logger.debug("Collected %d files from %s", len(files), mod_dir)
    return files


def format_file_size(size_bytes: float) -> str:
    """Format a byte count for display.

    Example:
        >>> format_file_size(1536)
        '1.5 KB'
    """
    size = float(size_bytes)
    unit_index = 0

    while size >= 1024 and unit_index < len(SIZE_UNITS) - 1:
        size /= 1024
        unit_index += 1

    return f"{size:.1f} {SIZE_UNITS[unit_index]}"
