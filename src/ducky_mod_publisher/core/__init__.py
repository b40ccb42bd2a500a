"""Core engines for mod packaging.

This package contains metadata parsing, content resolution, Markdown to
BBCode conversion, language mapping, file collection and validation
utilities that are used across all publishing formats.
"""

from .bbcode import extract_title, markdown_to_bbcode
from .collector import collect_files, format_file_size
from .content import load_description, load_release_notes
from .languages import (
    load_descriptions,
    load_titles,
    map_filename_to_language,
    select_primary_content,
)
from .metadata import (
    parse_metadata_content,
    parse_metadata_file,
    save_published_file_id,
)
from .schema import validate_update_details, validate_update_details_with_error_details
from .tokenizer import parse_list
from .types import (
    CollectedFile,
    LocalizedDescription,
    LocalizedTitle,
    ModMetadata,
    UpdateDetails,
    ValidationResult,
)

__all__ = [
    "CollectedFile",
    "LocalizedDescription",
    "LocalizedTitle",
    "ModMetadata",
    "UpdateDetails",
    "ValidationResult",
    "collect_files",
    "extract_title",
    "format_file_size",
    "load_description",
    "load_descriptions",
    "load_release_notes",
    "load_titles",
    "map_filename_to_language",
    "markdown_to_bbcode",
    "parse_list",
    "parse_metadata_content",
    "parse_metadata_file",
    "save_published_file_id",
    "select_primary_content",
    "validate_update_details",
    "validate_update_details_with_error_details",
]
