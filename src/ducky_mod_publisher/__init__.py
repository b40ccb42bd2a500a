"""Ducky Mod Publisher.

This package packages game mod directories as NuGet packages and
uploads them to the Steam Workshop. Each publishing format lives in
its own platform package and registers itself with the FormatRegistry.
"""

# Core library interface
from .pipeline import PublishPipeline
from .registry import FormatRegistry
from .publishers.base import PreparedMod, Publisher, PublishResult

# Core utilities
from .core import ModMetadata, ValidationResult, markdown_to_bbcode, parse_metadata_file
from .errors import DuckyError

__version__ = "0.1.0"

# Auto-discover and register all platforms
FormatRegistry.discover_platforms()

__all__ = [
    # Primary library interface
    "FormatRegistry",
    "PublishPipeline",
    "Publisher",
    "PreparedMod",
    "PublishResult",
    # Core utilities
    "DuckyError",
    "ModMetadata",
    "ValidationResult",
    "markdown_to_bbcode",
    "parse_metadata_file",
]
