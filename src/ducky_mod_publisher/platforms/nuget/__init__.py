"""NuGet platform for the publishing pipeline.

This platform packages mod directories as ``.nupkg`` files through the
NuGet CLI and pushes them to a NuGet server.
"""

from .client import NuGetCliManager
from .nuspec import generate_nuspec
from .publisher import NuGetPublisher
from .validator import validate_mod

# Auto-register with the registry
from ...registry import FormatRegistry


def _create_nuget_publisher(**kwargs) -> NuGetPublisher:
    """Factory function for creating NuGet publishers.

    Args:
        **kwargs: output_dir, config and client, all optional

    Returns:
        NuGetPublisher instance
    """
    return NuGetPublisher(**kwargs)


# Auto-register at module import
FormatRegistry.register_factory("nuget", _create_nuget_publisher)

__all__ = [
    "NuGetCliManager",
    "NuGetPublisher",
    "generate_nuspec",
    "validate_mod",
]
