"""Format registry for factory-based pipeline creation.

This module provides a central registry for publisher factories,
enabling format-agnostic pipeline creation and automatic platform
discovery.
"""

import importlib
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .pipeline import PublishPipeline
    from .publishers.base import Publisher

logger = logging.getLogger(__name__)


class FormatRegistry:
    """Central registry for publisher factories.

    Platforms register themselves when imported, and the registry can
    automatically discover all available platforms.
    """

    _factories: dict[str, Callable[..., "Publisher"]] = {}

    @classmethod
    def register_factory(cls, name: str, factory: Callable[..., "Publisher"]) -> None:
        """Register a factory function for creating publishers.

        Args:
            name: Name of the format (e.g., 'nuget', 'steam')
            factory: Callable that creates a Publisher instance

        Example:
            >>> def create_nuget_publisher(**kwargs) -> NuGetPublisher:
            ...     return NuGetPublisher(**kwargs)
            >>> FormatRegistry.register_factory('nuget', create_nuget_publisher)
        """
        cls._factories[name] = factory

    @classmethod
    def create_publisher(cls, format_name: str, **kwargs) -> "Publisher":
        """Create a publisher from a registered factory.

        Raises:
            ValueError: If format_name is not registered
        """
        if format_name not in cls._factories:
            available = ", ".join(cls._factories.keys()) or "none"
            raise ValueError(f"Unknown format: '{format_name}'. Available formats: {available}")

        return cls._factories[format_name](**kwargs)

    @classmethod
    def create_pipeline(cls, format_name: str, **kwargs) -> "PublishPipeline":
        """Create a pipeline for a registered format.

        Args:
            format_name: Name of the registered format
            **kwargs: Arguments passed to the publisher factory

        Returns:
            PublishPipeline configured with the requested publisher

        Raises:
            ValueError: If format_name is not registered

        Example:
            >>> pipeline = FormatRegistry.create_pipeline('nuget', output_dir=Path('pkg'))
        """
        # Import here to avoid circular dependency
        from .pipeline import PublishPipeline

        return PublishPipeline(cls.create_publisher(format_name, **kwargs))

    @classmethod
    def list_formats(cls) -> list[str]:
        """List all registered format names.

        Example:
            >>> FormatRegistry.list_formats()
            ['nuget', 'steam']
        """
        return list(cls._factories.keys())

    @classmethod
    def discover_platforms(cls) -> None:
        """Auto-discover and import all platforms.

        This method iterates through the platforms/ directory and
        imports each platform package, which registers its publisher.
        Platforms with missing dependencies are skipped.
        """
        platforms_dir = Path(__file__).parent / "platforms"

        if not platforms_dir.exists():
            return

        for platform_path in sorted(platforms_dir.iterdir()):
            if not platform_path.is_dir():
                continue

            if not (platform_path / "__init__.py").exists():
                continue

            platform_name = platform_path.name

            try:
                importlib.import_module(f".platforms.{platform_name}", package=__package__)
            except ImportError as e:
                logger.debug("Skipping platform %s: %s", platform_name, e)
