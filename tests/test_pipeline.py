"""Tests for the format registry, the pipeline and the error hierarchy."""

import pytest

import ducky_mod_publisher
from ducky_mod_publisher import FormatRegistry, PublishPipeline
from ducky_mod_publisher.core.types import ValidationResult
from ducky_mod_publisher.errors import (
    DuckyError,
    FileSystemError,
    SteamError,
    SteamUploadError,
    ValidationError,
)
from ducky_mod_publisher.pipeline import validation_failure
from ducky_mod_publisher.platforms.nuget import NuGetPublisher
from ducky_mod_publisher.platforms.steam import SteamPublisher


class TestFormatRegistry:
    """Test publisher registration and lookup."""

    def test_platforms_are_discovered(self) -> None:
        """Test that importing the package registers both formats."""
        assert {"nuget", "steam"} <= set(FormatRegistry.list_formats())

    def test_create_publisher(self, tmp_path) -> None:
        """Test that factory keyword arguments are forwarded."""
        publisher = FormatRegistry.create_publisher("nuget", output_dir=tmp_path)
        assert isinstance(publisher, NuGetPublisher)
        assert publisher.output_dir == tmp_path.resolve()

        assert isinstance(FormatRegistry.create_publisher("steam", app_id=480), SteamPublisher)

    def test_create_pipeline(self) -> None:
        """Test pipeline construction."""
        pipeline = FormatRegistry.create_pipeline("steam")
        assert isinstance(pipeline, PublishPipeline)
        assert pipeline.publisher.name == "steam"

    def test_unknown_format(self) -> None:
        """Test that unknown formats list the available ones."""
        with pytest.raises(ValueError, match="Unknown format: 'zip'.*nuget"):
            FormatRegistry.create_publisher("zip")

    def test_version(self) -> None:
        """Test that the package exposes its version."""
        assert ducky_mod_publisher.__version__ == "0.1.0"


class TestPublishPipeline:
    """Test preparation and validation."""

    def test_prepare_resolves_content(self, make_mod) -> None:
        """Test that metadata, description and release notes are loaded."""
        mod_dir = make_mod(files={"description/en.md": "English", "releaseNotes.md": "Notes"})

        prepared = FormatRegistry.create_pipeline("nuget").prepare(mod_dir)

        assert prepared.mod_dir == mod_dir.resolve()
        assert prepared.metadata.name == "MyMod"
        assert prepared.description == "English"
        assert prepared.release_notes == "Notes"

    def test_prepare_without_metadata(self, tmp_path) -> None:
        """Test that a missing info.ini surfaces as a file system error."""
        with pytest.raises(FileSystemError, match="info.ini not found"):
            FormatRegistry.create_pipeline("nuget").prepare(tmp_path)

    def test_validate_collects_warnings(self, make_mod) -> None:
        """Test that a missing description is reported but does not block."""
        mod_dir = make_mod(info="name = MyMod\nversion = 1.0.0\n", files={"MyMod.dll": b""})

        prepared, result = FormatRegistry.create_pipeline("nuget").validate(mod_dir)

        assert prepared is not None
        assert result.valid
        assert len(result.warnings) == 1


class TestValidationFailure:
    """Test folding validation errors into one exception."""

    def test_combines_messages_and_suggestions(self) -> None:
        """Test message layout and suggestion de-duplication."""
        result = ValidationResult(
            errors=[
                ValidationError("First problem", ["Fix it", "Check docs"]),
                ValidationError("Second problem", ["Check docs"]),
            ]
        )

        error = validation_failure(result)

        assert error.message == "Mod validation failed:\n  - First problem\n  - Second problem"
        assert error.suggestions == ["Fix it", "Check docs"]


class TestErrors:
    """Test the error hierarchy."""

    def test_format_with_suggestions(self) -> None:
        """Test terminal formatting."""
        error = DuckyError("Something broke", ["Try this", "Or that"])
        assert error.format() == "✖ Something broke\n\nSuggestions:\n  • Try this\n  • Or that"

    def test_format_without_suggestions(self) -> None:
        """Test formatting of a bare message."""
        assert DuckyError("Plain").format() == "✖ Plain"

    def test_codes_and_hierarchy(self) -> None:
        """Test stable codes and base classes."""
        error = SteamUploadError("upload failed")
        assert isinstance(error, SteamError)
        assert isinstance(error, DuckyError)
        assert error.code == "STEAM_UPLOAD_ERROR"
        assert ValidationError("x").code == "VALIDATION_ERROR"
        assert str(error) == "upload failed"
