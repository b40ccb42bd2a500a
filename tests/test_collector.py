"""Tests for package file collection."""

import tempfile
from pathlib import Path

import pytest

from ducky_mod_publisher.core.collector import (
    collect_files,
    format_file_size,
    validate_path_safety,
)
from ducky_mod_publisher.errors import FileSystemError, ValidationError


class TestCollectFiles:
    """Test which files end up in a package and in what order."""

    def test_order_and_exclusions(self, make_mod) -> None:
        """Test artifacts first, then the icon, then remaining files."""
        mod_dir = make_mod(
            files={
                "MyMod.dll": b"MZ",
                "preview.png": b"\x89PNG",
                "Assets/data.json": "{}",
                "old.nupkg": b"",
                "MyMod.nuspec": "<package />",
                ".DS_Store": b"",
                ".git/config": "[core]",
            }
        )

        files = collect_files(mod_dir)
        targets = [f.target for f in files]

        assert targets == ["MyMod.dll", "icon.png", "Assets/data.json"]
        assert files[1].source == str((mod_dir / "preview.png").resolve())

    def test_sources_are_absolute(self, make_mod) -> None:
        """Test that sources resolve to absolute paths."""
        mod_dir = make_mod(files={"MyMod.dll": b""})
        for collected in collect_files(mod_dir):
            assert Path(collected.source).is_absolute()

    def test_nested_targets_use_forward_slashes(self, make_mod) -> None:
        """Test relative targets for nested files."""
        mod_dir = make_mod(files={"lib/net/MyMod.dll": b""})
        assert [f.target for f in collect_files(mod_dir)] == ["lib/net/MyMod.dll"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test that a missing directory is a validation error."""
        with pytest.raises(ValidationError, match="Mod directory does not exist"):
            collect_files(tmp_path / "missing")


class TestValidatePathSafety:
    """Test path traversal prevention."""

    def test_allows_paths_within_base(self) -> None:
        """Test that paths within base directory are allowed."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            # Should not raise
            validate_path_safety(base / "subdir" / "file.txt", base)

    def test_rejects_path_traversal(self) -> None:
        """Test that path traversal attempts are rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            dangerous_path = base / ".." / ".." / "etc" / "passwd"

            with pytest.raises(FileSystemError, match="outside the allowed directory"):
                validate_path_safety(dangerous_path, base)


class TestFormatFileSize:
    """Test human-readable sizes."""

    @pytest.mark.parametrize(
        ("size", "expected"),
        [(512, "512.0 B"), (1536, "1.5 KB"), (1048576, "1.0 MB"), (5 * 1024**3, "5.0 GB")],
    )
    def test_units(self, size: int, expected: str) -> None:
        """Test unit selection."""
        assert format_file_size(size) == expected
