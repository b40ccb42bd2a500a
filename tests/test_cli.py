"""Tests for the ducky command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest

from ducky_mod_publisher.cli import main, make_progress_printer
from ducky_mod_publisher.config import DEFAULT_NUGET_SERVER
from ducky_mod_publisher.platforms.nuget import NuGetCliManager


@pytest.fixture
def nuget_mod(make_mod):
    return make_mod(files={"MyMod.dll": b"MZ", "preview.png": b"\x89PNG"})


class TestGlobalOptions:
    """Test top-level behavior."""

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test --version."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "0.1.0" in capsys.readouterr().out

    def test_command_required(self) -> None:
        """Test that a bare invocation is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


class TestValidateCommands:
    """Test nuget validate and steam validate."""

    def test_nuget_validate_passes(self, nuget_mod: Path, capsys: pytest.CaptureFixture) -> None:
        """Test a valid mod."""
        assert main(["nuget", "validate", str(nuget_mod)]) == 0
        assert "Validation passed" in capsys.readouterr().err

    def test_nuget_validate_reports_errors(self, make_mod, capsys: pytest.CaptureFixture) -> None:
        """Test that every error is printed with suggestions."""
        mod_dir = make_mod(files={"Foo.dll": b"", "Bar.dll": b""})

        assert main(["nuget", "validate", str(mod_dir)]) == 1

        err = capsys.readouterr().err
        assert 'No DLL file matches mod name "MyMod" (found 2 DLLs)' in err
        assert "Current DLLs: Bar.dll, Foo.dll" in err
        assert "Validation failed with 1 error(s)" in err

    def test_nuget_validate_without_metadata(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a missing info.ini is reported as a formatted error."""
        assert main(["nuget", "validate", str(tmp_path)]) == 1
        assert "✖ info.ini not found" in capsys.readouterr().err

    def test_steam_validate(self, make_mod, capsys: pytest.CaptureFixture) -> None:
        """Test the Steam checks."""
        mod_dir = make_mod(files={"MyMod.dll": b""})

        assert main(["steam", "validate", str(mod_dir)]) == 1
        assert "preview.png not found in mod directory" in capsys.readouterr().err

    def test_steam_validate_reports_metadata_and_directory_errors(
        self, make_mod, capsys: pytest.CaptureFixture
    ) -> None:
        """Test that an info.ini error does not hide the missing preview image."""
        mod_dir = make_mod(info="name = MyMod\n", files={"MyMod.dll": b""})

        assert main(["steam", "validate", str(mod_dir)]) == 1

        err = capsys.readouterr().err
        assert "Missing required fields in info.ini: version" in err
        assert "preview.png not found in mod directory" in err
        assert "Validation failed with 2 error(s)" in err

    def test_nuget_validate_missing_directory(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a missing mod directory is reported as such."""
        assert main(["nuget", "validate", str(tmp_path / "missing")]) == 1
        assert "Directory does not exist" in capsys.readouterr().err


class TestNuGetCommands:
    """Test nuget pack and nuget push with a mocked NuGet client."""

    def test_pack(self, nuget_mod: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test packing into an output directory."""
        output_dir = tmp_path / "out"
        nupkg = output_dir.resolve() / "MyMod.1.0.0.nupkg"

        with patch.object(NuGetCliManager, "pack", return_value=nupkg) as pack:
            assert main(["nuget", "pack", str(nuget_mod), "-o", str(output_dir)]) == 0

        pack.assert_called_once()
        assert (output_dir / "MyMod.nuspec").is_file()
        assert f"Package created: {nupkg}" in capsys.readouterr().err

    def test_push_existing_package(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test pushing a .nupkg with a key from the command line."""
        nupkg = tmp_path / "MyMod.1.0.0.nupkg"
        nupkg.write_bytes(b"PK")

        with patch.object(NuGetCliManager, "push") as push:
            assert main(["nuget", "push", str(nupkg), "-k", "secret-key"]) == 0

        push.assert_called_once_with(nupkg.resolve(), DEFAULT_NUGET_SERVER, "secret-key")
        assert "Package pushed successfully!" in capsys.readouterr().err

    def test_push_uses_environment_key(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test NUGET_API_KEY and NUGET_SERVER."""
        monkeypatch.setenv("NUGET_API_KEY", "env-key")
        monkeypatch.setenv("NUGET_SERVER", "https://nuget.example.com/v3/index.json")
        nupkg = tmp_path / "MyMod.1.0.0.nupkg"
        nupkg.write_bytes(b"PK")

        with patch.object(NuGetCliManager, "push") as push:
            assert main(["nuget", "push", str(nupkg)]) == 0

        push.assert_called_once_with(
            nupkg.resolve(), "https://nuget.example.com/v3/index.json", "env-key"
        )

    def test_push_missing_package(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a missing package file exits with an error."""
        assert main(["nuget", "push", str(tmp_path / "missing.nupkg"), "-k", "key"]) == 1
        err = capsys.readouterr().err
        assert "✖ .nupkg file not found" in err
        assert "Use --pack flag to package a mod directory before pushing" in err

    def test_push_without_key(self, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that a missing API key exits with an error."""
        nupkg = tmp_path / "MyMod.1.0.0.nupkg"
        nupkg.write_bytes(b"PK")

        with patch.object(NuGetCliManager, "push") as push:
            assert main(["nuget", "push", str(nupkg)]) == 1

        push.assert_not_called()
        assert "NuGet API key is required" in capsys.readouterr().err

    def test_pack_and_push(self, nuget_mod: Path, tmp_path: Path) -> None:
        """Test --pack."""
        output_dir = tmp_path / "out"

        def pack(nuspec_path, out_dir, base_path=None):
            nupkg = Path(out_dir) / "MyMod.1.0.0.nupkg"
            nupkg.write_bytes(b"PK")
            return nupkg

        with patch.object(NuGetCliManager, "pack", side_effect=pack), patch.object(
            NuGetCliManager, "push"
        ) as push:
            exit_code = main(
                ["nuget", "push", str(nuget_mod), "--pack", "-o", str(output_dir), "-k", "key"]
            )

        assert exit_code == 0
        push.assert_called_once_with(
            output_dir.resolve() / "MyMod.1.0.0.nupkg", DEFAULT_NUGET_SERVER, "key"
        )


class TestSteamCommands:
    """Test steam push."""

    def test_push_without_backend(self, steam_mod: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that an unconfigured backend is reported before uploading."""
        assert main(["steam", "push", str(steam_mod)]) == 1
        assert "No Steam Workshop backend configured" in capsys.readouterr().err

    def test_push_options(self, steam_mod: Path, capsys: pytest.CaptureFixture) -> None:
        """Test that flags reach the worker supervisor."""

        def fake_run(mod_dir, options, **kwargs):
            assert options.update_description is True
            assert options.changelog == "Fixed"
            assert options.skip_tail is True
            assert kwargs["timeout"] is None

        with patch("ducky_mod_publisher.platforms.steam.publisher.load_backend_factory"), patch(
            "ducky_mod_publisher.platforms.steam.publisher.run_upload_in_subprocess",
            side_effect=fake_run,
        ) as run:
            exit_code = main(
                [
                    "steam",
                    "push",
                    str(steam_mod),
                    "--update-description",
                    "--changelog",
                    "Fixed",
                    "--skip-tail",
                    "--timeout",
                    "0",
                ]
            )

        assert exit_code == 0
        run.assert_called_once()

    def test_progress_printer(self, capsys: pytest.CaptureFixture) -> None:
        """Test that the bar is redrawn in place and ends with a newline."""
        on_progress = make_progress_printer()
        on_progress(1, 2)
        on_progress(2, 2)

        err = capsys.readouterr().err
        assert err.startswith("\r[")
        assert "50.0%" in err
        assert err.endswith("100.0%\n")
