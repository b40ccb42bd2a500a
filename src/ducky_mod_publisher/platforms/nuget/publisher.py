"""NuGet publisher: writes the nuspec, packs it, and optionally pushes it."""

import logging
from pathlib import Path

from ...config import NuGetConfig, get_api_key, get_server_url, resolve_nuget_config
from ...core.collector import collect_files, format_file_size
from ...core.types import CollectedFile, ValidationResult
from ...core.validator import validate_directory_exists
from ...errors import FileSystemError
from ...publishers.base import PreparedMod, Publisher, PublishResult
from .client import NuGetCliManager, mask_secret
from .nuspec import README_TARGET, generate_nuspec
from .validator import validate_mod

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("pkg")


class NuGetPublisher(Publisher):
    """Packages mods as ``.nupkg`` files through the NuGet CLI."""

    name = "nuget"

    def __init__(
        self,
        output_dir: Path | None = None,
        config: NuGetConfig | None = None,
        client: NuGetCliManager | None = None,
    ):
        self.output_dir = Path(output_dir or DEFAULT_OUTPUT_DIR).resolve()
        self.config = config or resolve_nuget_config()
        self.client = client or NuGetCliManager()

    def check_directory(self, mod_dir: Path) -> ValidationResult:
        result = ValidationResult()
        validate_directory_exists(Path(mod_dir), result)
        return result

    def validate(self, prepared: PreparedMod) -> ValidationResult:
        return validate_mod(prepared.mod_dir, prepared.metadata, prepared.description)

    def package_files(self, mod_dir: Path) -> list[CollectedFile]:
        """Collect the mod's files for the manifest.

        When the output directory is nested inside the mod, files under it
        are earlier build output and are left out. An output directory
        equal to or above the mod filters nothing.
        """
        mod_dir = Path(mod_dir).resolve()
        files = collect_files(mod_dir)

        if self.output_dir != mod_dir and self.output_dir.is_relative_to(mod_dir):
            files = [f for f in files if not Path(f.source).is_relative_to(self.output_dir)]

        return files

    def write_nuspec(self, prepared: PreparedMod) -> Path:
        """Write README.md and the .nuspec into the output directory.

        Returns:
            Path to the written .nuspec file

        Raises:
            FileSystemError: If the output directory cannot be written
        """
        metadata = prepared.metadata

        files = self.package_files(prepared.mod_dir)
        if prepared.description:
            # The generated README.md takes this target
            files = [f for f in files if f.target != README_TARGET]

        total_size = sum(Path(f.source).stat().st_size for f in files)
        logger.info("Found %d files (%s)", len(files), format_file_size(total_size))

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)

            readme_path = None
            if prepared.description:
                readme_file = self.output_dir / README_TARGET
                readme_file.write_text(prepared.description, encoding="utf-8")
                readme_path = str(readme_file)
                logger.info("Generated %s in %s", README_TARGET, self.output_dir)

            nuspec_path = self.output_dir / f"{metadata.name}.nuspec"
            nuspec_path.write_text(
                generate_nuspec(
                    metadata,
                    description=prepared.description,
                    release_notes=prepared.release_notes,
                    readme_path=readme_path,
                    files=files,
                ),
                encoding="utf-8",
            )
        except OSError as e:
            raise FileSystemError(
                f"Failed to write package files to {self.output_dir}: {e}",
                ["Check that you have permission to write to the output directory"],
            ) from e

        logger.info("Generated: %s", nuspec_path.name)
        return nuspec_path

    def publish(self, prepared: PreparedMod, push: bool = False, **kwargs) -> PublishResult:
        """Pack the mod and optionally push the package.

        Args:
            prepared: Validated mod
            push: Push the package after packing

        Returns:
            PublishResult with the .nupkg path as artifact
        """
        nuspec_path = self.write_nuspec(prepared)
        nupkg_path = self.client.pack(nuspec_path, self.output_dir, base_path=prepared.mod_dir)

        if push:
            self.push(nupkg_path)

        return PublishResult(format=self.name, artifact=nupkg_path)

    def push(self, nupkg_path: Path) -> None:
        """Push an existing package to the configured server.

        Raises:
            FileSystemError: If the package does not exist
            ConfigError: If the API key is missing or the server URL is invalid
            NuGetError: If the push fails
        """
        nupkg_path = Path(nupkg_path)
        if not nupkg_path.is_file():
            raise FileSystemError(
                f".nupkg file not found: {nupkg_path}",
                [
                    "Check that the path is correct",
                    "Use --pack flag to package a mod directory before pushing",
                ],
            )

        server = get_server_url(self.config)
        api_key = get_api_key(self.config)

        logger.info("Server: %s", server)
        logger.info("API Key: %s", mask_secret(api_key))

        self.client.push(nupkg_path, server, api_key)
