"""NuGet CLI management.

This module locates (or downloads) the NuGet command-line tool and runs
``pack`` and ``push`` through it as bounded subprocesses.
"""

import logging
import os
import re
import shutil
import subprocess
import sys
from pathlib import Path

import requests

from ...errors import NetworkError, NuGetError

logger = logging.getLogger(__name__)

NUGET_VERSION = "6.11.0"
NUGET_DOWNLOAD_URL = "https://dist.nuget.org/win-x86-commandline/latest/nuget.exe"
NUGET_INSTALL_DOCS = "https://learn.microsoft.com/en-us/nuget/install-nuget-client-tools"

DEFAULT_CACHE_DIR = Path.home() / ".ducky" / "nuget"

# Seconds allowed for a single NuGet invocation
DEFAULT_TIMEOUT = 600
DOWNLOAD_TIMEOUT = 60
DOWNLOAD_CHUNK_SIZE = 64 * 1024

NUPKG_PATTERN = re.compile(r"[^/\\'\"\s]+\.nupkg")
PUSH_SUCCESS_MARKER = "Your package was pushed"


def mask_secret(secret: str) -> str:
    """Mask all but the last four characters of a secret for display."""
    return "***" + secret[-4:] if secret else "(none)"


def mask_api_key(command: list[str]) -> list[str]:
    masked = list(command)
    for i, arg in enumerate(masked[:-1]):
        if arg == "-ApiKey":
            masked[i + 1] = mask_secret(masked[i + 1])
    return masked


class NuGetCliManager:
    """Handles detection, download and execution of the NuGet CLI.

    Lookup order for the executable: ``PATH``, then the cache directory,
    then a fresh download into the cache directory. On non-Windows hosts
    ``nuget.exe`` is run through ``mono`` when it is installed.

    Example:
        >>> client = NuGetCliManager()
        >>> nupkg = client.pack(Path("pkg/MyMod.nuspec"), Path("pkg"), base_path=Path("MyMod"))
        >>> client.push(nupkg, "https://api.nuget.org/v3/index.json", api_key)
    """

    def __init__(
        self,
        cache_dir: Path | None = None,
        version: str = NUGET_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.cache_dir = Path(cache_dir) if cache_dir else DEFAULT_CACHE_DIR
        self.version = version
        self.timeout = timeout
        self.is_windows = sys.platform == "win32"

    @property
    def cached_exe_path(self) -> Path:
        return self.cache_dir / "nuget.exe"

    def find_in_path(self) -> str | None:
        return shutil.which("nuget") or shutil.which("nuget.exe")

    def get_exe_path(self) -> Path:
        """Return the NuGet executable, downloading it if necessary.

        Raises:
            NetworkError: If the download fails
        """
        path_exe = self.find_in_path()
        if path_exe:
            logger.debug("Using NuGet from PATH: %s", path_exe)
            return Path(path_exe)

        if self.cached_exe_path.is_file():
            logger.debug("Using cached NuGet: %s", self.cached_exe_path)
            return self.cached_exe_path

        logger.info("NuGet not found in PATH or cache. Downloading v%s...", self.version)
        return self.download()

    def download(self) -> Path:
        """Download nuget.exe into the cache directory.

        The file is written to a temporary name first so an interrupted
        download never leaves a truncated executable in the cache.

        Raises:
            NetworkError: If the download fails
        """
        exe_path = self.cached_exe_path
        partial_path = exe_path.with_suffix(".part")
        exe_path.parent.mkdir(parents=True, exist_ok=True)

        logger.info("Downloading NuGet from %s...", NUGET_DOWNLOAD_URL)
        try:
            with requests.get(NUGET_DOWNLOAD_URL, stream=True, timeout=DOWNLOAD_TIMEOUT) as response:
                response.raise_for_status()
                with partial_path.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        f.write(chunk)
        except (requests.RequestException, OSError) as e:
            partial_path.unlink(missing_ok=True)
            raise NetworkError(
                f"Failed to download NuGet: {e}",
                [
                    "Check your internet connection",
                    f"Install NuGet manually: {NUGET_INSTALL_DOCS}",
                ],
            ) from e

        os.replace(partial_path, exe_path)
        if not self.is_windows:
            exe_path.chmod(0o755)

        logger.info("NuGet downloaded to %s", exe_path)
        return exe_path

    def build_command(self, exe_path: Path, args: list[str]) -> list[str]:
        """Build the argument vector, prefixing ``mono`` where needed."""
        if not self.is_windows and exe_path.suffix.lower() == ".exe":
            mono = shutil.which("mono")
            if mono:
                return [mono, str(exe_path), *args]
            logger.warning("mono not found; running %s directly", exe_path)
        return [str(exe_path), *args]

    def execute(self, args: list[str], cwd: Path | None = None) -> str:
        """Run a NuGet command and return its stdout.

        Raises:
            NuGetError: If the command cannot be started, times out or fails
        """
        command = self.build_command(self.get_exe_path(), args)
        logger.debug("Executing: %s", " ".join(mask_api_key(command)))

        try:
            result = subprocess.run(
                command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise NuGetError(
                f"NuGet command timed out after {self.timeout} seconds",
                ["Check your network connection", "Run with --verbose for more details"],
            ) from e
        except OSError as e:
            raise NuGetError(
                f"Failed to execute NuGet: {e}",
                [f"Install NuGet manually: {NUGET_INSTALL_DOCS}"],
            ) from e

        if result.stdout:
            logger.debug(result.stdout.rstrip())

        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            raise NuGetError(f"NuGet command failed (exit code {result.returncode}): {output}")

        return result.stdout

    def pack(self, nuspec_path: Path, output_dir: Path, base_path: Path | None = None) -> Path:
        """Pack a ``.nuspec`` file into a ``.nupkg`` package.

        Args:
            nuspec_path: Path to the .nuspec file
            output_dir: Directory for the .nupkg file
            base_path: Directory that relative file sources resolve against

        Returns:
            Path to the created .nupkg file

        Raises:
            NuGetError: If packing fails or the package path cannot be determined
        """
        logger.info("Creating NuGet package from %s...", nuspec_path)

        output_dir = Path(output_dir).resolve()
        args = [
            "pack",
            str(nuspec_path),
            "-OutputDirectory",
            str(output_dir),
            "-NoDefaultExcludes",
        ]
        if base_path is not None:
            args.extend(["-BasePath", str(Path(base_path).resolve())])

        suggestions = [
            "Check that the .nuspec file is valid",
            "Ensure all referenced files exist",
            "Run with --verbose for more details",
        ]

        try:
            stdout = self.execute(args)
        except NuGetError as e:
            raise NuGetError(f"Failed to create NuGet package: {e.message}", suggestions) from e

        match = NUPKG_PATTERN.search(stdout)
        if not match:
            raise NuGetError(
                "Failed to create NuGet package: could not determine .nupkg path from NuGet output",
                suggestions,
            )

        nupkg_path = output_dir / match.group(0)
        logger.info("Created package: %s", nupkg_path)
        return nupkg_path

    def push(self, nupkg_path: Path, server: str, api_key: str) -> None:
        """Push a ``.nupkg`` package to a NuGet server.

        Raises:
            NuGetError: If the push fails
        """
        logger.info("Pushing %s to %s...", nupkg_path, server)

        args = ["push", str(nupkg_path), "-Source", server, "-ApiKey", api_key]

        try:
            stdout = self.execute(args)
        except NuGetError as e:
            raise NuGetError(
                f"Failed to push package: {e.message}",
                [
                    "Check your API key is correct",
                    "Ensure the server URL is correct",
                    "Verify the package version does not already exist on the server",
                    "Run with --verbose for more details",
                ],
            ) from e

        if PUSH_SUCCESS_MARKER in stdout:
            logger.info("Package pushed successfully")
        else:
            logger.info("Package push completed")
