"""Error hierarchy for mod packaging and publishing.

Every error carries a stable ``code`` and an ordered list of remediation
``suggestions`` that the CLI prints below the message.
"""

from collections.abc import Sequence


class DuckyError(Exception):
    """Base class for all errors raised by this package.

    Attributes:
        message: Human-readable description of the failure
        code: Stable short identifier (e.g. ``VALIDATION_ERROR``)
        suggestions: Ordered remediation hints, possibly empty
    """

    code = "DUCKY_ERROR"

    def __init__(self, message: str, suggestions: Sequence[str] | None = None):
        super().__init__(message)
        self.message = message
        self.suggestions: list[str] = list(suggestions or [])

    def format(self) -> str:
        """Format the error with its suggestions for terminal display."""
        output = f"✖ {self.message}"
        if self.suggestions:
            output += "\n\nSuggestions:"
            for suggestion in self.suggestions:
                output += f"\n  • {suggestion}"
        return output


class ValidationError(DuckyError):
    """Raised when mod metadata or contents violate a rule."""

    code = "VALIDATION_ERROR"


class ConfigError(DuckyError):
    """Raised when configuration is missing or invalid."""

    code = "CONFIG_ERROR"


class NetworkError(DuckyError):
    """Raised when a download or remote call fails."""

    code = "NETWORK_ERROR"


class FileSystemError(DuckyError):
    """Raised when a required path is missing or unreadable."""

    code = "FILESYSTEM_ERROR"


class NuGetError(DuckyError):
    """Raised when the NuGet CLI fails."""

    code = "NUGET_ERROR"


class SteamError(DuckyError):
    """Base class for Steam Workshop failures."""

    code = "STEAM_ERROR"


class SteamAuthError(SteamError):
    code = "STEAM_AUTH_ERROR"


class SteamUploadError(SteamError):
    code = "STEAM_UPLOAD_ERROR"


class SteamConfigError(SteamError):
    code = "STEAM_CONFIG_ERROR"
