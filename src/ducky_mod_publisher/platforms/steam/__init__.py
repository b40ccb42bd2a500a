"""Steam Workshop platform for the publishing pipeline.

This platform uploads mod directories to the Steam Workshop with
localized titles and descriptions built from ``description/*.md``.
The Steamworks client is supplied through ``DUCKY_STEAM_BACKEND``.
"""

from .progress import ProgressTracker, WorkshopUploadStatus
from .publisher import SteamPublisher
from .upload import PushOptions, append_tail, push_to_workshop
from .validator import SteamValidator
from .supervisor import run_upload_in_subprocess
from .workshop import WorkshopBackend, WorkshopSession, load_backend_factory

# Auto-register with the registry
from ...registry import FormatRegistry


def _create_steam_publisher(**kwargs) -> SteamPublisher:
    """Factory function for creating Steam publishers.

    Args:
        **kwargs: app_id, backend_factory, timeout, on_progress and verbose, all optional

    Returns:
        SteamPublisher instance
    """
    return SteamPublisher(**kwargs)


# Auto-register at module import
FormatRegistry.register_factory("steam", _create_steam_publisher)

__all__ = [
    "ProgressTracker",
    "PushOptions",
    "SteamPublisher",
    "SteamValidator",
    "WorkshopBackend",
    "WorkshopSession",
    "WorkshopUploadStatus",
    "append_tail",
    "load_backend_factory",
    "push_to_workshop",
    "run_upload_in_subprocess",
]
