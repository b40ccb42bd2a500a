"""Steam Workshop session handle.

The Steamworks client itself is an external collaborator. It is loaded
from the ``DUCKY_STEAM_BACKEND`` environment variable as a
``module:factory`` reference; the factory receives the App ID and must
return an object implementing :class:`WorkshopBackend`.

A :class:`WorkshopSession` owns one backend for its whole lifetime and
is passed explicitly to the upload flow.
"""

import importlib
import logging
from collections.abc import Callable
from typing import Protocol

from ...config import STEAM_BACKEND_ENV, get_steam_backend_spec
from ...core.schema import validate_update_details_with_error_details
from ...core.types import UpdateDetails
from ...errors import (
    DuckyError,
    SteamAuthError,
    SteamConfigError,
    SteamUploadError,
    ValidationError,
)

logger = logging.getLogger(__name__)

BytesProgressCallback = Callable[[int, int], None]


class WorkshopBackend(Protocol):
    """Call contract of a Steamworks Workshop client.

    Any method may raise ``PermissionError`` when the Steam user is not
    logged in or may not publish for the App ID.
    """

    def create_item(self, app_id: int) -> int:
        """Create an empty Workshop item and return its published file ID."""
        ...

    def update_item(
        self,
        app_id: int,
        item_id: int,
        details: UpdateDetails,
        on_progress: BytesProgressCallback | None,
    ) -> None:
        """Submit an update, reporting ``(bytes_processed, bytes_total)`` while uploading."""
        ...

    def shutdown(self) -> None:
        ...


BackendFactory = Callable[[int], WorkshopBackend]


def _auth_error(action: str, error: PermissionError) -> SteamAuthError:
    return SteamAuthError(
        f"Steam refused to {action}: {error}",
        [
            "Ensure you are logged into Steam",
            "Accept the Steam Workshop legal agreement for this account",
            "Check that your account may publish items for this App ID",
        ],
    )


def load_backend_factory(spec: str | None = None) -> BackendFactory:
    """Resolve a ``module:factory`` reference to a backend factory.

    Args:
        spec: Reference to resolve; defaults to ``DUCKY_STEAM_BACKEND``

    Returns:
        The factory callable

    Raises:
        SteamConfigError: If no backend is configured or it cannot be imported

    Example:
        >>> factory = load_backend_factory("my_steam_bridge:create_backend")
    """
    spec = spec or get_steam_backend_spec()
    if not spec:
        raise SteamConfigError(
            "No Steam Workshop backend configured",
            [
                f"Set {STEAM_BACKEND_ENV} to a backend factory as module:callable",
                "The factory receives the Steam App ID and returns a Workshop client",
            ],
        )

    module_name, _, attr = spec.partition(":")
    if not module_name or not attr:
        raise SteamConfigError(
            f"Invalid Steam backend reference: {spec}",
            ["Use the form module:callable, e.g. my_steam_bridge:create_backend"],
        )

    try:
        module = importlib.import_module(module_name)
        factory = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise SteamConfigError(
            f"Failed to load Steam backend {spec}: {e}",
            [
                "Ensure the backend package is installed in this environment",
                f"Check the value of {STEAM_BACKEND_ENV}",
            ],
        ) from e

    if not callable(factory):
        raise SteamConfigError(f"Steam backend factory is not callable: {spec}")

    return factory


class WorkshopSession:
    """Explicit init/shutdown lifecycle around one Workshop backend.

    Example:
        >>> with WorkshopSession(3167020, load_backend_factory()) as session:
        ...     item_id = session.create_item()
        ...     session.update_item(item_id, {"content_path": "/mods/MyMod"})
    """

    def __init__(self, app_id: int, backend_factory: BackendFactory):
        self.app_id = app_id
        self._backend_factory = backend_factory
        self._backend: WorkshopBackend | None = None

    @property
    def active(self) -> bool:
        return self._backend is not None

    def init(self) -> None:
        """Initialize the backend.

        Raises:
            SteamConfigError: If the backend cannot be initialized
            SteamAuthError: If Steam rejects the current user
        """
        if self._backend is not None:
            return

        try:
            self._backend = self._backend_factory(self.app_id)
        except DuckyError:
            raise
        except PermissionError as e:
            raise _auth_error("initialize Steamworks", e) from e
        except Exception as e:
            raise SteamConfigError(
                f"Failed to initialize Steamworks: {e}",
                [
                    "Ensure Steam is running",
                    "Ensure you are logged into Steam",
                    "Check that the Steam App ID is correct",
                ],
            ) from e

        if self._backend is None:
            raise SteamConfigError("Failed to initialize Steamworks: backend factory returned None")

        logger.debug("Steamworks initialized for App ID %s", self.app_id)

    def shutdown(self) -> None:
        """Release the backend. Safe to call more than once."""
        backend, self._backend = self._backend, None
        if backend is not None:
            backend.shutdown()
            logger.debug("Steamworks shut down")

    def __enter__(self) -> "WorkshopSession":
        self.init()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    def _require_backend(self) -> WorkshopBackend:
        if self._backend is None:
            raise SteamUploadError("Steamworks not initialized")
        return self._backend

    def create_item(self) -> int:
        """Create a new Workshop item.

        Returns:
            The published file ID

        Raises:
            SteamUploadError: If creation fails
            SteamAuthError: If Steam rejects the current user
        """
        backend = self._require_backend()

        try:
            item_id = backend.create_item(self.app_id)
        except DuckyError:
            raise
        except PermissionError as e:
            raise _auth_error("create a Workshop item", e) from e
        except Exception as e:
            raise SteamUploadError(f"Failed to create Workshop item: {e}") from e

        if not item_id or int(item_id) <= 0:
            raise SteamUploadError(
                "Failed to create Workshop item",
                [
                    "Ensure you have permission to create Workshop items",
                    "Check that your Steam account is in good standing",
                    "Try again later",
                ],
            )

        return int(item_id)

    def update_item(
        self,
        item_id: int,
        details: UpdateDetails,
        on_progress: BytesProgressCallback | None = None,
    ) -> None:
        """Submit an update for an existing Workshop item.

        Raises:
            ValidationError: If details do not match the update schema
            SteamUploadError: If the backend reports a failure
            SteamAuthError: If Steam rejects the current user
        """
        backend = self._require_backend()

        is_valid, error_msg = validate_update_details_with_error_details(details)
        if not is_valid:
            raise ValidationError(f"Invalid Workshop update details: {error_msg}")

        try:
            backend.update_item(self.app_id, item_id, details, on_progress)
        except DuckyError:
            raise
        except PermissionError as e:
            raise _auth_error(f"update Workshop item {item_id}", e) from e
        except Exception as e:
            raise SteamUploadError(
                f"Workshop upload failed: {e}",
                [
                    "Check your internet connection",
                    "Ensure Steam is running and logged in",
                    "Try again later",
                ],
            ) from e
