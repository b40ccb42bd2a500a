"""Template for implementing a Steam Workshop backend.

This example demonstrates the complete pattern for plugging a Steamworks
client into ``ducky steam push``:
- Backend class implementing the WorkshopBackend protocol
- Factory function receiving the Steam App ID
- Selecting the factory with DUCKY_STEAM_BACKEND

Usage:
    export DUCKY_STEAM_BACKEND=custom_backend:create_backend
    ducky steam push ./MyMod --changelog "First release"

The module must be importable from the upload worker, so put it on
PYTHONPATH or install it alongside ducky-mod-publisher.
"""

import logging
import time

from ducky_mod_publisher.core.types import UpdateDetails

logger = logging.getLogger(__name__)


# Step 1: Implement the backend
class LoggingWorkshopBackend:
    """Backend that logs every call instead of talking to Steam.

    Replace the method bodies with calls into your Steamworks binding.
    """

    def __init__(self, app_id: int):
        # In a real implementation: initialize the Steam API here and
        # raise if the Steam client is not running
        self.app_id = app_id
        self._next_id = int(time.time())

    def create_item(self, app_id: int) -> int:
        """Create an empty Workshop item and return its published file ID."""
        self._next_id += 1
        logger.info("create_item(app_id=%d) -> %d", app_id, self._next_id)
        return self._next_id

    def update_item(self, app_id: int, item_id: int, details: UpdateDetails, on_progress) -> None:
        """Submit an update and report upload progress in bytes."""
        logger.info("update_item(%d, %d): %s", app_id, item_id, sorted(details))

        # Placeholder upload: report ten chunks of a fake 1 MB payload
        total = 1024 * 1024
        for step in range(1, 11):
            if on_progress:
                on_progress(total * step // 10, total)
            time.sleep(0.05)

    def shutdown(self) -> None:
        logger.info("shutdown()")


# Step 2: Expose a factory
def create_backend(app_id: int) -> LoggingWorkshopBackend:
    """Factory referenced by DUCKY_STEAM_BACKEND."""
    return LoggingWorkshopBackend(app_id)


# Step 3: Use it directly (optional)
if __name__ == "__main__":
    from pathlib import Path

    from ducky_mod_publisher.platforms.steam import SteamPublisher
    from ducky_mod_publisher.pipeline import PublishPipeline

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    publisher = SteamPublisher(app_id=480, backend_factory=create_backend)
    result = PublishPipeline(publisher).run(Path("MyMod"), changelog="Test upload")
    print(f"Workshop item: {result.published_file_id}")
