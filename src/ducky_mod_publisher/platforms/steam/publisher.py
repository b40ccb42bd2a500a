"""Steam Workshop publisher."""

import logging
from collections.abc import Callable
from pathlib import Path

from ...config import get_steam_app_id
from ...core.metadata import parse_metadata_file
from ...core.types import ValidationResult
from ...core.validator import validate_binary_artifacts
from ...publishers.base import PreparedMod, Publisher, PublishResult
from .upload import PushOptions, push_to_workshop
from .validator import SteamValidator
from .supervisor import DEFAULT_TIMEOUT, run_upload_in_subprocess
from .workshop import BackendFactory, WorkshopSession, load_backend_factory

logger = logging.getLogger(__name__)


class SteamPublisher(Publisher):
    """Uploads mods to the Steam Workshop.

    By default the upload runs in an isolated worker process. Passing a
    ``backend_factory`` runs it in-process instead, which is how tests
    drive the flow with a fake backend.
    """

    name = "steam"

    def __init__(
        self,
        app_id: int | None = None,
        backend_factory: BackendFactory | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        on_progress: Callable[[int, int], None] | None = None,
        verbose: bool = False,
    ):
        self.app_id = app_id
        self.backend_factory = backend_factory
        self.timeout = timeout
        self.on_progress = on_progress
        self.verbose = verbose
        self.validator = SteamValidator(app_id)

    def check_directory(self, mod_dir: Path) -> ValidationResult:
        return self.validator.check_directory(mod_dir)

    def validate(self, prepared: PreparedMod) -> ValidationResult:
        result = ValidationResult()
        validate_binary_artifacts(prepared.mod_dir, prepared.metadata.name, result)
        return result

    def publish(
        self,
        prepared: PreparedMod,
        update_description: bool = False,
        changelog: str | None = None,
        skip_tail: bool = False,
        **kwargs,
    ) -> PublishResult:
        """Upload the mod.

        Args:
            prepared: Validated mod
            update_description: Update title/description of an existing item
                and upload every additional language
            changelog: Change note for this update
            skip_tail: Do not append the submission footer

        Returns:
            PublishResult with the published file ID
        """
        options = PushOptions(
            update_description=update_description,
            changelog=changelog,
            skip_tail=skip_tail,
        )

        if self.backend_factory is not None:
            app_id = self.app_id if self.app_id is not None else get_steam_app_id()
            with WorkshopSession(app_id, self.backend_factory) as session:
                return push_to_workshop(prepared.mod_dir, session, options)

        # Fail fast in the parent if no backend is configured
        load_backend_factory()

        was_published = prepared.metadata.published_file_id is not None
        run_upload_in_subprocess(
            prepared.mod_dir,
            options,
            timeout=self.timeout,
            on_progress=self.on_progress,
            verbose=self.verbose,
            app_id=self.app_id,
        )

        metadata = parse_metadata_file(prepared.mod_dir)
        return PublishResult(
            format=self.name,
            published_file_id=metadata.published_file_id,
            created=not was_published,
        )
