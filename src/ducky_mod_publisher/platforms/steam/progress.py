"""Progress tracking for Workshop uploads."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import IntEnum

logger = logging.getLogger(__name__)

# Log level for completed steps, between INFO and WARNING
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


class WorkshopUploadStatus(IntEnum):
    PENDING = 0
    PREPARING = 1
    REQUESTING_ID = 2
    WRITING_INI = 3
    STARTING_STEAM_UPLOAD = 4
    UPLOADING_CONTENT = 5
    UPLOADING_TITLES = 6
    UPLOADING_TRANSLATIONS = 7
    COMPLETED = 8
    FAILED = 9

    @property
    def label(self) -> str:
        """Human-readable name, e.g. ``UploadingContent``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


@dataclass
class WorkshopUploadProgress:
    status: WorkshopUploadStatus = WorkshopUploadStatus.PENDING
    bytes_processed: int = 0
    bytes_total: int = 0
    message: str = "Initializing..."
    error: BaseException | None = None

    @property
    def percentage(self) -> float:
        if self.bytes_total <= 0:
            return 0.0
        return self.bytes_processed / self.bytes_total * 100


ProgressCallback = Callable[[WorkshopUploadProgress], None]


class ProgressTracker:
    """Tracks the current upload phase and notifies registered callbacks.

    Example:
        >>> tracker = ProgressTracker()
        >>> tracker.on_progress(lambda p: print(format_progress(p)))
        >>> tracker.report_upload_progress(512, 1024)
        UploadingContent (50.0%) - Uploading content... 50.0%
    """

    def __init__(self) -> None:
        self._progress = WorkshopUploadProgress()
        self._callbacks: list[ProgressCallback] = []

    def on_progress(self, callback: ProgressCallback) -> None:
        self._callbacks.append(callback)

    @property
    def current(self) -> WorkshopUploadProgress:
        return replace(self._progress)

    def report(
        self,
        status: WorkshopUploadStatus,
        message: str,
        error: BaseException | None = None,
    ) -> None:
        """Set the current phase and notify every callback.

        A failing callback is logged and does not stop the others.
        """
        self._progress.status = status
        self._progress.message = message
        self._progress.error = error

        for callback in self._callbacks:
            try:
                callback(self.current)
            except Exception as e:
                logger.warning("Progress callback error: %s", e)

    def report_upload_progress(self, bytes_processed: int, bytes_total: int) -> None:
        self._progress.bytes_processed = bytes_processed
        self._progress.bytes_total = bytes_total
        self.report(
            WorkshopUploadStatus.UPLOADING_CONTENT,
            f"Uploading content... {self._progress.percentage:.1f}%",
        )

    def report_translation_progress(self, current: int, total: int) -> None:
        self.report(
            WorkshopUploadStatus.UPLOADING_TRANSLATIONS,
            f"Uploading translations {current}/{total}...",
        )

    def report_success(self, message: str) -> None:
        self.report(WorkshopUploadStatus.COMPLETED, message)

    def report_failure(self, message: str, error: BaseException | None = None) -> None:
        self.report(WorkshopUploadStatus.FAILED, message, error=error)

    def reset(self) -> None:
        self._progress = WorkshopUploadProgress()


def format_progress(progress: WorkshopUploadProgress) -> str:
    """Format progress as ``Status (xx.x%) - message``."""
    parts = [progress.status.label]

    if progress.bytes_total > 0:
        parts.append(f"({progress.percentage:.1f}%)")

    if progress.message:
        parts.append(f"- {progress.message}")

    return " ".join(parts)


def render_progress_bar(bytes_processed: int, bytes_total: int, width: int = 30) -> str:
    """Render a one-line text progress bar.

    Example:
        >>> render_progress_bar(1, 4, width=8)
        '[##------]  25.0%'
    """
    fraction = bytes_processed / bytes_total if bytes_total > 0 else 0.0
    fraction = min(max(fraction, 0.0), 1.0)
    filled = int(round(fraction * width))
    return f"[{'#' * filled}{'-' * (width - filled)}] {fraction * 100:5.1f}%"
