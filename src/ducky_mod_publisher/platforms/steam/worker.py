"""Upload worker process entry point.

Run by the supervisor as::

    python -m ducky_mod_publisher.platforms.steam.worker <mod_dir> [options]

Every output line carries a level prefix so the parent can relay it.
"""

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from ...config import get_steam_app_id
from ...errors import DuckyError
from .progress import ProgressTracker, WorkshopUploadProgress, WorkshopUploadStatus
from .supervisor import PROGRESS_PREFIX, SUGGESTION_MARKER, WORKER_MODULE
from .upload import PushOptions, push_to_workshop
from .workshop import WorkshopSession, load_backend_factory

logger = logging.getLogger(__name__)


class LinePrefixFormatter(logging.Formatter):
    """Prefix every line of a record with ``[LEVEL]``."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        return "\n".join(f"[{record.levelname}] {line}" for line in text.splitlines())


def configure_worker_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LinePrefixFormatter("%(message)s"))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def emit_progress(progress: WorkshopUploadProgress) -> None:
    if progress.status == WorkshopUploadStatus.UPLOADING_CONTENT and progress.bytes_total > 0:
        print(f"{PROGRESS_PREFIX} {progress.bytes_processed} {progress.bytes_total}", flush=True)
    else:
        logger.debug("[%s] %s", progress.status.label, progress.message)


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog=WORKER_MODULE,
        description="Upload a mod to the Steam Workshop (internal worker)",
    )
    parser.add_argument("mod_dir", type=Path)
    parser.add_argument("--update-description", action="store_true")
    parser.add_argument("--changelog", default=None)
    parser.add_argument("--skip-tail", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    configure_worker_logging(args.verbose)

    options = PushOptions(
        update_description=args.update_description,
        changelog=args.changelog,
        skip_tail=args.skip_tail,
    )
    tracker = ProgressTracker()
    tracker.on_progress(emit_progress)

    try:
        with WorkshopSession(get_steam_app_id(), load_backend_factory()) as session:
            push_to_workshop(args.mod_dir, session, options, tracker)
    except DuckyError as e:
        logger.error(e.message)
        for suggestion in e.suggestions:
            logger.error("  %s %s", SUGGESTION_MARKER, suggestion)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
