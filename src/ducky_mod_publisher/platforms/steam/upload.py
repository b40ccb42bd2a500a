"""Workshop upload flow.

Creates the Workshop item on first upload (persisting its ID to
``info.ini`` before anything else happens), uploads content and the
primary-language title/description, then optionally each additional
language.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ...core.languages import load_descriptions, load_titles, select_primary_content
from ...core.metadata import parse_metadata_file, save_published_file_id
from ...core.types import UpdateDetails
from ...publishers.base import PublishResult
from .progress import SUCCESS, ProgressTracker, WorkshopUploadStatus
from .workshop import WorkshopSession

logger = logging.getLogger(__name__)

SUBMISSION_FOOTER = "[hr]Submitted via ducky cli"
PREVIEW_FILENAME = "preview.png"
VISIBILITY_PUBLIC = 0


@dataclass
class PushOptions:
    update_description: bool = False
    changelog: str | None = None
    skip_tail: bool = False


def append_tail(content: str, skip_tail: bool = False) -> str:
    """Append the submission footer unless skipped or already present.

    Example:
        >>> append_tail("Notes")
        'Notes\\n\\n[hr]Submitted via ducky cli'
    """
    if skip_tail:
        return content
    if not content:
        return SUBMISSION_FOOTER
    if content.strip().endswith(SUBMISSION_FOOTER):
        return content
    return f"{content}\n\n{SUBMISSION_FOOTER}"


def push_to_workshop(
    mod_dir: Path,
    session: WorkshopSession,
    options: PushOptions | None = None,
    tracker: ProgressTracker | None = None,
) -> PublishResult:
    """Upload a mod to the Steam Workshop.

    The Workshop item is created at most once. Its ID is written to
    info.ini immediately after creation, so a later failure leaves the
    local identity intact and the next run updates the same item.

    Args:
        mod_dir: Path to the mod directory
        session: Initialized Workshop session
        options: Push options
        tracker: Progress tracker to report phases to

    Returns:
        PublishResult with the published file ID

    Raises:
        DuckyError: If any step fails
    """
    options = options or PushOptions()
    tracker = tracker or ProgressTracker()
    mod_dir = Path(mod_dir).resolve()

    try:
        tracker.report(WorkshopUploadStatus.PREPARING, "Parsing mod metadata...")
        metadata = parse_metadata_file(mod_dir)

        logger.info("Mod: %s", metadata.title)
        logger.info("Version: %s", metadata.version)
        logger.info("Steam App ID: %s", session.app_id)

        is_first_upload = metadata.published_file_id is None

        if is_first_upload:
            logger.info("Mode: First-time upload")
            tracker.report(WorkshopUploadStatus.REQUESTING_ID, "Creating new Workshop item...")
            item_id = session.create_item()
            logger.log(SUCCESS, "Created new Workshop item with ID: %s", item_id)

            tracker.report(
                WorkshopUploadStatus.WRITING_INI, "Saving publishedFileId to info.ini..."
            )
            save_published_file_id(mod_dir, item_id)
            metadata.published_file_id = item_id
            logger.info("Saved publishedFileId %s to info.ini", item_id)
        else:
            item_id = metadata.published_file_id
            logger.info("Mode: Update existing Workshop item %s", item_id)

        descriptions = load_descriptions(mod_dir)
        titles = load_titles(mod_dir, metadata.title)
        logger.info(
            "Found %d description(s) and %d title(s)", len(descriptions), len(titles)
        )
        if descriptions:
            logger.debug("Languages: %s", ", ".join(d.language for d in descriptions))

        tracker.report(
            WorkshopUploadStatus.STARTING_STEAM_UPLOAD, "Preparing Workshop upload..."
        )
        primary = select_primary_content(descriptions, titles)

        details: UpdateDetails = {
            "content_path": str(mod_dir),
            "preview_path": str(mod_dir / PREVIEW_FILENAME),
            "visibility": VISIBILITY_PUBLIC,
            "change_note": append_tail(options.changelog or "", options.skip_tail),
        }

        if is_first_upload or options.update_description:
            if is_first_upload:
                logger.info("Setting primary language description (required for new items)")
            else:
                logger.info("Updating primary language description")

            if primary.title:
                details["title"] = primary.title.title
                logger.info("Title: %s", primary.title.title)
            if primary.description:
                details["description"] = append_tail(
                    primary.description.content, options.skip_tail
                )
        else:
            logger.info("Description updates: disabled (use --update-description to enable)")

        logger.info("Uploading content to Steam...")
        tracker.report(WorkshopUploadStatus.UPLOADING_CONTENT, "Uploading content to Steam...")
        session.update_item(item_id, details, tracker.report_upload_progress)
        logger.log(SUCCESS, "Content uploaded successfully")

        if options.update_description:
            primary_language = primary.description.language if primary.description else None
            others = [d for d in descriptions if d.language != primary_language]

            if others:
                logger.info("Uploading %d additional language(s)...", len(others))

            for index, localized in enumerate(others, start=1):
                tracker.report_translation_progress(index, len(others))
                logger.info("  [%d/%d] %s", index, len(others), localized.language)

                language_details: UpdateDetails = {
                    "description": append_tail(localized.content, options.skip_tail),
                    "language": localized.language,
                }
                title = next((t for t in titles if t.language == localized.language), None)
                if title:
                    language_details["title"] = title.title

                session.update_item(item_id, language_details)

        action = "Published" if is_first_upload else "Updated"
        if options.update_description:
            logger.log(
                SUCCESS,
                "%s Workshop item: %s (%d language(s))",
                action,
                item_id,
                max(len(descriptions), 1),
            )
        else:
            logger.log(SUCCESS, "%s Workshop item: %s", action, item_id)

        tracker.report_success("Upload completed successfully")
    except Exception as e:
        tracker.report_failure(str(e), error=e)
        raise

    return PublishResult(format="steam", published_file_id=item_id, created=is_first_upload)
