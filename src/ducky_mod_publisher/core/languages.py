"""Steam language mapping and localized Workshop content loading.

Localized descriptions live in ``description/<lang>.md`` inside the mod
directory. The file stem is mapped to a Steam language code; files with
unrecognized stems are skipped.

See https://partner.steamgames.com/doc/store/localization/languages
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .bbcode import extract_title, markdown_to_bbcode
from .content import DESCRIPTION_DIR
from .metadata import read_text_file
from .types import LocalizedDescription, LocalizedTitle

logger = logging.getLogger(__name__)

PRIMARY_LANGUAGE_ORDER = ("english", "schinese")

LANGUAGE_CODE_MAP: dict[str, str] = {
    # Chinese
    "zh": "schinese",
    "zh-cn": "schinese",
    "zh_cn": "schinese",
    "zh-hans": "schinese",
    "zh_hans": "schinese",
    "schinese": "schinese",
    "zh-hant": "tchinese",
    "zh_hant": "tchinese",
    "zh-tw": "tchinese",
    "zh_tw": "tchinese",
    "tchinese": "tchinese",
    # English
    "en": "english",
    "en-us": "english",
    "en_us": "english",
    "en-gb": "english",
    "en_gb": "english",
    "english": "english",
    # Japanese / Korean
    "ja": "japanese",
    "ja-jp": "japanese",
    "japanese": "japanese",
    "ko": "koreana",
    "ko-kr": "koreana",
    "korean": "koreana",
    "koreana": "koreana",
    # Spanish variants all publish as Latin American Spanish
    "es": "latam",
    "es-419": "latam",
    "es-mx": "latam",
    "es_mx": "latam",
    "spanish": "latam",
    "latam": "latam",
    # Portuguese variants all publish as Brazilian Portuguese
    "pt": "brazilian",
    "pt-br": "brazilian",
    "pt_br": "brazilian",
    "portuguese": "brazilian",
    "brazilian": "brazilian",
    # European
    "de": "german",
    "german": "german",
    "fr": "french",
    "french": "french",
    "it": "italian",
    "italian": "italian",
    "ru": "russian",
    "russian": "russian",
    "pl": "polish",
    "polish": "polish",
    "tr": "turkish",
    "turkish": "turkish",
    "cs": "czech",
    "czech": "czech",
    "hu": "hungarian",
    "hungarian": "hungarian",
    "nl": "dutch",
    "dutch": "dutch",
    "sv": "swedish",
    "swedish": "swedish",
    "no": "norwegian",
    "nb": "norwegian",
    "norwegian": "norwegian",
    "da": "danish",
    "danish": "danish",
    "fi": "finnish",
    "finnish": "finnish",
    "el": "greek",
    "greek": "greek",
    "bg": "bulgarian",
    "bulgarian": "bulgarian",
    "ro": "romanian",
    "romanian": "romanian",
    "uk": "ukrainian",
    "ukrainian": "ukrainian",
    # Other
    "th": "thai",
    "thai": "thai",
    "vi": "vietnamese",
    "vietnamese": "vietnamese",
    "ar": "arabic",
    "arabic": "arabic",
    "id": "indonesian",
    "indonesian": "indonesian",
}


@dataclass
class PrimaryContent:
    """Description and title used for the default (non-localized) fields."""

    description: LocalizedDescription | None = None
    title: LocalizedTitle | None = None


def map_filename_to_language(stem: str) -> str | None:
    """Map a filename stem to a Steam language code.

    Args:
        stem: Filename without extension (e.g. "zh-Hans", "en")

    Returns:
        Steam language code, or None if the stem is not recognized

    Example:
        >>> map_filename_to_language("zh-Hans")
        'schinese'
        >>> map_filename_to_language("klingon") is None
        True
    """
    return LANGUAGE_CODE_MAP.get(stem.strip().lower())


def _iter_language_files(mod_dir: Path):
    """Yield ``(language, path)`` for recognized description files in listing order."""
    desc_dir = Path(mod_dir) / DESCRIPTION_DIR
    if not desc_dir.is_dir():
        return

    for path in sorted(desc_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() != ".md":
            continue

        language = map_filename_to_language(path.stem)
        if language is None:
            logger.debug("Skipping unrecognized language file: %s", path.name)
            continue

        yield language, path


def load_descriptions(mod_dir: Path) -> list[LocalizedDescription]:
    """Load every recognized ``description/<lang>.md`` as BBCode.

    Args:
        mod_dir: Path to the mod directory

    Returns:
        One LocalizedDescription per recognized file, empty if the
        description directory does not exist
    """
    return [
        LocalizedDescription(language, markdown_to_bbcode(read_text_file(path)))
        for language, path in _iter_language_files(mod_dir)
    ]


def load_titles(mod_dir: Path, default_title: str) -> list[LocalizedTitle]:
    """Load the H1 title of every recognized ``description/<lang>.md``.

    Files without an H1 heading use default_title.
    """
    return [
        LocalizedTitle(language, extract_title(read_text_file(path), default_title))
        for language, path in _iter_language_files(mod_dir)
    ]


def select_primary_content(
    descriptions: list[LocalizedDescription],
    titles: list[LocalizedTitle],
) -> PrimaryContent:
    """Pick the content for the default Workshop fields.

    English wins if it has a description or a title, then Simplified
    Chinese under the same rule, then the first entries found.
    """
    for language in PRIMARY_LANGUAGE_ORDER:
        description = next((d for d in descriptions if d.language == language), None)
        title = next((t for t in titles if t.language == language), None)
        if description or title:
            return PrimaryContent(description=description, title=title)

    return PrimaryContent(
        description=descriptions[0] if descriptions else None,
        title=titles[0] if titles else None,
    )
