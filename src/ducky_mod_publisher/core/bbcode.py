"""Markdown to Steam Workshop BBCode conversion.

The conversion is an ordered pipeline of plain string transforms. Each
pass sees the output of the previous one, so the order below is part of
the contract:

    1. escape ``<`` and ``>``
    2. fenced code blocks        -> [code]...[/code]
    3. inline code spans         -> [b]...[/b]
    4. headings h6..h1           -> [h6]..[h1]
    5. bold+italic               -> [b][i]...[/i][/b]
    6. bold                      -> [b]...[/b]
    7. italic                    -> [i]...[/i]
    8. strikethrough             -> [s]...[/s]
    9. horizontal rules          -> [hr]
    10. images                   -> [img]url[/img]
    11. links                    -> [url=url]text[/url]
    12. list items               -> [*]item
    13. runs of list items       -> [list]...[/list]
    14. blockquote lines         -> [quote]...[/quote]
    15. collapse blank lines

Code contents are set aside after pass 2 and 3 and restored at the end,
so no later pass rewrites them.
"""

import re
from collections.abc import Callable

PLACEHOLDER_PATTERN = re.compile(r"\x00(\d+)\x00")

EXISTING_CODE_PATTERN = re.compile(r"\[code\].*?\[/code\]", re.DOTALL)
FENCED_CODE_PATTERN = re.compile(r"```[\w+#.-]*[ \t]*\n(.*?)```", re.DOTALL)
INLINE_CODE_PATTERN = re.compile(r"`([^`\n]+)`")

HEADING_PATTERNS = [
    (level, re.compile(rf"^{'#' * level}[ \t]+(.+?)[ \t]*$", re.MULTILINE))
    for level in range(6, 0, -1)
]

# Emphasis content must start and end with a non-space, non-marker
# character so that rules like ``***`` and list bullets are left alone.
EMPHASIS_PASSES = [
    (re.compile(r"\*\*\*(?=[^*\s])(.+?)(?<=[^*\s])\*\*\*"), r"[b][i]\1[/i][/b]"),
    (re.compile(r"(?<!\w)___(?=[^_\s])(.+?)(?<=[^_\s])___(?!\w)"), r"[b][i]\1[/i][/b]"),
    (re.compile(r"\*\*(?=[^*\s])(.+?)(?<=[^*\s])\*\*"), r"[b]\1[/b]"),
    (re.compile(r"(?<!\w)__(?=[^_\s])(.+?)(?<=[^_\s])__(?!\w)"), r"[b]\1[/b]"),
    (re.compile(r"(?<!\[)\*(?=[^*\s\]])(.+?)(?<=[^*\s])\*"), r"[i]\1[/i]"),
    (re.compile(r"(?<!\w)_(?=[^_\s])(.+?)(?<=[^_\s])_(?!\w)"), r"[i]\1[/i]"),
]

STRIKETHROUGH_PATTERN = re.compile(r"~~(?=\S)(.+?)(?<=\S)~~")
HORIZONTAL_RULE_PATTERN = re.compile(r"^(?:-{3,}|\*{3,})[ \t]*$", re.MULTILINE)
IMAGE_PATTERN = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)\)")
LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
UNORDERED_ITEM_PATTERN = re.compile(r"^[*-][ \t]+(.+)$", re.MULTILINE)
ORDERED_ITEM_PATTERN = re.compile(r"^\d+\.[ \t]+(.+)$", re.MULTILINE)

# Matched after escaping, so the marker is the escaped form of ">"
BLOCKQUOTE_PATTERN = re.compile(r"^&gt;[ \t]+(.+)$", re.MULTILINE)

BLANK_LINES_PATTERN = re.compile(r"\n{3,}")

H1_PATTERN = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)


class CodeStash:
    """Holds code contents out of reach of the inline passes."""

    def __init__(self) -> None:
        self._items: list[str] = []

    def put(self, content: str) -> str:
        self._items.append(content)
        return f"\x00{len(self._items) - 1}\x00"

    def restore(self, text: str) -> str:
        # Inline code may contain placeholders from fenced blocks
        while PLACEHOLDER_PATTERN.search(text):
            text = PLACEHOLDER_PATTERN.sub(lambda m: self._items[int(m.group(1))], text)
        return text


def escape_html(text: str) -> str:
    return text.replace("<", "&lt;").replace(">", "&gt;")


def convert_code_blocks(text: str, stash: CodeStash) -> str:
    """Convert fenced code blocks, keeping existing [code] blocks as they are."""
    text = EXISTING_CODE_PATTERN.sub(lambda m: stash.put(m.group(0)), text)
    return FENCED_CODE_PATTERN.sub(
        lambda m: stash.put(f"[code]{m.group(1)}[/code]"), text
    )


def convert_inline_code(text: str, stash: CodeStash) -> str:
    # No monospace tag in Steam BBCode; bold is the closest match.
    return INLINE_CODE_PATTERN.sub(lambda m: f"[b]{stash.put(m.group(1))}[/b]", text)


def convert_headings(text: str) -> str:
    for level, pattern in HEADING_PATTERNS:
        text = pattern.sub(rf"[h{level}]\1[/h{level}]", text)
    return text


def convert_emphasis(text: str) -> str:
    for pattern, replacement in EMPHASIS_PASSES:
        text = pattern.sub(replacement, text)
    return text


def convert_strikethrough(text: str) -> str:
    return STRIKETHROUGH_PATTERN.sub(r"[s]\1[/s]", text)


def convert_horizontal_rules(text: str) -> str:
    return HORIZONTAL_RULE_PATTERN.sub("[hr]", text)


def convert_images(text: str) -> str:
    return IMAGE_PATTERN.sub(r"[img]\2[/img]", text)


def convert_links(text: str) -> str:
    return LINK_PATTERN.sub(r"[url=\2]\1[/url]", text)


def convert_list_items(text: str) -> str:
    text = UNORDERED_ITEM_PATTERN.sub(r"[*]\1", text)
    return ORDERED_ITEM_PATTERN.sub(r"[*]\1", text)


def wrap_lists(text: str) -> str:
    """Wrap each contiguous run of ``[*]`` lines in one [list] block.

    Runs that already sit inside a ``[list]`` block are left alone.
    """
    output: list[str] = []
    run: list[str] = []
    depth = 0

    def flush() -> None:
        if run:
            output.append("[list]")
            output.extend(run)
            output.append("[/list]")
            run.clear()

    for line in text.split("\n"):
        stripped = line.strip()

        if depth == 0 and line.startswith("[*]"):
            run.append(line)
            continue

        flush()
        if stripped == "[list]":
            depth += 1
        elif stripped == "[/list]" and depth > 0:
            depth -= 1
        output.append(line)

    flush()
    return "\n".join(output)


def convert_blockquotes(text: str) -> str:
    # Consecutive quote lines stay separate tags
    return BLOCKQUOTE_PATTERN.sub(r"[quote]\1[/quote]", text)


def collapse_blank_lines(text: str) -> str:
    return BLANK_LINES_PATTERN.sub("\n\n", text)


INLINE_PASSES: list[Callable[[str], str]] = [
    convert_headings,
    convert_emphasis,
    convert_strikethrough,
    convert_horizontal_rules,
    convert_images,
    convert_links,
    convert_list_items,
    wrap_lists,
    convert_blockquotes,
    collapse_blank_lines,
]


def markdown_to_bbcode(markdown: str) -> str:
    """Convert Markdown text to Steam Workshop BBCode.

    Never raises on malformed input; unrecognized syntax passes through
    unchanged. Converting already-converted output is a best-effort
    no-op for list, code and emphasis tags, not a guarantee.

    Args:
        markdown: Markdown source

    Returns:
        BBCode text

    Example:
        >>> markdown_to_bbcode("# Title\\n\\n**bold**")
        '[h1]Title[/h1]\\n\\n[b]bold[/b]'
    """
    stash = CodeStash()

    text = markdown.replace("\x00", "")
    text = escape_html(text)
    text = convert_code_blocks(text, stash)
    text = convert_inline_code(text, stash)

    for transform in INLINE_PASSES:
        text = transform(text)

    return stash.restore(text)


def extract_title(markdown: str, default: str = "") -> str:
    """Return the first H1 heading of a Markdown document.

    Args:
        markdown: Markdown source
        default: Value returned when no H1 heading exists

    Returns:
        Heading text without the leading ``#``, or default
    """
    match = H1_PATTERN.search(markdown)
    if match:
        title = match.group(1).strip()
        if title:
            return title
    return default
