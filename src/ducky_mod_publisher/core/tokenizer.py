"""Comma-delimited, quote-aware list parsing for ``info.ini`` values."""


def parse_list(value: str | None) -> list[str] | None:
    """Split a raw INI value into trimmed, non-empty tokens.

    Commas separate tokens unless they appear between double quotes.
    A quote preceded by a backslash does not toggle quoting and is kept
    literally together with the backslash; other quotes are consumed.
    Unclosed quotes are tolerated and the trailing buffer is flushed as-is.

    Examples:
        'tag1, tag2 , tag3' -> ['tag1', 'tag2', 'tag3']
        'tag1,,tag2'        -> ['tag1', 'tag2']
        '"a, b",c'          -> ['a, b', 'c']
        '"a,b'              -> ['a,b']

    Args:
        value: Raw value from the metadata file

    Returns:
        List of tokens, or None if the value is absent or yields no tokens
    """
    if not value:
        return None

    tokens: list[str] = []
    buffer: list[str] = []
    in_quotes = False
    previous = ""

    def flush() -> None:
        token = "".join(buffer).strip()
        if token:
            tokens.append(token)
        buffer.clear()

    for char in value:
        if char == '"' and previous != "\\":
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            flush()
        else:
            buffer.append(char)
        previous = char

    flush()

    return tokens or None
