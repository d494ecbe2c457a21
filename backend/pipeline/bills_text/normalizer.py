"""Clean the text extracted from GPO bill version HTML."""

import re

# GPO appends this marker to the end of every bill text
END_OF_DOCUMENT_MARKER = "<all>"

_WHITESPACE_RE = re.compile(r"\s+")
_UNDERSCORE_RUN_RE = re.compile(r"_{2,}")
_HYPHEN_BREAK_RE = re.compile(r"(\w)-\s+(\w)")


def _clean_once(text: str) -> str:
    text = text.replace(END_OF_DOCUMENT_MARKER, "")

    text = _WHITESPACE_RE.sub(" ", text)

    # Typewriter-style quotes
    text = text.replace("``", '"')
    text = text.replace("''", '"')

    # Page-break rules
    text = _UNDERSCORE_RUN_RE.sub("", text)

    # Words broken over a line end: "appro- priations" -> "appropriations"
    text = _HYPHEN_BREAK_RE.sub(r"\1\2", text)

    return text.strip()


def clean_text(text: str) -> str:
    """Normalize raw bill text into a single canonical line.

    The rules only ever shorten the text, but a removal can expose a new
    artifact (e.g. underscores between two spaces leave a double space), so
    they are applied until the text stops changing. This makes the function
    idempotent.

    Args:
        text: Raw text from the version's <pre> block.

    Returns:
        Cleaned text with no runs of whitespace longer than one space.
    """
    cleaned = _clean_once(text)
    while True:
        again = _clean_once(cleaned)
        if again == cleaned:
            return cleaned
        cleaned = again
