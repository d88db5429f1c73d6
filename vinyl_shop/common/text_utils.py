"""
Text Utilities

Helper functions for turning catalog text into product HTML and flat
metafield strings.
"""

import html
import re
from typing import Iterable


def autop(text: str) -> str:
    """
    Convert plain text into HTML paragraphs.

    Blocks separated by blank lines become ``<p>`` elements, single
    newlines inside a block become ``<br />``. Text is HTML-escaped.

    Example:
        >>> autop("First line\\nsecond\\n\\nNext")
        '<p>First line<br />\\nsecond</p>\\n<p>Next</p>\\n'
    """
    if not text or not text.strip():
        return ""

    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    blocks = [b.strip() for b in re.split(r'\n\s*\n', normalized) if b.strip()]

    paragraphs = []
    for block in blocks:
        lines = [html.escape(line.strip()) for line in block.split("\n")]
        paragraphs.append("<p>" + "<br />\n".join(lines) + "</p>\n")

    return "".join(paragraphs)


def join_non_empty(parts: Iterable, separator: str) -> str:
    """Join the string form of parts, skipping empty values."""
    return separator.join(str(p) for p in parts if p not in (None, "", 0) and str(p).strip())


def sanitize_text_field(value) -> str:
    """Collapse whitespace and strip tags from a single-line value."""
    if value is None:
        return ""
    text = re.sub(r'<[^>]*>', '', str(value))
    text = re.sub(r'[\r\n\t ]+', ' ', text)
    return text.strip()
