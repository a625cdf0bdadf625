"""Text helpers shared by the domain and the adapters.

Documents handed to the engine are expected to be clean already; these
helpers are applied once, at the boundary where study records are turned
into text.
"""

import re
import unicodedata

_INLINE_WS = re.compile(r"[ \t\f\v]+")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_text(text: str | None) -> str:
    """Remove BOM markers, apply NFKC and collapse redundant whitespace.

    Args:
        text: Input text, possibly None.

    Returns:
        Cleaned text. Runs of spaces/tabs become one space, line endings
        become ``\\n`` and more than one blank line is collapsed.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    cleaned = unicodedata.normalize("NFKC", cleaned)
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _INLINE_WS.sub(" ", cleaned)
    cleaned = "\n".join(line.strip() for line in cleaned.split("\n"))
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()
