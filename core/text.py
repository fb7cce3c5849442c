# core/text.py
import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")


def strip_accents(text: str) -> str:
    """Remove combining marks: "março" -> "marco", "às" -> "as"."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def fold(text: str) -> str:
    """
    Canonical form used before every pattern match:
    lowercase, accent-free, single-spaced.
    """
    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", strip_accents(text).lower()).strip()
