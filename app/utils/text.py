"""
Text canonicalization shared by query expansion and clinic tokenization.

Every string that takes part in matching goes through normalize(), so a
query term and a clinic field compare in the same form:

    "  Atópic   DERMATITIS " -> "atopic dermatitis"
"""

import re
import unicodedata
from typing import Optional

OPEN_NOW_RE = re.compile(r"\bopen\s*now\b")
SEPARATOR_RE = re.compile(r"[/&]+")
ZIP_CODE_RE = re.compile(r"^\d{5}$")


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize(text: Optional[str]) -> str:
    """
    Strip accents, lowercase and collapse whitespace.

    Folding and lowercasing repeat until nothing changes, because some
    compatibility characters decompose into capitals. The result is a
    fixed point: normalize(normalize(x)) == normalize(x).
    """
    if not text:
        return ""
    previous = None
    folded = text
    while folded != previous:
        previous = folded
        folded = _fold(folded).lower()
    return " ".join(folded.split())


def mentions_open_now(text: Optional[str]) -> bool:
    return bool(OPEN_NOW_RE.search(normalize(text)))


def strip_open_now(text: Optional[str]) -> str:
    """Remove the "open now" phrase; it is a filter, not a search term."""
    return " ".join(OPEN_NOW_RE.sub(" ", normalize(text)).split())


def collapse_separators(text: str) -> str:
    return " ".join(SEPARATOR_RE.sub(" ", text).split())


def is_zip_code(text: Optional[str]) -> bool:
    return bool(text) and bool(ZIP_CODE_RE.match(text.strip()))
