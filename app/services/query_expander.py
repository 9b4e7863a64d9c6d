"""
Query expansion for clinic search.

A raw query becomes a set of canonical search terms:

    expand_terms("eczwma open now")
    # {"eczema", "atopic dermatitis", "dermatitis", "itchy skin", "dupixent"}

Phrase triggers are checked by substring containment on the cleaned
query, single tokens are misspelling-corrected and then widened with
their synonym set.
"""

from typing import Set

from app.core.controlled_vocabulary import PHRASE_TRIGGERS, canonical_token, synonyms_for
from app.utils.text import collapse_separators, normalize, strip_open_now

# Cleaned queries shorter than this are not used for text filtering.
MIN_QUERY_LENGTH = 2


def clean_query(raw_query: str) -> str:
    """Normalize, drop the "open now" phrase and split on / and &."""
    return collapse_separators(strip_open_now(raw_query))


def is_text_query(raw_query: str) -> bool:
    return len(clean_query(raw_query)) >= MIN_QUERY_LENGTH


def expand_terms(raw_query: str) -> Set[str]:
    cleaned = clean_query(raw_query)
    if not cleaned:
        return set()

    terms: Set[str] = set()

    for phrase, expansions in PHRASE_TRIGGERS.items():
        if phrase in cleaned:
            terms.update(normalize(term) for term in expansions)

    for token in cleaned.split():
        corrected = canonical_token(token)
        terms.add(corrected)
        terms.update(normalize(term) for term in synonyms_for(corrected))

    terms.discard("")
    return terms
