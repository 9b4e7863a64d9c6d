"""
Pure result computation over a retained candidate set.

compute_results() is the single recomputation entry point: it is called
with the full, unfiltered candidate set and a FilterState on every change
of query, filters or candidates, and always builds fresh collections.

When the constraints eliminate everything, a fallback ladder relaxes them
one rung at a time and returns the first non-empty set:

    NONE             query + location scope + refinements
    RELAXED_FILTERS  query + location scope
    LOCATION_ONLY    location scope
    UNFILTERED       every candidate
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from schemas.clinic import ClinicRecord
from schemas.filters import FilterState
from schemas.search import FallbackLevel, ScoredResult, SearchResults
from app.services.filters import apply_predicates, refinement_predicates, scope_predicates, sort_results
from app.services.query_expander import is_text_query
from app.services.scoring import RelevanceScorer, get_scorer
from app.utils.text import is_zip_code, mentions_open_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    items: Tuple[ScoredResult, ...]
    ranked: bool
    fallback: FallbackLevel


def _text_matches(
    candidates: Sequence[ClinicRecord],
    query: str,
    scorer: RelevanceScorer,
) -> Tuple[List[ScoredResult], bool]:
    """Return (matches, ranked); ranked is False when no text scoring happened."""
    if is_zip_code(query):
        zip_code = query.strip()
        return [ScoredResult(clinic=c) for c in candidates if (c.postal_code or "").strip() == zip_code], False

    if not is_text_query(query):
        return [ScoredResult(clinic=c) for c in candidates], False

    scores = scorer.score_many(candidates, query)
    return [ScoredResult(clinic=c, score=s) for c, s in zip(candidates, scores) if s > 0], True


def select_results(
    candidates: Iterable[ClinicRecord],
    filters: FilterState,
    scorer: Optional[RelevanceScorer] = None,
) -> Selection:
    candidates = tuple(candidates)
    if not candidates:
        return Selection(items=(), ranked=False, fallback=FallbackLevel.NONE)

    scorer = scorer or get_scorer()
    open_now = filters.open_now or mentions_open_now(filters.query)

    matched, ranked = _text_matches(candidates, filters.query, scorer)
    scope = scope_predicates(filters)
    refinements = refinement_predicates(filters, open_now)
    unscored = [ScoredResult(clinic=c) for c in candidates]

    rungs: List[Tuple[FallbackLevel, bool, Callable[[], List[ScoredResult]]]] = [
        (FallbackLevel.NONE, ranked, lambda: apply_predicates(matched, scope + refinements)),
        (FallbackLevel.RELAXED_FILTERS, ranked, lambda: apply_predicates(matched, scope)),
        (FallbackLevel.LOCATION_ONLY, False, lambda: apply_predicates(unscored, scope)),
        (FallbackLevel.UNFILTERED, False, lambda: unscored),
    ]
    for level, rung_ranked, build in rungs:
        if level is FallbackLevel.LOCATION_ONLY and not scope:
            continue
        items = build()
        if items:
            if level is not FallbackLevel.NONE:
                logger.info(
                    "No clinics matched all constraints, falling back to %s (%d results)",
                    level.value,
                    len(items),
                )
            return Selection(items=tuple(items), ranked=rung_ranked, fallback=level)

    # Unreachable: the UNFILTERED rung is never empty.
    return Selection(items=(), ranked=False, fallback=FallbackLevel.NONE)


def compute_results(
    candidates: Iterable[ClinicRecord],
    filters: FilterState,
    scorer: Optional[RelevanceScorer] = None,
) -> SearchResults:
    selection = select_results(candidates, filters, scorer)
    ordered = sort_results(list(selection.items), filters, selection.ranked)
    return SearchResults(scored=tuple(ordered), fallback=selection.fallback)
