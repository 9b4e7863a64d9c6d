"""
Relevance scoring strategies.

Two independent strategies share one interface:

- TaxonomyTermScorer: location-scoped search. Expands the query into
  canonical terms and rewards each term by where it appears
  (name 3, category/tags 2, anywhere else 1, fuzzy hit 1).
- BusinessNameScorer: nationwide "find this business" search. Compares
  the whole query to the name, city and address, then adds small boosts
  for rating, review volume and operational status.

They are tuned for different queries and are never blended. Both return
0 for "no match".
"""

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, List, Sequence

from schemas.clinic import ClinicRecord
from app.services.fuzzy import allowed_distance, edit_distance
from app.services.query_expander import expand_terms
from app.services.tokenizer import ClinicTokens, tokenize
from app.utils.text import normalize, strip_open_now

NAME_MATCH_POINTS = 3
TAXONOMY_MATCH_POINTS = 2
TEXT_MATCH_POINTS = 1
FUZZY_MATCH_POINTS = 1

NAME_EXACT_POINTS = 100
NAME_PREFIX_POINTS = 50
NAME_SUBSTRING_POINTS = 25
CITY_EXACT_POINTS = 40
CITY_SUBSTRING_POINTS = 20
ADDRESS_SUBSTRING_POINTS = 10
RATING_WEIGHT = 2
OPERATIONAL_POINTS = 5
OPERATIONAL_STATUS = "OPERATIONAL"


class SearchContext(str, Enum):
    LOCATION = "location"
    NATIONWIDE = "nationwide"


class RelevanceScorer(ABC):
    @abstractmethod
    def score(self, clinic: ClinicRecord, query: str) -> float:
        """Return a score >= 0 for one clinic and one raw query; 0 means no match."""
        raise NotImplementedError

    def score_many(self, clinics: Sequence[ClinicRecord], query: str) -> List[float]:
        return [self.score(clinic, query) for clinic in clinics]


class TaxonomyTermScorer(RelevanceScorer):
    def score(self, clinic: ClinicRecord, query: str) -> float:
        return self.score_terms(clinic, expand_terms(query))

    def score_many(self, clinics: Sequence[ClinicRecord], query: str) -> List[float]:
        terms = expand_terms(query)
        return [self.score_terms(clinic, terms) for clinic in clinics]

    def score_terms(self, clinic: ClinicRecord, terms: Iterable[str]) -> float:
        tokens = tokenize(clinic)
        return float(sum(self._score_term(tokens, term) for term in terms))

    @staticmethod
    def _score_term(tokens: ClinicTokens, term: str) -> int:
        if term in tokens.text:
            if term in tokens.name:
                return NAME_MATCH_POINTS
            if term in tokens.taxonomy:
                return TAXONOMY_MATCH_POINTS
            return TEXT_MATCH_POINTS

        bound = allowed_distance(term)
        for word in tokens.words:
            if abs(len(word) - len(term)) > bound:
                continue
            if edit_distance(term, word, bound) <= bound:
                return FUZZY_MATCH_POINTS
        return 0


class BusinessNameScorer(RelevanceScorer):
    def score(self, clinic: ClinicRecord, query: str) -> float:
        q = strip_open_now(query)
        if not q:
            return 0.0

        name = normalize(clinic.name)
        city = normalize(clinic.city)
        address = normalize(clinic.address)

        score = 0.0
        if name == q:
            score += NAME_EXACT_POINTS
        elif name.startswith(q):
            score += NAME_PREFIX_POINTS
        elif q in name:
            score += NAME_SUBSTRING_POINTS

        if city == q:
            score += CITY_EXACT_POINTS
        elif q in city:
            score += CITY_SUBSTRING_POINTS

        if q in address:
            score += ADDRESS_SUBSTRING_POINTS

        if score == 0:
            return 0.0

        if clinic.rating:
            score += clinic.rating * RATING_WEIGHT
        if clinic.review_count and clinic.review_count > 0:
            score += math.log10(clinic.review_count)
        if clinic.business_status == OPERATIONAL_STATUS:
            score += OPERATIONAL_POINTS
        return score


_SCORERS = {
    SearchContext.LOCATION: TaxonomyTermScorer(),
    SearchContext.NATIONWIDE: BusinessNameScorer(),
}


def get_scorer(context: SearchContext = SearchContext.LOCATION) -> RelevanceScorer:
    return _SCORERS[SearchContext(context)]
