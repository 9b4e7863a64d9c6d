from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, List, Optional

from schemas.clinic import ClinicRecord
from app.utils.text import normalize


@dataclass(frozen=True)
class ClinicTokens:
    text: str
    words: FrozenSet[str]
    name: str
    taxonomy: str


def _searchable_fields(clinic: ClinicRecord) -> List[Optional[str]]:
    # Field order is fixed: name, address, city, state, category, tags,
    # services, description.
    fields: List[Optional[str]] = [
        clinic.name,
        clinic.address,
        clinic.city,
        clinic.state,
        clinic.category,
    ]
    fields.extend(clinic.tags)
    if clinic.services:
        fields.extend(clinic.services)
    fields.append(clinic.description)
    return fields


@lru_cache(maxsize=8192)
def tokenize(clinic: ClinicRecord) -> ClinicTokens:
    """
    Project a clinic into its normalized searchable text and word set.

    Missing fields are skipped. Records are frozen and compared by value,
    so the cache can never hand back tokens for different content.
    """
    text = normalize(" ".join(field for field in _searchable_fields(clinic) if field))
    taxonomy = normalize(" ".join(field for field in [clinic.category, *clinic.tags] if field))
    return ClinicTokens(
        text=text,
        words=frozenset(text.split()),
        name=normalize(clinic.name),
        taxonomy=taxonomy,
    )
