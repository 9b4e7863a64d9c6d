"""
Controlled vocabulary for clinic search.

Purpose:
- Correct common misspellings of dermatology terms
- Expand a canonical term into lay terms, brand names and clinical synonyms
- Inject canonical tokens when a multi-word phrase appears in a query

All keys are normalized (lowercase, accent-free, single-spaced). The
tables are read-only; adding a term only means adding a row here.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping


def _freeze(table: Dict[str, Iterable[str]]) -> Mapping[str, FrozenSet[str]]:
    return MappingProxyType({key: frozenset(values) for key, values in table.items()})


# ============================================================
# MISSPELLINGS (single token -> canonical token)
# ============================================================

MISSPELLINGS: Mapping[str, str] = MappingProxyType({
    # eczema
    "eczwma": "eczema",
    "exzema": "eczema",
    "eczma": "eczema",
    "ecsema": "eczema",
    "exema": "eczema",
    "eczeema": "eczema",
    # psoriasis
    "psoraisis": "psoriasis",
    "psorisis": "psoriasis",
    "soriasis": "psoriasis",
    "psoriasus": "psoriasis",
    "sorisis": "psoriasis",
    # rosacea
    "rosaca": "rosacea",
    "rosasia": "rosacea",
    "rosacia": "rosacea",
    "rosecea": "rosacea",
    # acne
    "accne": "acne",
    "acnee": "acne",
    "akne": "acne",
    # cosmetic injectables
    "botax": "botox",
    "bottox": "botox",
    "boton": "botox",
    "filers": "fillers",
    "fillors": "fillers",
    "lazer": "laser",
    "lasor": "laser",
    # skin cancer
    "melonoma": "melanoma",
    "melanoma's": "melanoma",
    "carcenoma": "carcinoma",
    "carcinoma's": "carcinoma",
    "moh's": "mohs",
    "mohs'": "mohs",
    # specialists
    "dermatoligist": "dermatologist",
    "dermotologist": "dermatologist",
    "dermatologyst": "dermatologist",
    "dermitologist": "dermatologist",
    "dermatolgist": "dermatologist",
    "dermatolgy": "dermatology",
    "dermotology": "dermatology",
    "dermitology": "dermatology",
    "derm": "dermatology",
    # patients
    "pedriatric": "pediatric",
    "pediatic": "pediatric",
    "peditric": "pediatric",
    "paediatric": "pediatric",
    "cosmedic": "cosmetic",
    "cosmetics": "cosmetic",
    # conditions
    "vitaligo": "vitiligo",
    "vitilago": "vitiligo",
    "hyperhydrosis": "hyperhidrosis",
    "alopicia": "alopecia",
    "allopecia": "alopecia",
    "keloyd": "keloid",
    "warts": "wart",
    "moles": "mole",
    "telemedicine": "telehealth",
})


# ============================================================
# SYNONYMS (canonical token -> related terms and phrases)
# ============================================================

SYNONYMS: Mapping[str, FrozenSet[str]] = _freeze({
    "eczema": [
        "eczema",
        "atopic dermatitis",
        "dermatitis",
        "itchy skin",
        "dupixent",
    ],
    "dermatitis": [
        "dermatitis",
        "eczema",
        "contact dermatitis",
        "patch testing",
    ],
    "psoriasis": [
        "psoriasis",
        "plaque psoriasis",
        "psoriatic",
        "biologics",
        "phototherapy",
    ],
    "rosacea": [
        "rosacea",
        "facial redness",
        "flushing",
    ],
    "acne": [
        "acne",
        "pimples",
        "breakouts",
        "blackheads",
        "accutane",
        "isotretinoin",
        "acne scars",
    ],
    "botox": [
        "botox",
        "botulinum",
        "dysport",
        "xeomin",
        "neurotoxin",
        "injectables",
    ],
    "filler": [
        "filler",
        "fillers",
        "dermal fillers",
        "juvederm",
        "restylane",
        "injectables",
    ],
    "fillers": [
        "filler",
        "fillers",
        "dermal fillers",
        "juvederm",
        "restylane",
        "injectables",
    ],
    "laser": [
        "laser",
        "laser treatment",
        "ipl",
        "fraxel",
        "resurfacing",
        "laser hair removal",
    ],
    "mohs": [
        "mohs",
        "mohs surgery",
        "micrographic surgery",
        "skin cancer surgery",
    ],
    "cancer": [
        "skin cancer",
        "melanoma",
        "basal cell",
        "squamous cell",
        "carcinoma",
        "skin check",
    ],
    "melanoma": [
        "melanoma",
        "skin cancer",
        "mole check",
        "skin check",
    ],
    "carcinoma": [
        "carcinoma",
        "basal cell",
        "squamous cell",
        "skin cancer",
    ],
    "mole": [
        "mole",
        "moles",
        "mole removal",
        "mole check",
        "nevus",
    ],
    "wart": [
        "wart",
        "warts",
        "wart removal",
        "verruca",
        "cryotherapy",
    ],
    "pediatric": [
        "pediatric",
        "pediatric dermatology",
        "children",
        "kids",
        "child",
    ],
    "kids": [
        "kids",
        "children",
        "pediatric",
    ],
    "cosmetic": [
        "cosmetic",
        "cosmetic dermatology",
        "aesthetic",
        "aesthetics",
        "med spa",
    ],
    "aesthetic": [
        "aesthetic",
        "aesthetics",
        "cosmetic",
        "med spa",
    ],
    "alopecia": [
        "alopecia",
        "hair loss",
        "thinning hair",
        "prp",
    ],
    "vitiligo": [
        "vitiligo",
        "depigmentation",
        "phototherapy",
    ],
    "hyperhidrosis": [
        "hyperhidrosis",
        "excessive sweating",
        "miradry",
    ],
    "keloid": [
        "keloid",
        "scar",
        "scar treatment",
    ],
    "dermatologist": [
        "dermatologist",
        "dermatology",
        "skin doctor",
        "skin care",
    ],
    "dermatology": [
        "dermatology",
        "dermatologist",
        "skin care",
    ],
    "telehealth": [
        "telehealth",
        "telemedicine",
        "virtual visit",
        "online visit",
    ],
})


# ============================================================
# PHRASE TRIGGERS (multi-word phrase -> canonical tokens)
# ============================================================

PHRASE_TRIGGERS: Mapping[str, FrozenSet[str]] = _freeze({
    "mohs surgery": ["mohs", "mohs surgery", "skin cancer surgery"],
    "skin cancer": ["skin cancer", "melanoma", "mohs", "basal cell", "squamous cell"],
    "skin check": ["skin check", "mole check", "skin cancer screening"],
    "mole check": ["mole check", "skin check", "mole"],
    "hair loss": ["hair loss", "alopecia", "prp"],
    "wart removal": ["wart", "wart removal", "cryotherapy"],
    "laser hair removal": ["laser", "laser hair removal", "hair removal"],
    "acne scars": ["acne scars", "microneedling", "resurfacing"],
    "atopic dermatitis": ["eczema", "atopic dermatitis"],
    "dark spots": ["hyperpigmentation", "melasma", "dark spots"],
    "excessive sweating": ["hyperhidrosis", "excessive sweating"],
    "med spa": ["cosmetic", "aesthetic", "med spa"],
    "skin doctor": ["dermatologist", "dermatology"],
    "online booking": ["online booking", "book online"],
})


# ============================================================
# SPECIALTY FILTER KEYWORDS
# ============================================================

SPECIALTY_KEYWORDS: Mapping[str, FrozenSet[str]] = _freeze({
    "pediatric": [
        "pediatric dermatology",
        "pediatric",
        "kids",
        "children",
    ],
    "cosmetic": [
        "cosmetic dermatology",
        "cosmetic",
        "aesthetic",
        "botox",
        "filler",
        "fillers",
        "injectable",
        "laser",
    ],
    "mohs_surgery": [
        "mohs surgery",
        "mohs",
        "skin cancer surgery",
    ],
})


# ============================================================
# GEOGRAPHY
# ============================================================

VALID_US_STATES: FrozenSet[str] = frozenset({
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA", "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA",
    "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK",
    "OR", "PA", "RI", "SC", "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC",
})

DEFAULT_TIMEZONE = "America/New_York"

STATE_TIMEZONES: Mapping[str, str] = MappingProxyType({
    "AL": "America/Chicago", "AK": "America/Anchorage", "AZ": "America/Phoenix",
    "AR": "America/Chicago", "CA": "America/Los_Angeles", "CO": "America/Denver",
    "CT": "America/New_York", "DE": "America/New_York", "FL": "America/New_York",
    "GA": "America/New_York", "HI": "Pacific/Honolulu", "ID": "America/Denver",
    "IL": "America/Chicago", "IN": "America/Indiana/Indianapolis", "IA": "America/Chicago",
    "KS": "America/Chicago", "KY": "America/New_York", "LA": "America/Chicago",
    "ME": "America/New_York", "MD": "America/New_York", "MA": "America/New_York",
    "MI": "America/Detroit", "MN": "America/Chicago", "MS": "America/Chicago",
    "MO": "America/Chicago", "MT": "America/Denver", "NE": "America/Chicago",
    "NV": "America/Los_Angeles", "NH": "America/New_York", "NJ": "America/New_York",
    "NM": "America/Denver", "NY": "America/New_York", "NC": "America/New_York",
    "ND": "America/Chicago", "OH": "America/New_York", "OK": "America/Chicago",
    "OR": "America/Los_Angeles", "PA": "America/New_York", "RI": "America/New_York",
    "SC": "America/New_York", "SD": "America/Chicago", "TN": "America/Chicago",
    "TX": "America/Chicago", "UT": "America/Denver", "VT": "America/New_York",
    "VA": "America/New_York", "WA": "America/Los_Angeles", "WV": "America/New_York",
    "WI": "America/Chicago", "WY": "America/Denver", "DC": "America/New_York",
})


def canonical_token(token: str) -> str:
    """
    Correct a normalized token if it is a known misspelling.

    Examples:
        "eczwma" -> "eczema"
        "botax"  -> "botox"

    Unknown tokens pass through unchanged.
    """
    return MISSPELLINGS.get(token, token)


def synonyms_for(token: str) -> FrozenSet[str]:
    return SYNONYMS.get(token, frozenset())
