from rapidfuzz.distance import Levenshtein

# Terms at least this long tolerate two typos, shorter ones only one.
LONG_TERM_LENGTH = 7


def allowed_distance(term: str) -> int:
    return 2 if len(term) >= LONG_TERM_LENGTH else 1


def edit_distance(a: str, b: str, max_distance: int) -> int:
    """
    Levenshtein distance between a and b, bounded by max_distance.

    Returns the exact distance when it is within the bound, otherwise
    exactly max_distance + 1. Pairs whose lengths already differ by more
    than the bound are rejected before any matrix work.
    """
    if max_distance < 0:
        raise ValueError("max_distance must be >= 0")
    if a == b:
        return 0
    if abs(len(a) - len(b)) > max_distance:
        return max_distance + 1
    return Levenshtein.distance(a, b, score_cutoff=max_distance)
