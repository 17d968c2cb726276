"""
Relevance Scoring
=================

Fuzzy string scoring for tag autocomplete.

Scale (case-insensitive):
    exact match      100
    prefix match      80
    substring match   60
    otherwise         max(0, 40 - 40 * distance / longest_length)
"""

from typing import List

EXACT_SCORE = 100.0
PREFIX_SCORE = 80.0
SUBSTRING_SCORE = 60.0
FUZZY_CEILING = 40.0


def levenshtein(a: str, b: str) -> int:
    """
    Edit distance with unit-cost insert, delete and substitute.

    Two-row dynamic program: O(len(a) * len(b)) time, O(len(a)) memory.

    Example:
        >>> levenshtein("kitten", "sitting")
        3
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous: List[int] = list(range(len(a) + 1))
    for j, char_b in enumerate(b, start=1):
        current = [j] + [0] * len(a)
        for i, char_a in enumerate(a, start=1):
            substitution = 0 if char_a == char_b else 1
            current[i] = min(
                current[i - 1] + 1,               # insertion
                previous[i] + 1,                  # deletion
                previous[i - 1] + substitution,   # substitution
            )
        previous = current

    return previous[len(a)]


def relevance_score(candidate: str, fragment: str) -> float:
    """
    Score how well a candidate string matches a typed fragment.

    Args:
        candidate: Full candidate (namespace prefix or tag value)
        fragment: What the user typed

    Returns:
        Score in [0, 100]; higher is better
    """
    candidate_lower = candidate.lower()
    fragment_lower = fragment.lower()

    if candidate_lower == fragment_lower:
        return EXACT_SCORE
    if candidate_lower.startswith(fragment_lower):
        return PREFIX_SCORE
    if fragment_lower in candidate_lower:
        return SUBSTRING_SCORE

    distance = levenshtein(candidate_lower, fragment_lower)
    longest = max(len(candidate_lower), len(fragment_lower))
    return max(0.0, FUZZY_CEILING - FUZZY_CEILING * distance / longest)
