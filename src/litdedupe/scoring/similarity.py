"""Field similarity functions.

Pure, deterministic functions mapping two field values to a normalized
similarity in [0, 1]. Strings are trimmed and lowercased before comparison so
that casing and stray whitespace never count as edits.
"""

from collections.abc import Sequence

__all__ = [
    "AUTHOR_MATCH_THRESHOLD",
    "levenshtein_distance",
    "list_similarity",
    "normalize_text",
    "string_similarity",
]

# An author in one list counts as present in the other above this similarity.
AUTHOR_MATCH_THRESHOLD = 0.8


def normalize_text(value: str) -> str:
    """Trim and lowercase a string for comparison."""
    return value.strip().lower()


def levenshtein_distance(a: str, b: str) -> int:
    """Compute the Levenshtein edit distance between two strings.

    Single-character insertions, deletions and substitutions each cost 1.
    Uses the two-row dynamic programming formulation.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    int
        Minimum number of edits turning ``a`` into ``b``.
    """
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    # Keep the inner row short
    if len(a) < len(b):
        a, b = b, a

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + cost,  # substitution
                )
            )
        previous = current

    return previous[-1]


def string_similarity(a: str, b: str) -> float:
    """Compute edit-distance similarity between two strings.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    float
        ``(max_len - distance) / max_len`` on the normalized strings.

    Notes
    -----
    **Edge cases**: two empty strings are vacuously identical (1.0); when
    exactly one is empty the result is 0.0.
    """
    norm_a = normalize_text(a)
    norm_b = normalize_text(b)

    max_len = max(len(norm_a), len(norm_b))
    if max_len == 0:
        return 1.0

    distance = levenshtein_distance(norm_a, norm_b)
    return (max_len - distance) / max_len


def list_similarity(a: Sequence[str], b: Sequence[str]) -> float:
    """Compute the fraction of matching elements between two string lists.

    Each element of ``a`` is matched against its most similar element of
    ``b``; it counts when that similarity exceeds
    ``AUTHOR_MATCH_THRESHOLD``.

    Parameters
    ----------
    a : Sequence[str]
        First list (e.g., authors of record A).
    b : Sequence[str]
        Second list.

    Returns
    -------
    float
        ``matched / max(len(a), len(b))``. Both empty gives 1.0, one empty
        gives 0.0.
    """
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0

    matched = 0
    for item_a in a:
        best = max(string_similarity(item_a, item_b) for item_b in b)
        if best > AUTHOR_MATCH_THRESHOLD:
            matched += 1

    return matched / max(len(a), len(b))
