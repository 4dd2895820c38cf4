"""
Menu Keyword Extraction
=======================

Ranks menu terms by how many reviews mention them.

COUNTING RULE:
- Matching is case-insensitive substring containment
- A review adds at most 1 to a term, however often it repeats the term
- Terms nobody mentions are left out of the result

Example:
    >>> extract_keywords(
    ...     [{"text": "Great matcha latte and matcha cake"}, {"text": "Loved the tiramisu"}],
    ...     ["matcha", "sandwich", "tiramisu"],
    ... )
    ['matcha', 'tiramisu']
"""

from typing import Any, Dict, Iterable, List, Sequence

from .fields import get_field

DEFAULT_MENU_KEYWORDS = ("matcha", "sandwich", "tiramisu")


def _normalize_vocabulary(vocabulary: Iterable[str]) -> List[str]:
    """Lowercase the terms, dropping empty and duplicate ones but keeping order.

    Whitespace is part of a term, so " pie" only matches after a space.
    """
    terms: List[str] = []
    for term in vocabulary:
        term = (term or "").lower()
        if term and term not in terms:
            terms.append(term)
    return terms


def count_keywords(reviews: Iterable[Any], vocabulary: Sequence[str]) -> Dict[str, int]:
    """
    Count, per term, the number of reviews whose text contains it.

    The returned dict is ordered by the first review in which each term
    matched; terms with no matches are absent.
    """
    terms = _normalize_vocabulary(vocabulary)
    counts: Dict[str, int] = {}

    for review in reviews:
        text = get_field(review, "text")
        if not text or not isinstance(text, str):
            continue

        comment = text.lower()
        for term in terms:
            if term in comment:
                counts[term] = counts.get(term, 0) + 1

    return counts


def extract_keywords(reviews: Iterable[Any], vocabulary: Sequence[str]) -> List[str]:
    """Return the matched terms, most-mentioned first (ties keep first-match order)."""
    counts = count_keywords(reviews, vocabulary)
    # sorted() is stable, so equal counts keep insertion order
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [term for term, _ in ranked]
