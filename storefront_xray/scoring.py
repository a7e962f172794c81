"""Search relevance scoring.

Each search term is compared against the product's name, brand, sport and
category. A whole-word match earns the field's full weight, a substring
match earns half of it. Whether a product passes the search check is
decided by matched_term_count, not by the score.
"""

from typing import Dict, Sequence, Tuple

from .config import FIELD_WEIGHTS, PARTIAL_MATCH_FACTOR
from .models import Product, ScoreBreakdown

SCORED_FIELDS = ("name", "brand", "sport", "category")


def tokenize(text: str) -> Tuple[str, ...]:
    """Lowercase and split a search string on whitespace, dropping empty tokens."""
    return tuple(t for t in text.lower().split() if t)


def _field_values(product: Product) -> Dict[str, str]:
    return {f: getattr(product, f).lower() for f in SCORED_FIELDS}


def _term_weight(term: str, value: str, weight: float) -> float:
    if term in value.split():
        return weight
    if term in value:
        return weight * PARTIAL_MATCH_FACTOR
    return 0.0


def max_possible_score(term_count: int, weights: Dict[str, float] = FIELD_WEIGHTS) -> float:
    return term_count * sum(weights[f] for f in SCORED_FIELDS)


def score_product(
    product: Product,
    search_terms: Sequence[str],
    weights: Dict[str, float] = FIELD_WEIGHTS,
) -> ScoreBreakdown:
    """Score one product against lowercase, non-empty search terms."""
    terms = tuple(search_terms)
    if not terms:
        return ScoreBreakdown(
            name_score=0.0,
            brand_score=0.0,
            sport_score=0.0,
            category_score=0.0,
            total_score=0.0,
            max_possible_score=0.0,
            match_percentage=0.0,
            matched_term_count=0,
            search_terms=(),
        )

    values = _field_values(product)
    field_scores = {f: 0.0 for f in SCORED_FIELDS}
    for term in terms:
        for f in SCORED_FIELDS:
            field_scores[f] += _term_weight(term, values[f], weights[f])

    total = sum(field_scores.values())
    max_score = max_possible_score(len(terms), weights)
    # A term counts as matched if any field contains it, even mid-word.
    matched = len({t for t in terms if any(t in v for v in values.values())})

    return ScoreBreakdown(
        name_score=field_scores["name"],
        brand_score=field_scores["brand"],
        sport_score=field_scores["sport"],
        category_score=field_scores["category"],
        total_score=total,
        max_possible_score=max_score,
        match_percentage=total / max_score * 100 if max_score else 0.0,
        matched_term_count=matched,
        search_terms=terms,
    )
