"""Per-product filter evaluation.

Only criteria with a non-empty value are checked and recorded in the
Decision; a product passes when every recorded check passes.
"""

from typing import Dict, Iterable, Optional, Tuple, Union

from .config import HIGH_MATCH_THRESHOLD, MEDIUM_MATCH_THRESHOLD
from .models import (
    CheckResult,
    Decision,
    FilterCriteria,
    MembershipCheckDetails,
    Product,
    SearchCheckDetails,
)
from .scoring import score_product, tokenize

# Checks are recorded in this order.
CRITERIA = ("search", "sport", "brand", "category", "rating")
_PLURALS = {"sport": "sports", "brand": "brands", "category": "categories"}


def match_quality(match_percentage: float) -> str:
    if match_percentage >= HIGH_MATCH_THRESHOLD:
        return "high"
    if match_percentage >= MEDIUM_MATCH_THRESHOLD:
        return "medium"
    return "low"


def check_search(product: Product, search_terms: Tuple[str, ...]) -> CheckResult:
    breakdown = score_product(product, search_terms)
    # At least one term found anywhere; no percentage threshold.
    passed = breakdown.matched_term_count > 0
    if passed:
        reason = (
            f"Matched {breakdown.matched_term_count}/{len(search_terms)} search terms "
            f"with score {breakdown.total_score:.1f} ({breakdown.match_percentage:.1f}% relevance). "
            f"Name: {breakdown.name_score:.1f}, Brand: {breakdown.brand_score:.1f}, "
            f"Sport: {breakdown.sport_score:.1f}, Category: {breakdown.category_score:.1f}"
        )
    else:
        quoted = '", "'.join(search_terms)
        reason = f'Failed: No matches found for search terms: "{quoted}"'
    return CheckResult(
        passed=passed,
        reason=reason,
        details=SearchCheckDetails(
            search_terms=search_terms,
            score_breakdown=breakdown,
            match_quality=match_quality(breakdown.match_percentage),
        ),
    )


def _display(values: Iterable[Union[str, int]]) -> Tuple[Union[str, int], ...]:
    return tuple(sorted(values))


def check_membership(criterion: str, value: str, selected: Iterable[str]) -> CheckResult:
    """Exact, case-sensitive label membership for sport/brand/category."""
    selected = _display(selected)
    label = criterion.capitalize()
    passed = value in selected
    if passed:
        reason = f'{label} "{value}" is in selected {_PLURALS[criterion]} filter'
    else:
        reason = f'Failed: {label} "{value}" not in [{", ".join(selected)}]'
    return CheckResult(
        passed=passed,
        reason=reason,
        details=MembershipCheckDetails(criterion=criterion, product_value=value, selected=selected),
    )


def check_rating(rating: int, selected: Iterable[int]) -> CheckResult:
    selected = _display(selected)
    passed = rating in selected
    if passed:
        reason = f"Rating {rating} stars is in selected ratings filter"
    else:
        reason = f"Failed: Rating {rating} stars not in [{', '.join(str(r) for r in selected)} stars]"
    return CheckResult(
        passed=passed,
        reason=reason,
        details=MembershipCheckDetails(criterion="rating", product_value=rating, selected=selected),
    )


def evaluate(
    product: Product,
    criteria: FilterCriteria,
    search_terms: Optional[Tuple[str, ...]] = None,
) -> Decision:
    """Evaluate one product against the active criteria.

    search_terms may be passed in pre-tokenized to avoid re-splitting the
    search string for every product of an execution.
    """
    if search_terms is None:
        search_terms = tokenize(criteria.search)

    checks: Dict[str, CheckResult] = {}
    score = 0.0

    if search_terms:
        search_check = check_search(product, search_terms)
        checks["search"] = search_check
        score = search_check.details.score_breakdown.total_score
    if criteria.sports:
        checks["sport"] = check_membership("sport", product.sport, criteria.sports)
    if criteria.brands:
        checks["brand"] = check_membership("brand", product.brand, criteria.brands)
    if criteria.categories:
        checks["category"] = check_membership("category", product.category, criteria.categories)
    if criteria.ratings:
        checks["rating"] = check_rating(product.rating, criteria.ratings)

    return Decision(
        product=product,
        passed=all(c.passed for c in checks.values()),
        score=score,
        checks=checks,
    )
