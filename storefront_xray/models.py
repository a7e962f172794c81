# Data models for catalog filtering and X-Ray tracing.
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, Iterable, NamedTuple, Optional, Tuple, Union

from .config import MAX_RATING, MIN_RATING
from .exceptions import InvalidCriteriaError


@dataclass(frozen=True)
class Product:
    """Catalog product. Owned by the catalog provider, read-only everywhere else."""
    id: str
    name: str
    brand: str
    sport: str
    category: str
    price: float
    rating: int
    reviews: int
    image: Optional[str] = None  # placeholder image URL, display only


def _label_set(field_name: str, values: Iterable[str]) -> FrozenSet[str]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InvalidCriteriaError(field_name, f"expected a collection of labels, got {type(values).__name__}")
    try:
        labels = frozenset(values)
    except TypeError as e:
        raise InvalidCriteriaError(field_name, str(e)) from e
    for label in labels:
        if not isinstance(label, str):
            raise InvalidCriteriaError(field_name, f"label {label!r} is not a string")
    return labels


def _rating_set(values: Iterable[int]) -> FrozenSet[int]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InvalidCriteriaError("ratings", f"expected a collection of integers, got {type(values).__name__}")
    try:
        ratings = frozenset(values)
    except TypeError as e:
        raise InvalidCriteriaError("ratings", str(e)) from e
    for rating in ratings:
        # bool is an int subclass but never a star rating
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise InvalidCriteriaError("ratings", f"rating {rating!r} is not an integer")
        if not MIN_RATING <= rating <= MAX_RATING:
            raise InvalidCriteriaError("ratings", f"rating {rating} outside {MIN_RATING}-{MAX_RATING}")
    return ratings


@dataclass(frozen=True)
class FilterCriteria:
    """Active sidebar filters for one filter-apply action.

    Empty values mean "no constraint". Collections are normalized to
    frozensets; malformed values raise InvalidCriteriaError.
    """
    search: str = ""
    sports: FrozenSet[str] = frozenset()
    brands: FrozenSet[str] = frozenset()
    categories: FrozenSet[str] = frozenset()
    ratings: FrozenSet[int] = frozenset()

    def __post_init__(self) -> None:
        if not isinstance(self.search, str):
            raise InvalidCriteriaError("search", f"expected a string, got {type(self.search).__name__}")
        object.__setattr__(self, "sports", _label_set("sports", self.sports))
        object.__setattr__(self, "brands", _label_set("brands", self.brands))
        object.__setattr__(self, "categories", _label_set("categories", self.categories))
        object.__setattr__(self, "ratings", _rating_set(self.ratings))

    @property
    def has_search(self) -> bool:
        return self.search != ""

    @property
    def is_default(self) -> bool:
        return not (self.search or self.sports or self.brands or self.categories or self.ratings)

    @property
    def filter_count(self) -> int:
        """Number of selected filter values; a non-empty search counts as one."""
        return (
            (1 if self.search else 0)
            + len(self.sports)
            + len(self.brands)
            + len(self.categories)
            + len(self.ratings)
        )

    def describe(self) -> str:
        """Short human summary, e.g. 'search="run", sports=[Golf, Tennis]'."""
        parts = []
        if self.search:
            parts.append(f'search="{self.search}"')
        if self.sports:
            parts.append(f"sports=[{', '.join(sorted(self.sports))}]")
        if self.brands:
            parts.append(f"brands=[{', '.join(sorted(self.brands))}]")
        if self.categories:
            parts.append(f"categories=[{', '.join(sorted(self.categories))}]")
        if self.ratings:
            stars = ", ".join(str(r) for r in sorted(self.ratings, reverse=True))
            parts.append(f"ratings=[{stars} stars]")
        return ", ".join(parts)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-field relevance of one product against the search terms."""
    name_score: float
    brand_score: float
    sport_score: float
    category_score: float
    total_score: float
    max_possible_score: float
    match_percentage: float
    matched_term_count: int
    search_terms: Tuple[str, ...]


@dataclass(frozen=True)
class SearchCheckDetails:
    search_terms: Tuple[str, ...]
    score_breakdown: ScoreBreakdown
    match_quality: str  # "high" | "medium" | "low"


@dataclass(frozen=True)
class MembershipCheckDetails:
    """Details for sport/brand/category/rating set-membership checks."""
    criterion: str
    product_value: Union[str, int]
    selected: Tuple[Union[str, int], ...]


CheckDetails = Union[SearchCheckDetails, MembershipCheckDetails]


class CheckMap(dict):
    """Read-only mapping of criterion name to CheckResult."""

    def _readonly(self, *args, **kwargs):
        raise TypeError("checks are read-only once evaluated")

    __setitem__ = __delitem__ = __ior__ = _readonly
    clear = pop = popitem = setdefault = update = _readonly


@dataclass(frozen=True)
class CheckResult:
    passed: bool
    reason: str
    details: CheckDetails


@dataclass(frozen=True)
class Decision:
    """Evaluation of one product within one execution."""
    product: Product
    passed: bool
    score: float
    checks: Dict[str, CheckResult] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "checks", CheckMap(self.checks))

    @property
    def failed_checks(self) -> Tuple[str, ...]:
        return tuple(name for name, check in self.checks.items() if not check.passed)

    @property
    def score_breakdown(self) -> Optional[ScoreBreakdown]:
        search = self.checks.get("search")
        if search is None:
            return None
        return search.details.score_breakdown


@dataclass(frozen=True)
class RankedProduct:
    """A product that passed, with its 1-based position in the results."""
    product: Product
    score: float
    rank: int


@dataclass(frozen=True)
class CheckTally:
    passed: int = 0
    failed: int = 0


class EntryKind(str, Enum):
    FILTER_APPLIED = "FILTER_APPLIED"
    SEARCH_EXECUTED = "SEARCH_EXECUTED"
    PRODUCT_PASSED = "PRODUCT_PASSED"
    PRODUCT_FILTERED = "PRODUCT_FILTERED"
    FILTER_RESET = "FILTER_RESET"


@dataclass(frozen=True)
class TraceEntry:
    """Base X-Ray entry. Subclasses fix the payload schema for each kind."""
    kind: ClassVar[EntryKind]

    entry_id: str
    execution_id: Optional[str]
    timestamp: float  # epoch seconds
    reason: str


@dataclass(frozen=True)
class ProductPassedEntry(TraceEntry):
    kind: ClassVar[EntryKind] = EntryKind.PRODUCT_PASSED

    product: Product
    checks: Dict[str, CheckResult]
    rank: int
    score: float
    score_breakdown: Optional[ScoreBreakdown] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "checks", CheckMap(self.checks))


@dataclass(frozen=True)
class ProductFilteredEntry(TraceEntry):
    kind: ClassVar[EntryKind] = EntryKind.PRODUCT_FILTERED

    product: Product
    checks: Dict[str, CheckResult]
    failed_checks: Tuple[str, ...]
    score: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "checks", CheckMap(self.checks))


@dataclass(frozen=True)
class ExecutionSummaryEntry(TraceEntry):
    kind: ClassVar[EntryKind] = EntryKind.SEARCH_EXECUTED

    duration_ms: float
    total_products: int
    passed_count: int
    filtered_count: int
    total_checks: int
    average_checks_per_product: float
    average_score: float
    top_score: float
    filter_stats: Dict[str, CheckTally]


@dataclass(frozen=True)
class FilterAppliedEntry(TraceEntry):
    kind: ClassVar[EntryKind] = EntryKind.FILTER_APPLIED

    criteria: FilterCriteria
    filter_count: int


@dataclass(frozen=True)
class FilterResetEntry(TraceEntry):
    kind: ClassVar[EntryKind] = EntryKind.FILTER_RESET

    previous_criteria: FilterCriteria


@dataclass(frozen=True)
class Trace:
    """Complete audit of one execution, written to the sink exactly once."""
    execution_id: str
    criteria: FilterCriteria
    entries: Tuple[Union[ProductPassedEntry, ProductFilteredEntry], ...]
    summary: ExecutionSummaryEntry

    @property
    def passed_entries(self) -> Tuple[ProductPassedEntry, ...]:
        return tuple(e for e in self.entries if isinstance(e, ProductPassedEntry))

    @property
    def filtered_entries(self) -> Tuple[ProductFilteredEntry, ...]:
        return tuple(e for e in self.entries if isinstance(e, ProductFilteredEntry))

    def all_entries(self) -> Tuple[TraceEntry, ...]:
        return (*self.entries, self.summary)


class ExecutionResult(NamedTuple):
    results: Tuple[RankedProduct, ...]
    trace: Trace
