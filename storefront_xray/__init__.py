"""Filter-and-rank engine for the sports storefront, with X-Ray decision tracing."""

from .catalog import CatalogProvider, GeneratedCatalog, StaticCatalog, facet_values
from .engine import FilterEngine, execute
from .evaluator import evaluate
from .exceptions import (
    ClosedExecutionError,
    InvalidCriteriaError,
    StorefrontError,
    UnknownExecutionError,
)
from .models import (
    CheckResult,
    Decision,
    EntryKind,
    ExecutionResult,
    FilterCriteria,
    Product,
    RankedProduct,
    ScoreBreakdown,
    Trace,
)
from .scoring import score_product, tokenize
from .session import StorefrontSession
from .trace_sink import TraceSink

__all__ = [
    "CatalogProvider",
    "CheckResult",
    "ClosedExecutionError",
    "Decision",
    "EntryKind",
    "ExecutionResult",
    "FilterCriteria",
    "FilterEngine",
    "GeneratedCatalog",
    "InvalidCriteriaError",
    "Product",
    "RankedProduct",
    "ScoreBreakdown",
    "StaticCatalog",
    "StorefrontError",
    "StorefrontSession",
    "Trace",
    "TraceSink",
    "UnknownExecutionError",
    "evaluate",
    "execute",
    "facet_values",
    "score_product",
    "tokenize",
]
