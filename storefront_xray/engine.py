"""Filter-and-rank execution engine.

Provides:
- FilterEngine: runs one execution per filter-apply action against a catalog provider
- execute(): the same pipeline over an explicit catalog sequence

One execution evaluates every product, keeps the passing ones, ranks them
by search score (stable on ties) and writes a complete, immutable trace to
the sink.
"""

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .catalog import CatalogProvider
from .evaluator import CRITERIA, evaluate
from .exceptions import InvalidCriteriaError
from .models import (
    CheckTally,
    Decision,
    ExecutionResult,
    ExecutionSummaryEntry,
    FilterCriteria,
    Product,
    ProductFilteredEntry,
    ProductPassedEntry,
    RankedProduct,
    Trace,
    TraceEntry,
)
from .scoring import tokenize
from .trace_sink import TraceSink
from .utils import new_id

logger = logging.getLogger(__name__)


def _passed_reason(decision: Decision, rank: int, ranked_by_search: bool) -> str:
    name = decision.product.name
    breakdown = decision.score_breakdown
    if ranked_by_search and breakdown is not None:
        return (
            f'Rank #{rank}: "{name}" scored {decision.score:.2f} points '
            f"({breakdown.match_percentage:.1f}% match)"
        )
    return f'Product "{name}" passed all {len(decision.checks)} filter checks (Rank: #{rank}, Score: {decision.score:g})'


def _filtered_reason(decision: Decision) -> str:
    p = decision.product
    failures = "; ".join(
        f"{name}: {check.reason}" for name, check in decision.checks.items() if not check.passed
    )
    reason = f'Product "{p.name}" ({p.brand}, ${p.price:g}) filtered out: {failures}'
    if "search" in decision.checks:
        reason += f" (Match Score: {decision.score:g})"
    return reason


def _filter_stats(decisions: Sequence[Decision]) -> Dict[str, CheckTally]:
    counts = {}
    for decision in decisions:
        for name, check in decision.checks.items():
            passed, failed = counts.get(name, (0, 0))
            counts[name] = (passed + 1, failed) if check.passed else (passed, failed + 1)
    return {
        name: CheckTally(passed=counts[name][0], failed=counts[name][1])
        for name in CRITERIA
        if name in counts
    }


def rank_results(decisions: Sequence[Decision], by_score: bool) -> List[Tuple[RankedProduct, Decision]]:
    """Keep passing decisions and assign 1-based ranks.

    With by_score the list is sorted by descending score; sorted() is stable,
    so ties keep catalog order.
    """
    passed = [d for d in decisions if d.passed]
    if by_score:
        passed = sorted(passed, key=lambda d: d.score, reverse=True)
    return [
        (RankedProduct(product=d.product, score=d.score, rank=i), d)
        for i, d in enumerate(passed, start=1)
    ]


def execute(
    catalog: Sequence[Product],
    criteria: FilterCriteria,
    sink: Optional[TraceSink] = None,
    clock: Callable[[], float] = time.perf_counter,
) -> ExecutionResult:
    """Run one filter-apply execution over catalog.

    Returns the ranked results and the execution's trace. When a sink is
    given, the trace is appended to it (passed entries in rank order,
    filtered entries in catalog order, then the summary) and the execution
    is closed.
    """
    if not isinstance(criteria, FilterCriteria):
        raise InvalidCriteriaError("criteria", f"expected FilterCriteria, got {type(criteria).__name__}")

    execution_id = new_id("exec")
    started = clock()
    search_terms = tokenize(criteria.search)
    ranked_by_search = criteria.search != ""

    decisions = [evaluate(p, criteria, search_terms) for p in catalog]
    ranked = rank_results(decisions, by_score=ranked_by_search)

    entries = []
    for result, decision in ranked:
        entries.append(
            ProductPassedEntry(
                entry_id=new_id("xray"),
                execution_id=execution_id,
                timestamp=time.time(),
                reason=_passed_reason(decision, result.rank, ranked_by_search),
                product=decision.product,
                checks=decision.checks,
                rank=result.rank,
                score=decision.score,
                score_breakdown=decision.score_breakdown,
            )
        )
    for decision in decisions:
        if decision.passed:
            continue
        entries.append(
            ProductFilteredEntry(
                entry_id=new_id("xray"),
                execution_id=execution_id,
                timestamp=time.time(),
                reason=_filtered_reason(decision),
                product=decision.product,
                checks=decision.checks,
                failed_checks=decision.failed_checks,
                score=decision.score,
            )
        )

    duration_ms = (clock() - started) * 1000
    results = tuple(result for result, _ in ranked)
    summary = _summarize(execution_id, decisions, results, duration_ms)
    trace = Trace(
        execution_id=execution_id,
        criteria=criteria,
        entries=tuple(entries),
        summary=summary,
    )

    if sink is not None:
        sink.append_trace(trace)

    logger.info(
        "Execution %s: %d/%d products passed in %.2fms",
        execution_id, len(results), len(decisions), duration_ms,
    )
    return ExecutionResult(results=results, trace=trace)


def _summarize(
    execution_id: str,
    decisions: Sequence[Decision],
    results: Sequence[RankedProduct],
    duration_ms: float,
) -> ExecutionSummaryEntry:
    total_checks = sum(len(d.checks) for d in decisions)
    scores = [r.score for r in results]
    return ExecutionSummaryEntry(
        entry_id=new_id("xray"),
        execution_id=execution_id,
        timestamp=time.time(),
        reason=(
            f"Filter execution completed: {len(results)}/{len(decisions)} "
            f"products passed in {duration_ms:.2f}ms"
        ),
        duration_ms=duration_ms,
        total_products=len(decisions),
        passed_count=len(results),
        filtered_count=len(decisions) - len(results),
        total_checks=total_checks,
        average_checks_per_product=total_checks / len(decisions) if decisions else 0.0,
        average_score=sum(scores) / len(scores) if scores else 0.0,
        top_score=max(scores) if scores else 0.0,
        filter_stats=_filter_stats(decisions),
    )


class FilterEngine:
    """Filter-apply entry point bound to a catalog provider and a trace sink."""

    def __init__(
        self,
        catalog: CatalogProvider,
        sink: Optional[TraceSink] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.catalog = catalog
        self.sink = sink if sink is not None else TraceSink()
        self._clock = clock

    def execute(self, criteria: FilterCriteria, preceding: Optional[TraceEntry] = None) -> ExecutionResult:
        """Run one execution and write its trace to the sink.

        preceding (e.g. the user action that triggered the run) is written
        just before the trace. Nothing reaches the sink if the catalog
        provider or the execution raises.
        """
        if not isinstance(criteria, FilterCriteria):
            raise InvalidCriteriaError("criteria", f"expected FilterCriteria, got {type(criteria).__name__}")
        products = self.catalog.get_catalog()
        logger.debug("Applying filters [%s] to %d products", criteria.describe() or "none", len(products))
        result = execute(products, criteria, clock=self._clock)
        if preceding is not None:
            self.sink.append(preceding)
        self.sink.append_trace(result.trace)
        return result
