"""Storefront browsing session.

Holds the filters currently applied to the product grid and records user
filter actions in the X-Ray log before each execution runs.

Entry points: StorefrontSession.apply(), StorefrontSession.reset()
"""

import logging
import time
from typing import Optional, Tuple

from .engine import FilterEngine
from .models import (
    ExecutionResult,
    FilterAppliedEntry,
    FilterCriteria,
    FilterResetEntry,
    RankedProduct,
    Trace,
)
from .utils import new_id

logger = logging.getLogger(__name__)


class StorefrontSession:
    """One shopper's view: active filters plus the last execution's results."""

    def __init__(self, engine: FilterEngine) -> None:
        self.engine = engine
        self.active_criteria = FilterCriteria()
        self._last: Optional[ExecutionResult] = None

    @property
    def sink(self):
        return self.engine.sink

    @property
    def results(self) -> Tuple[RankedProduct, ...]:
        """Current product grid; the unfiltered catalog before any action."""
        if self._last is None:
            self._last = self.engine.execute(self.active_criteria)
        return self._last.results

    @property
    def last_trace(self) -> Optional[Trace]:
        return self._last.trace if self._last is not None else None

    def apply(self, criteria: FilterCriteria) -> ExecutionResult:
        """Run criteria and make them active; the action is logged only if the run succeeds."""
        count = criteria.filter_count
        summary = criteria.describe()
        applied = FilterAppliedEntry(
            entry_id=new_id("xray"),
            execution_id=None,
            timestamp=time.time(),
            reason=f"User applied {count} filter(s): {summary}",
            criteria=criteria,
            filter_count=count,
        )
        logger.info("Applying %d filter(s): %s", count, summary or "none")
        result = self.engine.execute(criteria, preceding=applied)
        self.active_criteria = criteria
        self._last = result
        return result

    def reset(self) -> ExecutionResult:
        """Clear every filter and show the whole catalog, logging the reset on success."""
        previous = self.active_criteria
        reset = FilterResetEntry(
            entry_id=new_id("xray"),
            execution_id=None,
            timestamp=time.time(),
            reason="User reset all filters to default state",
            previous_criteria=previous,
        )
        logger.info("Resetting filters (were: %s)", previous.describe() or "none")
        default = FilterCriteria()
        result = self.engine.execute(default, preceding=reset)
        self.active_criteria = default
        self._last = result
        return result
