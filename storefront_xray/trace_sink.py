"""In-memory X-Ray event log.

The sink retains at most max_entries entries; when full, the oldest entry
is evicted to make room. Eviction is the only way entries are lost, and a
completed execution may therefore be only partially present. Consumers
group entries by execution_id.
"""

import logging
import threading
from collections import OrderedDict, deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from .config import MAX_TRACE_ENTRIES, RECENT_FAILURES_LIMIT
from .exceptions import ClosedExecutionError, UnknownExecutionError
from .models import (
    CheckTally,
    EntryKind,
    ExecutionSummaryEntry,
    Trace,
    TraceEntry,
)
from .utils import serialize_entry

logger = logging.getLogger(__name__)

Listener = Callable[[Tuple[TraceEntry, ...]], None]


class TraceSink:
    """Bounded, append-only log of trace entries with change notification."""

    def __init__(self, max_entries: int = MAX_TRACE_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._entries: Deque[TraceEntry] = deque()
        self._listeners: List[Listener] = []
        # Every execution leaves at least its summary in the buffer, so
        # remembering max_entries closed ids covers all that can still appear.
        self._closed: "OrderedDict[str, None]" = OrderedDict()
        self._evicted = 0
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def evicted_count(self) -> int:
        return self._evicted

    def append(self, entry: TraceEntry) -> None:
        with self._lock:
            if entry.execution_id is not None and entry.execution_id in self._closed:
                raise ClosedExecutionError(entry.execution_id)
            self._push(entry)
            snapshot = tuple(self._entries)
        self._notify(snapshot)

    def append_trace(self, trace: Trace) -> None:
        """Append a whole execution's entries, then close the execution."""
        with self._lock:
            if trace.execution_id in self._closed:
                raise ClosedExecutionError(trace.execution_id)
            for entry in trace.all_entries():
                self._push(entry)
            self._close(trace.execution_id)
            snapshot = tuple(self._entries)
        self._notify(snapshot)

    def _push(self, entry: TraceEntry) -> None:
        if len(self._entries) >= self.max_entries:
            evicted = self._entries.popleft()
            self._evicted += 1
            if self._evicted == 1:
                logger.warning(
                    "X-Ray sink reached capacity (%d entries); evicting oldest entries",
                    self.max_entries,
                )
            else:
                logger.debug("Evicted entry %s (%s)", evicted.entry_id, evicted.kind.value)
        self._entries.append(entry)

    def _close(self, execution_id: str) -> None:
        self._closed[execution_id] = None
        while len(self._closed) > self.max_entries:
            self._closed.popitem(last=False)

    def _notify(self, snapshot: Tuple[TraceEntry, ...]) -> None:
        for listener in list(self._listeners):
            listener(snapshot)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener; it receives all retained entries after every change.

        Returns a function that unsubscribes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._evicted = 0
            snapshot: Tuple[TraceEntry, ...] = ()
        self._notify(snapshot)

    def entries(
        self,
        kind: Optional[EntryKind] = None,
        text: Optional[str] = None,
        newest_first: bool = True,
    ) -> List[TraceEntry]:
        """Retained entries, optionally filtered by kind and a case-insensitive text match.

        The text is matched against the entry reason and its serialized payload.
        """
        with self._lock:
            items = list(self._entries)
        if kind is not None:
            items = [e for e in items if e.kind == kind]
        if text:
            needle = text.lower()
            items = [
                e for e in items
                if needle in e.reason.lower() or needle in str(serialize_entry(e)).lower()
            ]
        if newest_first:
            items.reverse()
        return items

    def stats(self) -> Dict[str, object]:
        with self._lock:
            items = list(self._entries)
        counts_by_kind: Dict[str, int] = {}
        for entry in items:
            counts_by_kind[entry.kind.value] = counts_by_kind.get(entry.kind.value, 0) + 1
        failures = [e for e in reversed(items) if e.kind == EntryKind.PRODUCT_FILTERED]
        return {
            "total_entries": len(items),
            "counts_by_kind": counts_by_kind,
            "recent_failures": failures[:RECENT_FAILURES_LIMIT],
            "evicted": self._evicted,
        }

    def grouped_by_execution(self) -> "OrderedDict[str, List[TraceEntry]]":
        """Entries grouped by execution id, newest group first.

        Entries without an execution (filter applied/reset) form their own
        single-entry group keyed by entry id.
        """
        groups: "OrderedDict[str, List[TraceEntry]]" = OrderedDict()
        for entry in self.entries(newest_first=True):
            key = entry.execution_id or entry.entry_id
            groups.setdefault(key, []).append(entry)
        return groups

    def execution_entries(self, execution_id: str) -> List[TraceEntry]:
        with self._lock:
            items = [e for e in self._entries if e.execution_id == execution_id]
        if not items:
            raise UnknownExecutionError(execution_id)
        return items

    def execution_stats(self, execution_id: str) -> Dict[str, object]:
        """Pass/fail counts, duration and per-criterion tallies for one execution."""
        items = self.execution_entries(execution_id)
        passed = sum(1 for e in items if e.kind == EntryKind.PRODUCT_PASSED)
        filtered = sum(1 for e in items if e.kind == EntryKind.PRODUCT_FILTERED)

        tallies: Dict[str, CheckTally] = {}
        duration_ms = 0.0
        for entry in items:
            if isinstance(entry, ExecutionSummaryEntry):
                duration_ms = entry.duration_ms
            for name, check in getattr(entry, "checks", {}).items():
                tally = tallies.get(name, CheckTally())
                if check.passed:
                    tallies[name] = CheckTally(passed=tally.passed + 1, failed=tally.failed)
                else:
                    tallies[name] = CheckTally(passed=tally.passed, failed=tally.failed + 1)

        return {
            "execution_id": execution_id,
            "total_entries": len(items),
            "passed": passed,
            "filtered": filtered,
            "duration_ms": duration_ms,
            "filters": tallies,
            "timestamp": items[0].timestamp,
        }
