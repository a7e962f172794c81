"""Utility functions for ids and JSON-friendly serialization."""
import time
import uuid
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Tuple

from .catalog import placeholder_image
from .models import FilterCriteria, Product, RankedProduct, TraceEntry


def new_id(prefix: str) -> str:
    """Time-prefixed unique id, e.g. 'exec-1718000000000-3f9a1c2b7'."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"


def _plain(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    if isinstance(value, tuple):
        return list(value)
    return value


def _json_dict(pairs: Iterable[Tuple[str, Any]]) -> Dict[str, Any]:
    return {key: _plain(value) for key, value in pairs}


def to_dict(obj: Any) -> Dict[str, Any]:
    """dataclasses.asdict with sets sorted into lists and tuples as lists."""
    return asdict(obj, dict_factory=_json_dict)


def serialize_product(p: Product) -> Dict[str, Any]:
    data = to_dict(p)
    # Products from custom catalogs may not carry an image.
    if not data.get("image"):
        data["image"] = placeholder_image(p.sport, p.category)
    return data


def serialize_ranked(r: RankedProduct) -> Dict[str, Any]:
    return {**serialize_product(r.product), "score": r.score, "rank": r.rank}


def serialize_criteria(c: FilterCriteria) -> Dict[str, Any]:
    return to_dict(c)


def serialize_entry(entry: TraceEntry) -> Dict[str, Any]:
    """Flatten a trace entry and tag it with its kind."""
    return {"kind": entry.kind.value, **to_dict(entry)}


def serialize_entries(entries: Iterable[TraceEntry]) -> List[Dict[str, Any]]:
    return [serialize_entry(e) for e in entries]
