
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
from fastapi.middleware.cors import CORSMiddleware

from storefront_xray import (
    EntryKind,
    FilterCriteria,
    FilterEngine,
    GeneratedCatalog,
    InvalidCriteriaError,
    StorefrontSession,
    TraceSink,
    UnknownExecutionError,
    facet_values,
)
from storefront_xray.models import ExecutionResult
from storefront_xray.utils import (
    serialize_criteria,
    serialize_entries,
    serialize_entry,
    serialize_product,
    serialize_ranked,
    to_dict,
)

app = FastAPI(title="Slam Sports X-Ray")

# Enable CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify the exact origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class FilterRequest(BaseModel):
    search: str = ""
    sports: List[str] = Field(default_factory=list)
    brands: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    ratings: List[int] = Field(default_factory=list)


# Shared session over the generated catalog
# Note: one storefront view for the whole process, as in the single-page demo.
sink = TraceSink()
catalog = GeneratedCatalog()
session = StorefrontSession(FilterEngine(catalog, sink))


def _execution_payload(result: ExecutionResult) -> dict:
    return {
        "execution_id": result.trace.execution_id,
        "criteria": serialize_criteria(result.trace.criteria),
        "results": [serialize_ranked(r) for r in result.results],
        "summary": serialize_entry(result.trace.summary),
    }


@app.get("/catalog")
async def get_catalog():
    products = catalog.get_catalog()
    return {
        "products": [serialize_product(p) for p in products],
        "facets": facet_values(products),
    }


@app.post("/filters/apply")
def apply_filters(request: FilterRequest):
    try:
        criteria = FilterCriteria(
            search=request.search,
            sports=request.sports,
            brands=request.brands,
            categories=request.categories,
            ratings=request.ratings,
        )
    except InvalidCriteriaError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _execution_payload(session.apply(criteria))


@app.post("/filters/reset")
def reset_filters():
    return _execution_payload(session.reset())


@app.get("/filters/active")
def active_filters():
    return {
        "criteria": serialize_criteria(session.active_criteria),
        "results": [serialize_ranked(r) for r in session.results],
    }


@app.get("/xray/events")
def list_events(kind: Optional[EntryKind] = None, q: Optional[str] = None, limit: int = Query(200, ge=1)):
    entries = sink.entries(kind=kind, text=q)
    return {"total": len(entries), "events": serialize_entries(entries[:limit])}


@app.delete("/xray/events")
def clear_events():
    sink.clear()
    return {"status": "cleared"}


@app.get("/xray/stats")
def xray_stats():
    stats = sink.stats()
    return {**stats, "recent_failures": serialize_entries(stats["recent_failures"])}


@app.get("/xray/executions")
def list_executions():
    groups = sink.grouped_by_execution()
    return {
        "executions": [
            {"group_id": key, "entry_count": len(entries), "kinds": sorted({e.kind.value for e in entries})}
            for key, entries in groups.items()
        ]
    }


@app.get("/xray/executions/{execution_id}")
def get_execution(execution_id: str):
    try:
        stats = sink.execution_stats(execution_id)
        entries = sink.execution_entries(execution_id)
    except UnknownExecutionError as e:
        raise HTTPException(status_code=404, detail=str(e))
    stats["filters"] = {name: to_dict(tally) for name, tally in stats["filters"].items()}
    return {"stats": stats, "events": serialize_entries(entries)}


@app.get("/")
async def root():
    return {"status": "Slam Sports X-Ray API is running", "docs": "/docs"}

@app.get("/health")
async def health_check():
    return {"status": "ok"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
