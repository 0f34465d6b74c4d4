# veris_search/api/filters.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from veris_search.api.deps import get_service, require_debug_access
from veris_search.api.schemas import ErrorOut, FilterCatalogOut
from veris_search.incidents.service import CatalogFailed, IncidentSearchService

router = APIRouter(tags=["filters"])


@router.get("/filters", response_model=FilterCatalogOut, responses={500: {"model": ErrorOut}})
def list_filters(svc: IncidentSearchService = Depends(get_service)):
    # dropdown values for the front-end, deduplicated, store order
    try:
        return svc.catalog().to_dict()
    except CatalogFailed:
        return JSONResponse(status_code=500, content={"error": "Failed to load filters"})


@router.get(
    "/__distinct",
    response_model=FilterCatalogOut,
    responses={500: {"model": ErrorOut}},
    dependencies=[Depends(require_debug_access)],
)
def distinct_values(svc: IncidentSearchService = Depends(get_service)):
    try:
        return svc.catalog(sort=True).to_dict()
    except CatalogFailed as e:
        return JSONResponse(status_code=500, content={"error": e.details})
