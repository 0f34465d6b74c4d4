# veris_search/api/search.py
from __future__ import annotations

from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from veris_search.api.deps import get_service
from veris_search.api.schemas import SearchErrorOut
from veris_search.core.config import settings
from veris_search.incidents.query import SearchRequest
from veris_search.incidents.service import IncidentSearchService, SearchFailed

router = APIRouter(tags=["search"])

_MAX = settings.max_param_length


# -------------------------
# SEARCH INCIDENTS
# -------------------------
@router.get("/search", responses={500: {"model": SearchErrorOut}})
def search_incidents(
    q: Optional[str] = Query(default=None, max_length=_MAX, description="Free text, case-insensitive"),
    actor: Optional[str] = Query(default=None, max_length=_MAX, description="Actor variety"),
    action: Optional[str] = Query(default=None, max_length=_MAX, description="Action variety"),
    asset: Optional[str] = Query(default=None, max_length=_MAX, description="Asset variety"),
    limit: int = Query(default=settings.search_limit, ge=1, le=settings.search_limit),
    offset: int = Query(default=0, ge=0, le=10_000),
    svc: IncidentSearchService = Depends(get_service),
):
    req = SearchRequest(q=q, actor=actor, action=action, asset=asset)
    try:
        docs = svc.search(req, limit=limit, offset=offset)
    except SearchFailed as e:
        return JSONResponse(
            status_code=500,
            content={"error": "Search failed", "details": e.details},
        )
    return jsonable_encoder(docs, custom_encoder={ObjectId: str})
