# veris_search/api/deps.py
from __future__ import annotations

import hmac
from typing import Optional

from fastapi import Header, HTTPException, Request

from veris_search.core.config import settings
from veris_search.incidents.service import IncidentSearchService
from veris_search.incidents.store import IncidentStore


def get_store(request: Request) -> IncidentStore:
    return request.app.state.store


def get_service(request: Request) -> IncidentSearchService:
    return IncidentSearchService(request.app.state.store, limit=settings.search_limit)


def require_debug_access(x_api_key: Optional[str] = Header(default=None)) -> None:
    """
    Guard for diagnostic routes.
    - 404 when DEBUG_ENDPOINTS_ENABLED=false
    - 401 when DEBUG_API_KEY is set and X-API-Key does not match
    """
    if not settings.debug_endpoints_enabled:
        raise HTTPException(status_code=404, detail="Not Found")
    expected = settings.debug_api_key
    if not expected:
        return
    # compare bytes: compare_digest rejects non-ASCII str
    given = (x_api_key or "").encode("utf-8")
    if not x_api_key or not hmac.compare_digest(given, expected.encode("utf-8")):
        raise HTTPException(status_code=401, detail="invalid_api_key")
