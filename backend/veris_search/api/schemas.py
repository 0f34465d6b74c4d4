# veris_search/api/schemas.py
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class FilterCatalogOut(BaseModel):
    actors: List[str] = Field(default_factory=list)
    actions: List[str] = Field(default_factory=list)
    assets: List[str] = Field(default_factory=list)


class HealthOut(BaseModel):
    status: str
    mongoState: int  # 1 = connected, 0 = not reachable
    db: str
    collection: str


class DebugOut(BaseModel):
    modelCollection: str
    allCollections: List[str]
    modelCount: int
    sampleKeys: Optional[List[str]] = None
    sampleSummary: Optional[Any] = None


class SearchErrorOut(BaseModel):
    error: str
    details: Optional[str] = None


class ErrorOut(BaseModel):
    error: str
