# veris_search/incidents/service.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from veris_search.incidents.paths import (
    ACTION_VARIETY_PATHS,
    ACTOR_VARIETY_PATHS,
    ASSET_VARIETY_PATH,
)
from veris_search.incidents.query import SearchRequest, build_filter
from veris_search.incidents.store import IncidentStore

log = logging.getLogger("veris.search")

DEFAULT_LIMIT = 50


class SearchFailed(Exception):
    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details


class CatalogFailed(Exception):
    def __init__(self, details: str) -> None:
        super().__init__(details)
        self.details = details


@dataclass
class FilterCatalog:
    actors: List[str] = field(default_factory=list)
    actions: List[str] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, List[str]]:
        return {"actors": self.actors, "actions": self.actions, "assets": self.assets}


def _flatten(values: Iterable[Any]) -> Iterable[Any]:
    for v in values:
        if isinstance(v, (list, tuple)):
            yield from _flatten(v)
        else:
            yield v


def unique_values(values: Iterable[Any], *, sort: bool = False) -> List[str]:
    """
    Flatten nested arrays, drop falsy entries, dedupe keeping first-seen order.
    """
    seen = set()
    out: List[str] = []
    for v in _flatten(values):
        if not v:
            continue
        v = str(v)
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    if sort:
        out.sort()
    return out


class IncidentSearchService:
    def __init__(self, store: IncidentStore, *, limit: int = DEFAULT_LIMIT) -> None:
        self.store = store
        self.limit = limit

    def search(
        self,
        req: SearchRequest,
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        # callers may ask for fewer than the cap, never more; at least one
        # since Mongo reads limit(0) as unlimited
        n = self.limit if limit is None else max(1, min(limit, self.limit))
        flt = build_filter(req)
        try:
            return self.store.find(flt, limit=n, offset=max(0, offset))
        except Exception as e:
            log.error("Search error: %s filter=%s", e, flt.to_mongo())
            raise SearchFailed(str(e)) from e

    def _distinct_union(self, paths: Iterable[str]) -> List[Any]:
        out: List[Any] = []
        for p in paths:
            out.extend(self.store.distinct(p))
        return out

    def catalog(self, *, sort: bool = False) -> FilterCatalog:
        try:
            actors = self._distinct_union(ACTOR_VARIETY_PATHS)
            actions = self._distinct_union(ACTION_VARIETY_PATHS)
            assets = self.store.distinct(ASSET_VARIETY_PATH)
        except Exception as e:
            log.error("Filter load error: %s", e)
            raise CatalogFailed(str(e)) from e

        return FilterCatalog(
            actors=unique_values(actors, sort=sort),
            actions=unique_values(actions, sort=sort),
            assets=unique_values(assets, sort=sort),
        )
