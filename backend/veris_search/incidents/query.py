# veris_search/incidents/query.py
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from veris_search.incidents.paths import (
    ACTION_VARIETY_PATHS,
    ACTOR_VARIETY_PATHS,
    ASSET_ARRAY_PATH,
    ASSET_VARIETY_FIELD,
    FREE_TEXT_FIELDS,
)
from veris_search.incidents.predicates import (
    AllOf,
    AnyOf,
    Contains,
    ElemMatch,
    MatchAll,
    Membership,
    Predicate,
)


def _present(v: Optional[str]) -> Optional[str]:
    # "" and whitespace-only count as not supplied; real values stay verbatim
    if v is None or not v.strip():
        return None
    return v


@dataclass(frozen=True)
class SearchRequest:
    q: Optional[str] = None
    actor: Optional[str] = None
    action: Optional[str] = None
    asset: Optional[str] = None

    def normalized(self) -> "SearchRequest":
        return SearchRequest(
            q=_present(self.q),
            actor=_present(self.actor),
            action=_present(self.action),
            asset=_present(self.asset),
        )


def build_predicates(req: SearchRequest) -> List[Predicate]:
    """
    One predicate per supplied parameter family, to be ANDed together.

    - q: case-insensitive substring over the free-text fields
    - actor / action: exact membership across the variety paths
    - asset: some asset.assets element has that variety
    """
    req = req.normalized()
    preds: List[Predicate] = []

    if req.q:
        preds.append(AnyOf(tuple(Contains(f, req.q) for f in FREE_TEXT_FIELDS)))

    if req.actor:
        preds.append(AnyOf(tuple(Membership(p, req.actor) for p in ACTOR_VARIETY_PATHS)))

    if req.action:
        preds.append(AnyOf(tuple(Membership(p, req.action) for p in ACTION_VARIETY_PATHS)))

    if req.asset:
        preds.append(ElemMatch(ASSET_ARRAY_PATH, ASSET_VARIETY_FIELD, req.asset))

    return preds


def build_filter(req: SearchRequest) -> Predicate:
    preds = build_predicates(req)
    if not preds:
        return MatchAll()
    return AllOf(tuple(preds))
