# veris_search/incidents/predicates.py
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Tuple

from veris_search.incidents.paths import Many, resolve


class Predicate(ABC):
    """
    One condition over an incident document.

    Every predicate renders to a MongoDB filter and can also be evaluated
    in-process, so the in-memory store and the Mongo store agree.
    """

    @abstractmethod
    def to_mongo(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    def matches(self, doc: Dict[str, Any]) -> bool:
        ...


@dataclass(frozen=True)
class MatchAll(Predicate):
    def to_mongo(self) -> Dict[str, Any]:
        return {}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return True


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring match, with regex metacharacters escaped."""

    path: str
    text: str

    def to_mongo(self) -> Dict[str, Any]:
        return {self.path: {"$regex": re.escape(self.text), "$options": "i"}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        needle = self.text.lower()
        for v in resolve(doc, self.path).values():
            if isinstance(v, str) and needle in v.lower():
                return True
        return False


@dataclass(frozen=True)
class Membership(Predicate):
    # scalar equals value, or array contains value
    path: str
    value: str

    def to_mongo(self) -> Dict[str, Any]:
        return {self.path: {"$in": [self.value]}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return self.value in resolve(doc, self.path).values()


@dataclass(frozen=True)
class ElemMatch(Predicate):
    path: str
    field: str
    value: str

    def to_mongo(self) -> Dict[str, Any]:
        return {self.path: {"$elemMatch": {self.field: self.value}}}

    def matches(self, doc: Dict[str, Any]) -> bool:
        arr = resolve(doc, self.path)
        if not isinstance(arr, Many):
            return False
        for item in arr.items:
            if not isinstance(item, dict):
                continue
            if self.value in resolve(item, self.field).values():
                return True
        return False


@dataclass(frozen=True)
class AnyOf(Predicate):
    preds: Tuple[Predicate, ...]

    def to_mongo(self) -> Dict[str, Any]:
        return {"$or": [p.to_mongo() for p in self.preds]}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return any(p.matches(doc) for p in self.preds)


@dataclass(frozen=True)
class AllOf(Predicate):
    preds: Tuple[Predicate, ...]

    def to_mongo(self) -> Dict[str, Any]:
        return {"$and": [p.to_mongo() for p in self.preds]}

    def matches(self, doc: Dict[str, Any]) -> bool:
        return all(p.matches(doc) for p in self.preds)


__all__ = [
    "Predicate",
    "MatchAll",
    "Contains",
    "Membership",
    "ElemMatch",
    "AnyOf",
    "AllOf",
]
