# veris_search/incidents/store.py
from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.errors import PyMongoError

from veris_search.incidents.predicates import Predicate
from veris_search.incidents.paths import resolve

log = logging.getLogger("veris.store")

DEFAULT_DB_NAME = "veris"


class StoreError(Exception):
    pass


class StoreUnavailable(StoreError):
    pass


class IncidentStore(ABC):
    """
    Narrow read-only view of the incident collection.

    Search and catalog code only talk to this, never to a driver directly.
    """

    @property
    @abstractmethod
    def database_name(self) -> str:
        ...

    @property
    @abstractmethod
    def collection_name(self) -> str:
        ...

    @abstractmethod
    def find(self, filter: Predicate, limit: int, offset: int = 0) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def distinct(self, path: str) -> List[Any]:
        ...

    @abstractmethod
    def ping(self) -> bool:
        ...

    @abstractmethod
    def list_collection_names(self) -> List[str]:
        ...

    @abstractmethod
    def estimated_count(self) -> int:
        ...

    @abstractmethod
    def sample(self) -> Optional[Dict[str, Any]]:
        ...

    def close(self) -> None:
        pass


# ------------------------------------------------------------------------------
# MongoDB
# ------------------------------------------------------------------------------

class MongoIncidentStore(IncidentStore):
    """
    Thin wrapper around a pymongo collection.

    - one MongoClient for the life of the process
    - every read carries a server-side time limit
    - find() is ordered by _id so repeated calls agree
    """

    def __init__(
        self,
        client: MongoClient,
        *,
        collection: str,
        db_name: Optional[str] = None,
        query_timeout_ms: int = 5000,
    ) -> None:
        self._client = client
        if db_name:
            self._db = client[db_name]
        else:
            self._db = client.get_default_database(default=DEFAULT_DB_NAME)
        self._coll = self._db[collection]
        self._timeout_ms = query_timeout_ms

    @classmethod
    def connect(
        cls,
        uri: str,
        *,
        collection: str,
        db_name: Optional[str] = None,
        connect_timeout_ms: int = 5000,
        query_timeout_ms: int = 5000,
    ) -> "MongoIncidentStore":
        client: MongoClient = MongoClient(
            uri,
            serverSelectionTimeoutMS=connect_timeout_ms,
            connectTimeoutMS=connect_timeout_ms,
        )
        try:
            client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            raise StoreUnavailable(f"MongoDB connection error: {e}") from e

        store = cls(
            client,
            collection=collection,
            db_name=db_name,
            query_timeout_ms=query_timeout_ms,
        )
        log.info("MongoDB connected db=%s collection=%s", store.database_name, store.collection_name)
        return store

    @property
    def database_name(self) -> str:
        return self._db.name

    @property
    def collection_name(self) -> str:
        return self._coll.name

    def find(self, filter: Predicate, limit: int, offset: int = 0) -> List[Dict[str, Any]]:
        cursor = (
            self._coll.find(filter.to_mongo())
            .sort("_id", ASCENDING)
            .skip(offset)
            .limit(limit)
            .max_time_ms(self._timeout_ms)
        )
        return list(cursor)

    def distinct(self, path: str) -> List[Any]:
        return self._coll.distinct(path, maxTimeMS=self._timeout_ms)

    def ping(self) -> bool:
        try:
            self._client.admin.command("ping")
            return True
        except PyMongoError as e:
            log.warning("MongoDB ping failed: %s", e)
            return False

    def list_collection_names(self) -> List[str]:
        return self._db.list_collection_names(maxTimeMS=self._timeout_ms)

    def estimated_count(self) -> int:
        return self._coll.estimated_document_count(maxTimeMS=self._timeout_ms)

    def sample(self) -> Optional[Dict[str, Any]]:
        return self._coll.find_one({}, {"_id": 0}, max_time_ms=self._timeout_ms)

    def close(self) -> None:
        self._client.close()


# ------------------------------------------------------------------------------
# in-memory (offline demo / tests)
# ------------------------------------------------------------------------------

class InMemoryIncidentStore(IncidentStore):
    def __init__(
        self,
        docs: Iterable[Dict[str, Any]] = (),
        *,
        collection: str = "veris_incidents",
        db_name: str = "memory",
    ) -> None:
        self._docs: List[Dict[str, Any]] = list(docs)
        self._collection = collection
        self._db_name = db_name

    @classmethod
    def from_file(cls, path: str, **kwargs: Any) -> "InMemoryIncidentStore":
        return cls(load_documents(path), **kwargs)

    @property
    def database_name(self) -> str:
        return self._db_name

    @property
    def collection_name(self) -> str:
        return self._collection

    def find(self, filter: Predicate, limit: int, offset: int = 0) -> List[Dict[str, Any]]:
        hits = [d for d in self._docs if filter.matches(d)]
        return hits[offset:offset + limit]

    def distinct(self, path: str) -> List[Any]:
        out: List[Any] = []
        for d in self._docs:
            for v in resolve(d, path).values():
                if v not in out:
                    out.append(v)
        return out

    def ping(self) -> bool:
        return True

    def list_collection_names(self) -> List[str]:
        return [self._collection]

    def estimated_count(self) -> int:
        return len(self._docs)

    def sample(self) -> Optional[Dict[str, Any]]:
        if not self._docs:
            return None
        return {k: v for k, v in self._docs[0].items() if k != "_id"}


def load_documents(path: str) -> List[Dict[str, Any]]:
    """Read incidents from a JSON array file or a JSON-lines file."""
    text = Path(path).read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        docs = json.loads(stripped)
    else:
        docs = [json.loads(line) for line in text.splitlines() if line.strip()]
    if not all(isinstance(d, dict) for d in docs):
        raise ValueError(f"{path}: every incident must be a JSON object")
    log.info("Loaded %d incidents from %s", len(docs), path)
    return docs
