# veris_search/main.py
from __future__ import annotations

import logging
import os
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from veris_search.api.deps import get_store, require_debug_access
from veris_search.api.filters import router as filters_router
from veris_search.api.schemas import DebugOut, ErrorOut, HealthOut
from veris_search.api.search import router as search_router
from veris_search.core.config import settings
from veris_search.incidents.store import (
    IncidentStore,
    InMemoryIncidentStore,
    MongoIncidentStore,
)

log = logging.getLogger("veris.api")

ROOT_MESSAGE = "VERIS Search Backend is running!"


def open_store() -> IncidentStore:
    """Acquire the process-wide store from settings. Raises on failure."""
    if settings.store_backend == "memory":
        if settings.seed_file:
            return InMemoryIncidentStore.from_file(
                settings.seed_file, collection=settings.mongo_collection
            )
        return InMemoryIncidentStore(collection=settings.mongo_collection)

    if not settings.mongo_uri:
        raise RuntimeError("MONGO_URI is not set")

    return MongoIncidentStore.connect(
        settings.mongo_uri,
        collection=settings.mongo_collection,
        db_name=settings.mongo_db or None,
        connect_timeout_ms=settings.connect_timeout_ms,
        query_timeout_ms=settings.query_timeout_ms,
    )


def create_app(store: Optional[IncidentStore] = None) -> FastAPI:
    app = FastAPI(title="VERIS Incident Search")
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(search_router)
    app.include_router(filters_router)

    @app.on_event("startup")
    def startup():
        if app.state.store is not None:
            return
        try:
            app.state.store = open_store()
        except Exception as e:
            log.critical("Store init failed (fatal): %s", e)
            raise

    @app.on_event("shutdown")
    def shutdown():
        if app.state.store is not None:
            app.state.store.close()

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return ROOT_MESSAGE

    @app.get("/healthz", response_model=HealthOut)
    def healthz(store: IncidentStore = Depends(get_store)):
        return {
            "status": "ok",
            "mongoState": 1 if store.ping() else 0,  # 1 = connected
            "db": store.database_name,
            "collection": store.collection_name,
        }

    @app.get(
        "/__debug",
        response_model=DebugOut,
        responses={500: {"model": ErrorOut}},
        dependencies=[Depends(require_debug_access)],
    )
    def debug(store: IncidentStore = Depends(get_store)):
        # collections + sample doc, for checking MONGO_COLLECTION points at real data
        try:
            names = sorted(store.list_collection_names())
            count = store.estimated_count()
            sample = store.sample()
        except Exception as e:
            log.error("Debug introspection failed: %s", e)
            return JSONResponse(status_code=500, content={"error": str(e)})

        return {
            "modelCollection": store.collection_name,
            "allCollections": names,
            "modelCount": count,
            "sampleKeys": list(sample.keys()) if sample else None,
            "sampleSummary": (sample or {}).get("summary") or None,
        }

    # mounted last so API routes win over files of the same name
    if settings.static_dir and os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("veris_search.main:app", host="0.0.0.0", port=settings.port)
