"""Query-mode FastAPI entry point.

Start with:
    PYTHONPATH=src uvicorn catalog_engine.query_app:app --host 0.0.0.0 --port 8060

This process serves read-only views over the catalog engine:
- /catalogs/* - catalog and entry lookup
- /query, /query/count - predicate queries across catalogs
- /nodes/{id}/* - projection of a graph node onto catalogs, expansion
- /validate, /stats - consistency report and summary counts
- /health

Catalogs and graph are loaded once at startup from the file named by
``CATALOG_ENGINE_CONFIG`` (default ``config.yaml``).
"""
from __future__ import annotations

import dataclasses
import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from pydantic import BaseModel, Field

from . import _bootstrap as bs
from .errors import InvalidTagModeError
from .operators.engine import OperatorEngine
from .operators.predicate import validate_predicate
from .operators.query import QueryOptions

logger = logging.getLogger(__name__)


class QueryRequest(BaseModel):
    """Body of /query and /query/count."""
    predicate: dict[str, Any] = Field(default_factory=dict)
    catalog_id: str | None = None
    limit: int | None = Field(default=None, ge=0)


def get_engine(request: Request) -> OperatorEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Catalog engine not initialised")
    return engine


def create_app(engine: OperatorEngine | None = None) -> FastAPI:
    """Build the app. With *engine* given, startup loading is skipped."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting catalog query service...")
        if app.state.engine is None:
            config, config_path = bs.load_config()
            bs.configure_logging(config)
            app.state.engine, app.state.validation = bs.build_engine(config, config_path)
        logger.info("Catalog query service started")
        yield
        logger.info("Catalog query service stopped")

    app = FastAPI(
        title="Catalog Engine",
        description="Query mode over versioned catalogs projected onto a graph.",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Catalogs", "description": "Catalog and entry lookup"},
            {"name": "Query", "description": "Predicate queries"},
            {"name": "Nodes", "description": "Graph node projection"},
            {"name": "Health", "description": "Validation, stats and liveness"},
        ],
    )
    app.state.engine = engine
    app.state.validation = None

    @app.get("/health", tags=["Health"])
    async def health(request: Request):
        return {"status": "ok", "ready": request.app.state.engine is not None}

    # -- Catalogs -----------------------------------------------------------

    @app.get("/catalogs", tags=["Catalogs"])
    async def list_catalogs(engine: OperatorEngine = Depends(get_engine)):
        return {
            "catalogs": [
                {
                    "id": key,
                    "version": c.version,
                    "description": c.description,
                    "entryCount": len(c.entries),
                    "hasSchema": c.schema is not None,
                }
                for key, c in engine.store.items()
            ]
        }

    @app.get("/catalogs/{catalog_id}", tags=["Catalogs"])
    async def get_catalog(catalog_id: str, engine: OperatorEngine = Depends(get_engine)):
        catalog = engine.store.get(catalog_id)
        if catalog is None:
            raise HTTPException(status_code=404, detail=f"Catalog not found: {catalog_id}")
        return catalog.to_dict()

    @app.get("/catalogs/{catalog_id}/entries/{entry_id}", tags=["Catalogs"])
    async def get_entry(catalog_id: str, entry_id: str, engine: OperatorEngine = Depends(get_engine)):
        entry = engine.store.get_entry(catalog_id, entry_id)
        if entry is None:
            raise HTTPException(
                status_code=404,
                detail=f"Entry not found: {catalog_id}/{entry_id}",
            )
        return entry.to_dict()

    # -- Query --------------------------------------------------------------

    @app.post("/query", tags=["Query"])
    async def run_query(body: QueryRequest, engine: OperatorEngine = Depends(get_engine)):
        options = QueryOptions(catalog_id=body.catalog_id, limit=body.limit)
        matches = engine.query(body.predicate, options)
        return {
            "results": [m.to_dict() for m in matches],
            "count": len(matches),
            "problems": validate_predicate(body.predicate),
        }

    @app.post("/query/count", tags=["Query"])
    async def run_count(body: QueryRequest, engine: OperatorEngine = Depends(get_engine)):
        options = QueryOptions(catalog_id=body.catalog_id, limit=body.limit)
        return {"count": engine.count(body.predicate, options)}

    # -- Nodes --------------------------------------------------------------

    @app.get("/nodes/{node_id}", tags=["Nodes"])
    async def get_node(node_id: str, engine: OperatorEngine = Depends(get_engine)):
        node = engine.graph.get_node(node_id)
        if node is None:
            raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")
        return node.to_dict()

    @app.get("/nodes/{node_id}/projection", tags=["Nodes"])
    async def project_node(
        node_id: str,
        use_refs: bool | None = None,
        use_tags: bool | None = None,
        tag_mode: str | None = None,
        require_capability: bool | None = None,
        pointer_tags_as_tags: bool | None = None,
        catalog_id: list[str] | None = Query(default=None),
        engine: OperatorEngine = Depends(get_engine),
    ):
        node = engine.graph.get_node(node_id)
        if node is None:
            raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")

        overrides = {
            "use_refs": use_refs,
            "use_tags": use_tags,
            "tag_mode": tag_mode,
            "require_capability": require_capability,
            "pointer_tags_as_tags": pointer_tags_as_tags,
            "catalog_ids": catalog_id,
        }
        try:
            options = dataclasses.replace(
                engine.defaults,
                **{k: v for k, v in overrides.items() if v is not None},
            )
        except InvalidTagModeError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e

        projection = engine.project(node, options)
        return {
            "nodeId": node.id,
            "projection": {
                cid: [entry.to_dict() for entry in entries]
                for cid, entries in projection.items()
            },
        }

    @app.get("/nodes/{node_id}/expand", tags=["Nodes"])
    async def expand_node(
        node_id: str,
        depth: int = Query(default=1, ge=0),
        engine: OperatorEngine = Depends(get_engine),
    ):
        if node_id not in engine.graph:
            raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")
        return {"nodeId": node_id, "depth": depth, "neighbors": engine.expand(node_id, depth)}

    # -- Health -------------------------------------------------------------

    @app.get("/validate", tags=["Health"])
    async def validate(engine: OperatorEngine = Depends(get_engine)):
        return engine.validate().to_dict()

    @app.get("/stats", tags=["Health"])
    async def stats(engine: OperatorEngine = Depends(get_engine)):
        return engine.stats().to_dict()

    return app


app = create_app()
