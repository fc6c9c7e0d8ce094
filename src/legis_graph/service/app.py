from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from legis_graph.knowledge_graph.pipeline import GraphIngestor, IngestionError
from legis_graph.knowledge_graph.query_engine import GraphQueryEngine
from legis_graph.knowledge_graph.registry import GraphRegistry
from legis_graph.knowledge_graph.source import RecordSource
from legis_graph.settings import LegisGraphSettings, settings

from .graph_api import build_graph_router

logger = logging.getLogger(__name__)


def build_query_engine(
    source: RecordSource, cfg: LegisGraphSettings, registry: GraphRegistry | None = None
) -> GraphQueryEngine:
    ingestor = GraphIngestor(
        source,
        bill_limit=cfg.bill_limit,
        cosponsor_limit=cfg.cosponsor_limit,
        contribution_limit=cfg.contribution_limit,
    )
    return GraphQueryEngine(
        registry=registry or GraphRegistry(),
        ingestor=ingestor,
        max_connection_depth=cfg.max_connection_depth,
        connection_result_cap=cfg.connection_result_cap,
        path_max_depth=cfg.path_max_depth,
        max_nodes_limit=cfg.max_nodes_limit,
    )


def create_app(
    source: RecordSource,
    *,
    registry: GraphRegistry | None = None,
    cfg: LegisGraphSettings | None = None,
) -> FastAPI:
    cfg = cfg or settings
    engine = build_query_engine(source, cfg, registry)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        if cfg.build_on_startup:
            # keep serving the empty graph if the source is down; POST /build retries
            try:
                await engine.rebuild()
            except IngestionError as e:
                logger.warning("Initial graph build failed: %s", e)
        yield

    app = FastAPI(title="Legislative Knowledge Graph", version="0.1.0", lifespan=lifespan)
    app.state.graph = engine

    @app.get("/health")
    async def health():
        reg = engine.registry
        return {
            "ok": True,
            "host": os.uname().nodename,
            "graph": {
                "nodes": reg.current.node_count,
                "building": reg.building,
                "built_at": reg.built_at.isoformat() if reg.built_at else None,
            },
        }

    app.include_router(build_graph_router(engine, cfg))
    return app
