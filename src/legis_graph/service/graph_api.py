from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from legis_graph.knowledge_graph.models import NodeType
from legis_graph.knowledge_graph.pipeline import IngestionError
from legis_graph.knowledge_graph.query_engine import GraphQueryEngine
from legis_graph.settings import LegisGraphSettings

from .auth import require_api_key


def build_graph_router(engine: GraphQueryEngine, cfg: LegisGraphSettings) -> APIRouter:
    r = APIRouter(prefix="/v1/graph", tags=["graph"], dependencies=[Depends(require_api_key(cfg))])

    @r.get("/stats")
    async def stats():
        return {"success": True, "data": engine.stats()}

    @r.get("/connections/{node_id}")
    async def connections(
        node_id: str,
        depth: int = 2,
        node_type: NodeType | None = Query(default=None, alias="type"),
    ):
        out = engine.connections(node_id, depth=depth, node_type=node_type)
        if out is None:
            raise HTTPException(status_code=404, detail="Graph node not found")
        return {"success": True, "data": out}

    @r.get("/path/{from_id}/{to_id}")
    async def path(from_id: str, to_id: str):
        out = engine.path(from_id, to_id)
        if out is None:
            return {"success": True, "data": None, "message": "No path found between these nodes"}
        return {"success": True, "data": out}

    @r.get("/influence/{node_id}")
    async def influence(node_id: str):
        out = engine.influence(node_id)
        if out is None:
            raise HTTPException(status_code=404, detail="Graph node not found")
        return {"success": True, "data": out}

    @r.get("/nodes")
    async def nodes(node_type: NodeType = Query(alias="type"), limit: int = 100):
        out = engine.nodes(node_type, limit=limit)
        return {"success": True, "data": out, "count": len(out)}

    @r.post("/build")
    async def build():
        try:
            out = await engine.rebuild()
        except IngestionError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return {"success": True, "data": out}

    return r
