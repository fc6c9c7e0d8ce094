from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import NodeType
from .pipeline import GraphIngestor
from .registry import GraphRegistry


def clamp_depth(depth: int | None, *, default: int = 2, maximum: int = 4) -> int:
    if not depth or depth < 1:
        return default
    return min(depth, maximum)


@dataclass(slots=True)
class GraphQueryEngine:
    """Read operations over the published graph, shaped for transport.

    Each call reads `registry.current` once, so a rebuild published midway
    does not mix two graphs into one answer. Unknown nodes give None.
    """

    registry: GraphRegistry
    ingestor: GraphIngestor | None = None
    max_connection_depth: int = 4
    connection_result_cap: int = 100
    path_max_depth: int = 6
    max_nodes_limit: int = 500

    def stats(self) -> dict[str, Any]:
        return self.registry.current.get_stats().to_dict()

    def connections(
        self, node_id: str, *, depth: int | None = 2, node_type: NodeType | None = None
    ) -> dict[str, Any] | None:
        graph = self.registry.current
        node = graph.get_node(node_id)
        if node is None:
            return None

        depth = clamp_depth(depth, maximum=self.max_connection_depth)
        found = graph.get_connections(node_id, depth, node_type)
        return {
            "source": node.to_dict(),
            "connections": [c.to_dict() for c in found[: self.connection_result_cap]],
            "total": len(found),
        }

    def path(self, from_id: str, to_id: str) -> dict[str, Any] | None:
        result = self.registry.current.find_path(from_id, to_id, self.path_max_depth)
        return result.to_dict() if result is not None else None

    def influence(self, node_id: str) -> dict[str, Any] | None:
        graph = self.registry.current
        if graph.get_node(node_id) is None:
            return None
        return graph.compute_influence(node_id).to_dict()

    def nodes(self, node_type: NodeType, *, limit: int = 100) -> list[dict[str, Any]]:
        limit = max(1, min(limit, self.max_nodes_limit))
        return [n.to_dict() for n in self.registry.current.get_nodes_by_type(node_type, limit)]

    async def rebuild(self) -> dict[str, Any]:
        if self.ingestor is None:
            raise RuntimeError("No ingestor configured; cannot rebuild the graph")
        stats = await self.registry.rebuild(self.ingestor)
        return stats.summary()
