"""In-memory legislative relationship graph.

Nodes are keyed by namespaced string ids. Edges are stored twice: in the
forward index of their source and in the reverse index of their target, so
both directions can be walked without scanning.

Traversals (`get_connections`, `find_path`) treat the graph as undirected:
proximity between a member and a donor matters, not which way the edge points.
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Iterator

from .models import (
    ConnectionResult,
    Edge,
    GraphStats,
    InfluenceFactor,
    InfluenceScore,
    Node,
    NodeType,
    PathResult,
)


class GraphEngine:
    """Typed directed multigraph with forward and reverse adjacency lists.

    Not safe for concurrent writers. Build an instance fully, then publish it
    (see `GraphRegistry`) and only read from it afterwards.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, Node] = {}
        self._adjacency: dict[str, list[Edge]] = {}
        self._reverse_adjacency: dict[str, list[Edge]] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._adjacency.values())

    # --- mutation ---

    def add_node(self, node: Node) -> None:
        """Insert or replace `node`. Existing adjacency lists are kept."""
        self._nodes[node.id] = node
        self._adjacency.setdefault(node.id, [])
        self._reverse_adjacency.setdefault(node.id, [])

    def add_edge(self, edge: Edge) -> bool:
        """Add `edge` unless an edge with the same (source, target, type) exists.

        Returns True if the edge was inserted.
        """
        out_edges = self._adjacency.setdefault(edge.source, [])
        if any(e.key == edge.key for e in out_edges):
            return False
        # every endpoint gets an entry in both indexes, even without add_node
        self._reverse_adjacency.setdefault(edge.source, [])
        self._adjacency.setdefault(edge.target, [])
        out_edges.append(edge)
        self._reverse_adjacency.setdefault(edge.target, []).append(edge)
        return True

    def clear(self) -> None:
        self._nodes.clear()
        self._adjacency.clear()
        self._reverse_adjacency.clear()

    # --- lookups ---

    def get_node(self, node_id: str) -> Node | None:
        return self._nodes.get(node_id)

    def get_edges_from(self, node_id: str) -> list[Edge]:
        return list(self._adjacency.get(node_id, ()))

    def get_edges_to(self, node_id: str) -> list[Edge]:
        return list(self._reverse_adjacency.get(node_id, ()))

    def get_nodes_by_type(self, node_type: NodeType | str, limit: int | None = None) -> list[Node]:
        out: list[Node] = []
        for node in self._nodes.values():
            if node.type == node_type:
                out.append(node)
                if limit and len(out) >= limit:
                    break
        return out

    def _neighbors(self, node_id: str) -> Iterator[tuple[str, Edge]]:
        # outgoing first, then incoming; traversal order depends on this
        for e in self._adjacency.get(node_id, ()):
            yield e.target, e
        for e in self._reverse_adjacency.get(node_id, ()):
            yield e.source, e

    # --- traversal ---

    def get_connections(
        self,
        node_id: str,
        max_depth: int = 2,
        filter_type: NodeType | str | None = None,
    ) -> list[ConnectionResult]:
        """Breadth-first neighborhood of `node_id` up to `max_depth` hops.

        Each node is reported once, at the depth it was first discovered,
        together with the edge path that discovered it. `filter_type` only
        limits what is reported; traversal still passes through other types.
        """
        results: list[ConnectionResult] = []
        visited = {node_id}
        queue: deque[tuple[str, int, tuple[Edge, ...]]] = deque([(node_id, 0, ())])

        while queue:
            current, depth, path = queue.popleft()

            if current != node_id:
                node = self._nodes.get(current)
                if node is not None and (filter_type is None or node.type == filter_type):
                    results.append(ConnectionResult(node=node, edges=list(path), depth=depth))

            if depth >= max_depth:
                continue

            for neighbor, edge in self._neighbors(current):
                if neighbor in visited:
                    continue
                visited.add(neighbor)
                queue.append((neighbor, depth + 1, path + (edge,)))

        return results

    def find_path(self, from_id: str, to_id: str, max_depth: int = 6) -> PathResult | None:
        """Fewest-hop path between two nodes, ignoring edge direction.

        When several shortest paths exist, the first one discovered wins; which
        one that is depends on adjacency order and is not canonical.
        """
        if from_id not in self._nodes or to_id not in self._nodes:
            return None
        if from_id == to_id:
            return PathResult(nodes=[self._nodes[from_id]], edges=[])

        parent: dict[str, tuple[str, Edge]] = {}
        visited = {from_id}
        queue: deque[tuple[str, int]] = deque([(from_id, 0)])

        while queue:
            current, depth = queue.popleft()
            if depth >= max_depth:
                # level order: everything left in the queue is at least as deep
                break

            for neighbor, edge in self._neighbors(current):
                if neighbor in visited or neighbor not in self._nodes:
                    continue
                visited.add(neighbor)
                parent[neighbor] = (current, edge)
                if neighbor == to_id:
                    return self._reconstruct(from_id, to_id, parent)
                queue.append((neighbor, depth + 1))

        return None

    def _reconstruct(
        self, from_id: str, to_id: str, parent: dict[str, tuple[str, Edge]]
    ) -> PathResult:
        nodes: list[Node] = []
        edges: list[Edge] = []
        cur = to_id
        while cur != from_id:
            prev, edge = parent[cur]
            nodes.append(self._nodes[cur])
            edges.append(edge)
            cur = prev
        nodes.append(self._nodes[from_id])
        nodes.reverse()
        edges.reverse()
        return PathResult(nodes=nodes, edges=edges)

    # --- analytics ---

    def compute_influence(self, node_id: str) -> InfluenceScore:
        """Degree-based influence score in [0, 100] with itemized factors.

        score = min(100, round(connections*2 + weighted_connections*0.5 + type_diversity*10))
        """
        out_edges = self._adjacency.get(node_id, ())
        in_edges = self._reverse_adjacency.get(node_id, ())

        total_degree = len(out_edges) + len(in_edges)
        total_weight = sum(e.weight for e in out_edges) + sum(e.weight for e in in_edges)

        connected_types: set[str] = set()
        for neighbor, _edge in self._neighbors(node_id):
            node = self._nodes.get(neighbor)
            if node is not None:
                connected_types.add(node.type.value)

        raw = total_degree * 2 + total_weight * 0.5 + len(connected_types) * 10
        # half-up rounding, not banker's rounding
        score = min(100, math.floor(raw + 0.5))

        return InfluenceScore(
            node_id=node_id,
            score=score,
            factors=[
                InfluenceFactor("connections", total_degree),
                InfluenceFactor("weighted_connections", total_weight),
                InfluenceFactor("type_diversity", len(connected_types)),
            ],
        )

    def get_stats(self) -> GraphStats:
        nodes_by_type: dict[str, int] = {}
        for node in self._nodes.values():
            nodes_by_type[node.type.value] = nodes_by_type.get(node.type.value, 0) + 1

        edges_by_type: dict[str, int] = {}
        for edges in self._adjacency.values():
            for e in edges:
                edges_by_type[e.type.value] = edges_by_type.get(e.type.value, 0) + 1

        return GraphStats(
            nodes=self.node_count,
            edges=self.edge_count,
            nodes_by_type=nodes_by_type,
            edges_by_type=edges_by_type,
        )
