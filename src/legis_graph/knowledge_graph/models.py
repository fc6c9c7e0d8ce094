from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NodeType(str, Enum):
    """Entity kinds held in the legislative graph."""

    MEMBER = "member"
    BILL = "bill"
    COMMITTEE = "committee"
    LOBBYIST = "lobbyist"
    DONOR = "donor"
    DISTRICT = "district"


class EdgeType(str, Enum):
    """Relationship kinds. Comments give the usual direction."""

    SPONSORS = "sponsors"  # member -> bill
    COSPONSORS = "cosponsors"  # member -> bill
    VOTED_ON = "voted_on"  # member -> bill
    MEMBER_OF = "member_of"  # member -> committee
    CHAIRS = "chairs"  # member -> committee
    LOBBIED_FOR = "lobbied_for"  # lobbyist -> bill
    DONATED_TO = "donated_to"  # donor -> member
    REPRESENTS = "represents"  # member -> district
    REFERRED_TO = "referred_to"  # bill -> committee
    AMENDS = "amends"  # bill -> bill


@dataclass(frozen=True, slots=True)
class Node:
    """A typed entity node.

    `id` is namespaced as ``<type>:<natural key>`` (e.g. ``member:A000360``) so
    ids stay unique across types.
    """

    id: str
    type: NodeType
    label: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "type": self.type.value, "label": self.label, "data": dict(self.data)}


@dataclass(frozen=True, slots=True)
class Edge:
    """A directed, typed, weighted relationship.

    Two edges with the same (source, target, type) are the same logical edge.
    """

    source: str
    target: str
    type: EdgeType
    weight: float = 1
    data: dict[str, Any] | None = None

    @property
    def key(self) -> tuple[str, str, EdgeType]:
        return (self.source, self.target, self.type)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "source": self.source,
            "target": self.target,
            "type": self.type.value,
            "weight": self.weight,
        }
        if self.data is not None:
            out["data"] = dict(self.data)
        return out


@dataclass(slots=True)
class PathResult:
    nodes: list[Node]
    edges: list[Edge]

    @property
    def length(self) -> int:
        return len(self.edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "length": self.length,
        }


@dataclass(slots=True)
class ConnectionResult:
    """A node reached from a start node, with one edge path leading to it."""

    node: Node
    edges: list[Edge]
    depth: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "node": self.node.to_dict(),
            "edges": [e.to_dict() for e in self.edges],
            "depth": self.depth,
        }


@dataclass(frozen=True, slots=True)
class InfluenceFactor:
    factor: str
    value: float


@dataclass(slots=True)
class InfluenceScore:
    node_id: str
    score: int
    factors: list[InfluenceFactor] = field(default_factory=list)

    def factor(self, name: str) -> float:
        for f in self.factors:
            if f.factor == name:
                return f.value
        raise KeyError(name)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodeId": self.node_id,
            "score": self.score,
            "factors": [{"factor": f.factor, "value": f.value} for f in self.factors],
        }


@dataclass(slots=True)
class GraphStats:
    nodes: int
    edges: int
    nodes_by_type: dict[str, int] = field(default_factory=dict)
    edges_by_type: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": self.nodes,
            "edges": self.edges,
            "nodesByType": dict(self.nodes_by_type),
            "edgesByType": dict(self.edges_by_type),
        }
