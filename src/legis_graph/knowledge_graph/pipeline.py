from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any

from .engine import GraphEngine
from .keys import bill_key, committee_key, donor_key, member_key
from .models import Edge, EdgeType, Node, NodeType
from .source import RecordSource

logger = logging.getLogger(__name__)

SPONSOR_WEIGHT = 3
ORIGINAL_COSPONSOR_WEIGHT = 2
COSPONSOR_WEIGHT = 1
CHAIR_WEIGHT = 5
RANKING_MEMBER_WEIGHT = 3
COMMITTEE_MEMBER_WEIGHT = 1
MAX_DONATION_WEIGHT = 5
DONATION_BUCKET = 10_000


class IngestionError(RuntimeError):
    """Reading from the record source failed; the build was abandoned."""


def donation_weight(total_amount: float) -> int:
    """Bucket a contribution total into a 1..5 edge weight ($10k per step)."""
    return max(1, min(MAX_DONATION_WEIGHT, math.ceil(total_amount / DONATION_BUCKET)))


@dataclass(slots=True)
class IngestStats:
    nodes: int = 0
    edges: int = 0
    duration_ms: float = 0.0
    nodes_by_category: dict[str, int] = field(default_factory=dict)
    edges_by_category: dict[str, int] = field(default_factory=dict)
    skipped: dict[str, int] = field(default_factory=dict)

    @property
    def skipped_total(self) -> int:
        return sum(self.skipped.values())

    def summary(self) -> dict[str, Any]:
        return {"nodes": self.nodes, "edges": self.edges, "duration": round(self.duration_ms)}


@dataclass(slots=True)
class _Build:
    graph: GraphEngine
    stats: IngestStats

    def node(self, category: str, node: Node) -> None:
        self.graph.add_node(node)
        self.stats.nodes_by_category[category] = self.stats.nodes_by_category.get(category, 0) + 1

    def edge(self, category: str, edge: Edge) -> None:
        if edge.source not in self.graph or edge.target not in self.graph:
            self.skip(category)
            return
        if self.graph.add_edge(edge):
            self.stats.edges_by_category[category] = self.stats.edges_by_category.get(category, 0) + 1

    def skip(self, category: str) -> None:
        self.stats.skipped[category] = self.stats.skipped.get(category, 0) + 1


async def _run_phase(*coros) -> None:
    """Run `coros` concurrently. If one fails, cancel and drain the rest before re-raising."""
    tasks = [asyncio.ensure_future(c) for c in coros]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for t in tasks:
            t.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class GraphIngestor:
    """Builds a fresh `GraphEngine` from a `RecordSource`.

    Two phases: entity nodes (members, bills, committees) first, then the
    relationships between them. Reads within a phase run concurrently.
    Records with a missing key or an endpoint that was not loaded are skipped
    and counted, never fatal. A failing read aborts the whole build.
    """

    def __init__(
        self,
        source: RecordSource,
        *,
        bill_limit: int = 5000,
        cosponsor_limit: int = 20000,
        contribution_limit: int = 5000,
    ):
        self.source = source
        self.bill_limit = bill_limit
        self.cosponsor_limit = cosponsor_limit
        self.contribution_limit = contribution_limit

    async def build(self) -> tuple[GraphEngine, IngestStats]:
        t0 = time.perf_counter()
        b = _Build(graph=GraphEngine(), stats=IngestStats())
        logger.info("Building knowledge graph from source records")

        try:
            await _run_phase(
                self._ingest_members(b),
                self._ingest_bills(b),
                self._ingest_committees(b),
            )
            # relationship edges reference the phase-1 nodes
            await _run_phase(
                self._ingest_sponsorships(b),
                self._ingest_committee_memberships(b),
                self._ingest_cosponsorships(b),
                self._ingest_contributions(b),
            )
        except Exception as e:
            logger.error("Graph build aborted: %s", e)
            raise IngestionError(f"graph build failed: {e}") from e

        stats = b.stats
        stats.nodes = b.graph.node_count
        stats.edges = b.graph.edge_count
        stats.duration_ms = (time.perf_counter() - t0) * 1000.0

        if stats.skipped:
            logger.warning("Skipped %d unusable records: %s", stats.skipped_total, stats.skipped)
        logger.info(
            "Graph built: %d nodes, %d edges in %.0fms", stats.nodes, stats.edges, stats.duration_ms
        )
        return b.graph, stats

    # --- phase 1: entities ---

    async def _ingest_members(self, b: _Build) -> None:
        members = await self.source.fetch_members()
        for m in members:
            if not m.bioguide_id:
                b.skip("members")
                continue
            b.node(
                "members",
                Node(
                    id=member_key(m.bioguide_id),
                    type=NodeType.MEMBER,
                    label=m.full_name,
                    data={
                        "bioguideId": m.bioguide_id,
                        "party": m.party,
                        "state": m.state,
                        "district": m.district,
                        "chamber": m.chamber,
                    },
                ),
            )
        logger.info("Ingested %d member nodes", b.stats.nodes_by_category.get("members", 0))

    async def _ingest_bills(self, b: _Build) -> None:
        bills = await self.source.fetch_bills(self.bill_limit)
        for bill in bills:
            if not bill.bill_id:
                b.skip("bills")
                continue
            b.node(
                "bills",
                Node(
                    id=bill_key(bill.bill_id),
                    type=NodeType.BILL,
                    label=bill.title or f"{bill.bill_type or ''}{bill.bill_number or ''}",
                    data={
                        "billId": bill.bill_id,
                        "billType": bill.bill_type,
                        "billNumber": bill.bill_number,
                        "congress": bill.congress,
                        "policyArea": bill.policy_area,
                    },
                ),
            )
        logger.info("Ingested %d bill nodes", b.stats.nodes_by_category.get("bills", 0))

    async def _ingest_committees(self, b: _Build) -> None:
        committees = await self.source.fetch_committees()
        for c in committees:
            if not c.committee_code:
                b.skip("committees")
                continue
            b.node(
                "committees",
                Node(
                    id=committee_key(c.committee_code),
                    type=NodeType.COMMITTEE,
                    label=c.name,
                    data={
                        "committeeCode": c.committee_code,
                        "chamber": c.chamber,
                        "committeeType": c.committee_type,
                    },
                ),
            )
        logger.info("Ingested %d committee nodes", b.stats.nodes_by_category.get("committees", 0))

    # --- phase 2: relationships ---

    async def _ingest_sponsorships(self, b: _Build) -> None:
        rows = await self.source.fetch_sponsorships(self.bill_limit)
        for s in rows:
            if not s.sponsor_bioguide_id or not s.bill_id:
                b.skip("sponsorships")
                continue
            b.edge(
                "sponsorships",
                Edge(
                    source=member_key(s.sponsor_bioguide_id),
                    target=bill_key(s.bill_id),
                    type=EdgeType.SPONSORS,
                    weight=SPONSOR_WEIGHT,
                ),
            )
        logger.info("Ingested %d sponsorship edges", b.stats.edges_by_category.get("sponsorships", 0))

    async def _ingest_cosponsorships(self, b: _Build) -> None:
        rows = await self.source.fetch_cosponsorships(self.cosponsor_limit)
        for c in rows:
            if not c.member_bioguide_id or not c.bill_id:
                b.skip("cosponsorships")
                continue
            b.edge(
                "cosponsorships",
                Edge(
                    source=member_key(c.member_bioguide_id),
                    target=bill_key(c.bill_id),
                    type=EdgeType.COSPONSORS,
                    weight=ORIGINAL_COSPONSOR_WEIGHT if c.is_original_cosponsor else COSPONSOR_WEIGHT,
                ),
            )
        logger.info("Ingested %d cosponsorship edges", b.stats.edges_by_category.get("cosponsorships", 0))

    async def _ingest_committee_memberships(self, b: _Build) -> None:
        rows = await self.source.fetch_committee_memberships()
        for m in rows:
            if not m.member_bioguide_id or not m.committee_code:
                b.skip("committee_memberships")
                continue
            if m.is_chair:
                edge_type, weight = EdgeType.CHAIRS, CHAIR_WEIGHT
            elif m.is_ranking_member:
                edge_type, weight = EdgeType.MEMBER_OF, RANKING_MEMBER_WEIGHT
            else:
                edge_type, weight = EdgeType.MEMBER_OF, COMMITTEE_MEMBER_WEIGHT
            b.edge(
                "committee_memberships",
                Edge(
                    source=member_key(m.member_bioguide_id),
                    target=committee_key(m.committee_code),
                    type=edge_type,
                    weight=weight,
                ),
            )
        logger.info(
            "Ingested %d committee membership edges",
            b.stats.edges_by_category.get("committee_memberships", 0),
        )

    async def _ingest_contributions(self, b: _Build) -> None:
        rows = await self.source.fetch_contribution_totals(self.contribution_limit)
        for d in rows:
            if not d.contributor_name or not d.member_bioguide_id:
                b.skip("contributions")
                continue
            target = member_key(d.member_bioguide_id)
            if target not in b.graph:
                # e.g. member is no longer current
                b.skip("contributions")
                continue

            donor_id = donor_key(d.contributor_name)
            if donor_id not in b.graph:
                b.node(
                    "donors",
                    Node(
                        id=donor_id,
                        type=NodeType.DONOR,
                        label=d.contributor_name,
                        data={"contributorType": d.contributor_type},
                    ),
                )
            b.edge(
                "contributions",
                Edge(
                    source=donor_id,
                    target=target,
                    type=EdgeType.DONATED_TO,
                    weight=donation_weight(d.total_amount),
                    data={"totalAmount": d.total_amount, "count": d.count},
                ),
            )
        logger.info(
            "Ingested %d donor nodes and %d contribution edges",
            b.stats.nodes_by_category.get("donors", 0),
            b.stats.edges_by_category.get("contributions", 0),
        )
