from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from legis_graph.knowledge_graph.engine import GraphEngine
from legis_graph.knowledge_graph.models import Edge, EdgeType, Node, NodeType
from legis_graph.knowledge_graph.records import (
    BillRecord,
    CommitteeMembershipRecord,
    CommitteeRecord,
    ContributionTotal,
    CosponsorshipRecord,
    MemberRecord,
    SponsorshipRecord,
)


@dataclass
class InMemoryRecordSource:
    """RecordSource over plain lists. `fail` names a fetch method to raise from."""

    members: list[MemberRecord] = field(default_factory=list)
    bills: list[BillRecord] = field(default_factory=list)
    committees: list[CommitteeRecord] = field(default_factory=list)
    sponsorships: list[SponsorshipRecord] = field(default_factory=list)
    cosponsorships: list[CosponsorshipRecord] = field(default_factory=list)
    memberships: list[CommitteeMembershipRecord] = field(default_factory=list)
    contributions: list[ContributionTotal] = field(default_factory=list)
    fail: str | None = None
    calls: list[str] = field(default_factory=list)

    def _rows(self, name, rows, limit=None):
        self.calls.append(name)
        if self.fail == name:
            raise ConnectionError(f"{name} unavailable")
        return list(rows if limit is None else rows[:limit])

    async def fetch_members(self):
        return self._rows("fetch_members", self.members)

    async def fetch_bills(self, limit):
        return self._rows("fetch_bills", self.bills, limit)

    async def fetch_committees(self):
        return self._rows("fetch_committees", self.committees)

    async def fetch_sponsorships(self, limit):
        return self._rows("fetch_sponsorships", self.sponsorships, limit)

    async def fetch_cosponsorships(self, limit):
        return self._rows("fetch_cosponsorships", self.cosponsorships, limit)

    async def fetch_committee_memberships(self):
        return self._rows("fetch_committee_memberships", self.memberships)

    async def fetch_contribution_totals(self, limit):
        return self._rows("fetch_contribution_totals", self.contributions, limit)


@pytest.fixture
def source() -> InMemoryRecordSource:
    return InMemoryRecordSource(
        members=[
            MemberRecord("A000360", "Lamar Alexander", "R", "TN", None, "Senate"),
            MemberRecord("S000033", "Bernard Sanders", "I", "VT", None, "Senate"),
            MemberRecord("P000197", "Nancy Pelosi", "D", "CA", 11, "House"),
        ],
        bills=[
            BillRecord("118-s-100", "Clean Water Act Amendments", "s", "100", 118, "Environment"),
            BillRecord("118-hr-42", None, "hr", "42", 118, "Health"),
        ],
        committees=[
            CommitteeRecord("SSHR", "Health, Education, Labor, and Pensions", "Senate", "Standing"),
            CommitteeRecord("HSAP", "Appropriations", "House", "Standing"),
        ],
        sponsorships=[
            SponsorshipRecord("118-s-100", "A000360"),
            SponsorshipRecord("118-hr-42", "P000197"),
        ],
        cosponsorships=[
            CosponsorshipRecord("118-s-100", "S000033", is_original_cosponsor=True),
            CosponsorshipRecord("118-hr-42", "S000033", is_original_cosponsor=False),
        ],
        memberships=[
            CommitteeMembershipRecord("SSHR", "A000360", is_chair=True),
            CommitteeMembershipRecord("SSHR", "S000033", is_ranking_member=True),
            CommitteeMembershipRecord("HSAP", "P000197"),
        ],
        contributions=[
            ContributionTotal("P000197", "ACME Corp PAC", "PAC", 25_000.0, 4),
            ContributionTotal("S000033", "ACME Corp PAC", "PAC", 4_000.0, 2),
            ContributionTotal("A000360", "Jane Q. Public", "Individual", 2_700.0, 1),
        ],
    )


@pytest.fixture
def scenario_graph() -> GraphEngine:
    """member:A --sponsors(3)--> bill:B"""
    g = GraphEngine()
    g.add_node(Node(id="member:A", type=NodeType.MEMBER, label="Member A", data={"party": "D"}))
    g.add_node(Node(id="bill:B", type=NodeType.BILL, label="Bill B", data={"policyArea": "Health"}))
    g.add_edge(Edge(source="member:A", target="bill:B", type=EdgeType.SPONSORS, weight=3))
    return g


def make_chain(k: int) -> GraphEngine:
    """n0 -> n1 -> ... -> nk, all members, unidirectional cosponsor edges."""
    g = GraphEngine()
    for i in range(k + 1):
        g.add_node(Node(id=f"member:n{i}", type=NodeType.MEMBER, label=f"n{i}"))
    for i in range(k):
        g.add_edge(Edge(source=f"member:n{i}", target=f"member:n{i + 1}", type=EdgeType.COSPONSORS))
    return g


@pytest.fixture
def chain():
    return make_chain
