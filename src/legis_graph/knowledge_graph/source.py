from __future__ import annotations

from typing import Protocol

from .records import (
    BillRecord,
    CommitteeMembershipRecord,
    CommitteeRecord,
    ContributionTotal,
    CosponsorshipRecord,
    MemberRecord,
    SponsorshipRecord,
)


class RecordSource(Protocol):
    """Batch reads the graph is built from.

    Implementations raise on read failure; the build is aborted in that case.
    """

    async def fetch_members(self) -> list[MemberRecord]:
        """Current members only."""
        ...

    async def fetch_bills(self, limit: int) -> list[BillRecord]:
        """Most recently acted-on bills first."""
        ...

    async def fetch_committees(self) -> list[CommitteeRecord]: ...

    async def fetch_sponsorships(self, limit: int) -> list[SponsorshipRecord]: ...

    async def fetch_cosponsorships(self, limit: int) -> list[CosponsorshipRecord]: ...

    async def fetch_committee_memberships(self) -> list[CommitteeMembershipRecord]: ...

    async def fetch_contribution_totals(self, limit: int) -> list[ContributionTotal]:
        """Largest totals first."""
        ...
