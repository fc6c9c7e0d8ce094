from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import asyncpg
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from legis_graph.knowledge_graph.records import (
    BillRecord,
    CommitteeMembershipRecord,
    CommitteeRecord,
    ContributionTotal,
    CosponsorshipRecord,
    MemberRecord,
    SponsorshipRecord,
)

TransientDbError = (
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.ConnectionDoesNotExistError,
    asyncpg.exceptions.TooManyConnectionsError,
    ConnectionError,
    TimeoutError,
)


def transient_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(5),
        wait=wait_exponential_jitter(initial=0.5, max=10.0),
        retry=retry_if_exception_type(TransientDbError),
    )


# Table and column names follow the legislative database schema
# (PascalCase tables, camelCase columns, hence the quoting).

MEMBERS_SQL = """
SELECT "bioguideId", "fullName", "party", "state", "district", "chamber"
FROM "Member"
WHERE "currentMember" = true
"""

BILLS_SQL = """
SELECT "billId", "title", "billType", "billNumber", "congress", "policyArea"
FROM "Bill"
ORDER BY "latestActionDate" DESC NULLS LAST
LIMIT $1
"""

COMMITTEES_SQL = """
SELECT "committeeCode", "name", "chamber", "committeeType"
FROM "Committee"
"""

# Same ordering as BILLS_SQL so sponsors line up with the loaded bills.
SPONSORSHIPS_SQL = """
SELECT "billId", "sponsorBioguideId"
FROM "Bill"
WHERE "sponsorBioguideId" IS NOT NULL
ORDER BY "latestActionDate" DESC NULLS LAST
LIMIT $1
"""

COSPONSORS_SQL = """
SELECT "billId", "memberBioguideId", "isOriginalCosponsor"
FROM "Cosponsor"
LIMIT $1
"""

COMMITTEE_MEMBERSHIPS_SQL = """
SELECT "committeeCode", "memberBioguideId", "isChair", "isRankingMember"
FROM "CommitteeMembership"
"""

CONTRIBUTION_TOTALS_SQL = """
SELECT "memberBioguideId", "contributorName", "contributorType",
       SUM("amount") AS total_amount, COUNT(*) AS n
FROM "CampaignContribution"
GROUP BY "memberBioguideId", "contributorName", "contributorType"
ORDER BY total_amount DESC NULLS LAST
LIMIT $1
"""


@dataclass
class PostgresRecordSource:
    """`RecordSource` backed by the legislative Postgres database."""

    pool: asyncpg.Pool

    @classmethod
    async def connect(cls, dsn: str) -> "PostgresRecordSource":
        pool = await asyncpg.create_pool(dsn=dsn, min_size=1, max_size=10)
        return cls(pool=pool)

    async def close(self) -> None:
        await self.pool.close()

    @transient_retry()
    async def _fetch(self, query: str, *args: Any) -> list[asyncpg.Record]:
        async with self.pool.acquire() as con:
            return await con.fetch(query, *args)

    async def fetch_members(self) -> list[MemberRecord]:
        rows = await self._fetch(MEMBERS_SQL)
        return [
            MemberRecord(
                bioguide_id=r["bioguideId"],
                full_name=r["fullName"],
                party=r["party"],
                state=r["state"],
                district=r["district"],
                chamber=r["chamber"],
            )
            for r in rows
        ]

    async def fetch_bills(self, limit: int) -> list[BillRecord]:
        rows = await self._fetch(BILLS_SQL, limit)
        return [
            BillRecord(
                bill_id=r["billId"],
                title=r["title"],
                bill_type=r["billType"],
                bill_number=None if r["billNumber"] is None else str(r["billNumber"]),
                congress=r["congress"],
                policy_area=r["policyArea"],
            )
            for r in rows
        ]

    async def fetch_committees(self) -> list[CommitteeRecord]:
        rows = await self._fetch(COMMITTEES_SQL)
        return [
            CommitteeRecord(
                committee_code=r["committeeCode"],
                name=r["name"],
                chamber=r["chamber"],
                committee_type=r["committeeType"],
            )
            for r in rows
        ]

    async def fetch_sponsorships(self, limit: int) -> list[SponsorshipRecord]:
        rows = await self._fetch(SPONSORSHIPS_SQL, limit)
        return [SponsorshipRecord(bill_id=r["billId"], sponsor_bioguide_id=r["sponsorBioguideId"]) for r in rows]

    async def fetch_cosponsorships(self, limit: int) -> list[CosponsorshipRecord]:
        rows = await self._fetch(COSPONSORS_SQL, limit)
        return [
            CosponsorshipRecord(
                bill_id=r["billId"],
                member_bioguide_id=r["memberBioguideId"],
                is_original_cosponsor=bool(r["isOriginalCosponsor"]),
            )
            for r in rows
        ]

    async def fetch_committee_memberships(self) -> list[CommitteeMembershipRecord]:
        rows = await self._fetch(COMMITTEE_MEMBERSHIPS_SQL)
        return [
            CommitteeMembershipRecord(
                committee_code=r["committeeCode"],
                member_bioguide_id=r["memberBioguideId"],
                is_chair=bool(r["isChair"]),
                is_ranking_member=bool(r["isRankingMember"]),
            )
            for r in rows
        ]

    async def fetch_contribution_totals(self, limit: int) -> list[ContributionTotal]:
        rows = await self._fetch(CONTRIBUTION_TOTALS_SQL, limit)
        return [
            ContributionTotal(
                member_bioguide_id=r["memberBioguideId"],
                contributor_name=r["contributorName"],
                contributor_type=r["contributorType"],
                # numeric comes back as Decimal
                total_amount=float(r["total_amount"] or 0),
                count=int(r["n"]),
            )
            for r in rows
        ]
