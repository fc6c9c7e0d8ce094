"""Plain records read from the relational source of truth.

Field names follow the source columns (snake_cased). Optional fields may be
None in the source; ingestion decides what is usable.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MemberRecord:
    bioguide_id: str | None
    full_name: str
    party: str | None = None
    state: str | None = None
    district: int | None = None
    chamber: str | None = None


@dataclass(frozen=True, slots=True)
class BillRecord:
    bill_id: str | None
    title: str | None = None
    bill_type: str | None = None
    bill_number: str | None = None
    congress: int | None = None
    policy_area: str | None = None


@dataclass(frozen=True, slots=True)
class CommitteeRecord:
    committee_code: str | None
    name: str
    chamber: str | None = None
    committee_type: str | None = None


@dataclass(frozen=True, slots=True)
class SponsorshipRecord:
    bill_id: str | None
    sponsor_bioguide_id: str | None


@dataclass(frozen=True, slots=True)
class CosponsorshipRecord:
    bill_id: str | None
    member_bioguide_id: str | None
    is_original_cosponsor: bool = False


@dataclass(frozen=True, slots=True)
class CommitteeMembershipRecord:
    committee_code: str | None
    member_bioguide_id: str | None
    is_chair: bool = False
    is_ranking_member: bool = False


@dataclass(frozen=True, slots=True)
class ContributionTotal:
    """Contributions aggregated by (member, contributor name, contributor type)."""

    member_bioguide_id: str | None
    contributor_name: str | None
    contributor_type: str | None
    total_amount: float
    count: int
