from __future__ import annotations

import re

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def member_key(bioguide_id: str) -> str:
    return f"member:{bioguide_id}"


def bill_key(bill_id: str) -> str:
    return f"bill:{bill_id}"


def committee_key(committee_code: str) -> str:
    return f"committee:{committee_code}"


def donor_key(contributor_name: str) -> str:
    """Node id for a donor, derived from its display name.

    Every non-alphanumeric character becomes ``_`` and the result is lowercased,
    so "Acme-Corp" and "ACME CORP" map to the same donor node.
    """
    return f"donor:{_NON_ALNUM.sub('_', contributor_name).lower()}"
