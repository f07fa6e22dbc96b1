"""
Joining users to companies and splitting them into email cohorts.

Companies are ordered by their integer id. Each company's users are
split into those who were emailed (company and user both allow email)
and those who were not, with each bucket ordered by last name.
"""

import json
import math
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from topup.config.settings import IdPolicy
from topup.schemas.records import Record
from topup.utils.logging import get_logger

log = get_logger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+(?:_\d+)*)")
_STRICT_INT = re.compile(r"[+-]?\d+")


def coerce_id(value: Any) -> int:
    """
    Best-effort integer conversion of an id.

    Integers pass through, floats are truncated, and strings yield their
    leading integer prefix ("12abc" -> 12, "abc" -> 0). Anything else,
    including null and booleans, is 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1).replace("_", "")) if match else 0
    return 0


def strict_id(value: Any) -> int:
    """
    Integer conversion that rejects anything but an integer or digit string.

    Raises:
        ValueError: If the value is not integer-like.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and _STRICT_INT.fullmatch(value):
        return int(value)
    msg = f"Company id is not an integer: {value!r}"
    raise ValueError(msg)


def is_set(value: Any) -> bool:
    """Flag truthiness of the source data: only null and false are unset."""
    return value is not None and value is not False


def join_key(value: Any) -> tuple[str, Any]:
    """
    Hashable, type-sensitive key for matching company_id against id.

    1, 1.0, "1" and true are all distinct keys.
    """
    try:
        hash(value)
    except TypeError:
        return type(value).__name__, json.dumps(value, sort_keys=True, default=str)
    return type(value).__name__, value


def last_name_key(user: Record) -> str:
    """Sort key for users: last name as text, null as empty."""
    value = user.get("last_name")
    return "" if value is None else str(value)


@dataclass
class EnrichedCompany:
    """A company record with its users split into email cohorts."""

    record: Record
    emailed_users: list[Record] = field(default_factory=list)
    not_emailed_users: list[Record] = field(default_factory=list)

    @property
    def id(self) -> Any:
        return self.record["id"]

    @property
    def name(self) -> Any:
        return self.record["name"]

    @property
    def top_up(self) -> Any:
        return self.record["top_up"]

    @property
    def users(self) -> list[Record]:
        """All users of the company, emailed first."""
        return [*self.emailed_users, *self.not_emailed_users]

    def as_record(self) -> Record:
        """Company mapping with the derived bucket fields attached."""
        return {
            **self.record,
            "emailed_users": list(self.emailed_users),
            "not_emailed_users": list(self.not_emailed_users),
        }


def group_users(users: Iterable[Record]) -> dict[tuple[str, Any], list[Record]]:
    """Group users by company_id, keeping input order within each group."""
    groups: dict[tuple[str, Any], list[Record]] = {}
    for user in users:
        groups.setdefault(join_key(user["company_id"]), []).append(user)
    return groups


def partition_users(
    company: Record, users: Iterable[Record]
) -> tuple[list[Record], list[Record]]:
    """
    Split a company's users into emailed and not emailed buckets.

    A user is emailed only when both the company and the user have
    email_status set. Both buckets are sorted by last name (stable).

    Returns:
        Tuple of (emailed_users, not_emailed_users).
    """
    company_emails = is_set(company["email_status"])
    emailed: list[Record] = []
    not_emailed: list[Record] = []
    for user in users:
        if company_emails and is_set(user["email_status"]):
            emailed.append(user)
        else:
            not_emailed.append(user)
    return sorted(emailed, key=last_name_key), sorted(not_emailed, key=last_name_key)


def sort_companies(
    companies: Iterable[Record], id_policy: IdPolicy = IdPolicy.LOOSE
) -> list[Record]:
    """
    Order companies ascending by integer id.

    Under the strict policy, companies with a non-integer id are dropped
    with a warning.
    """
    if id_policy is IdPolicy.LOOSE:
        return sorted(companies, key=lambda company: coerce_id(company["id"]))

    keyed: list[tuple[int, Record]] = []
    for company in companies:
        try:
            keyed.append((strict_id(company["id"]), company))
        except ValueError:
            log.warning(
                "Rejected company with non-integer id", id=repr(company["id"])
            )
    keyed.sort(key=lambda item: item[0])
    return [company for _, company in keyed]


def aggregate(
    companies: Sequence[Record],
    users: Sequence[Record],
    *,
    id_policy: IdPolicy = IdPolicy.LOOSE,
) -> list[EnrichedCompany]:
    """
    Attach email cohorts to every company.

    Args:
        companies: Validated company records.
        users: Validated user records.
        id_policy: How company ids are converted for ordering.

    Returns:
        Companies ordered by id, each with sorted buckets. Empty when
        either input is empty. Users whose company_id matches no company
        do not appear anywhere.
    """
    if not companies or not users:
        return []

    users_by_company = group_users(users)

    enriched: list[EnrichedCompany] = []
    for company in sort_companies(companies, id_policy):
        company_users = users_by_company.get(join_key(company["id"]), [])
        emailed, not_emailed = partition_users(company, company_users)
        enriched.append(
            EnrichedCompany(
                record=company,
                emailed_users=emailed,
                not_emailed_users=not_emailed,
            )
        )

    log.info(
        "Aggregated users by company",
        companies=len(enriched),
        users=sum(len(company.users) for company in enriched),
    )
    return enriched
