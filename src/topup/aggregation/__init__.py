"""Aggregation of users into per-company email cohorts."""

from topup.aggregation.core import (
    EnrichedCompany,
    aggregate,
    coerce_id,
    group_users,
    is_set,
    join_key,
    partition_users,
    sort_companies,
    strict_id,
)

__all__ = [
    "EnrichedCompany",
    "aggregate",
    "coerce_id",
    "group_users",
    "is_set",
    "join_key",
    "partition_users",
    "sort_companies",
    "strict_id",
]
