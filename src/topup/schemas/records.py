"""
Required-field contracts for company and user records.

A record is a decoded JSON object. Validation checks key presence only:
a key holding null or false still counts as present.
"""

from collections.abc import Mapping
from typing import Any

Record = dict[str, Any]

COMPANY_REQUIRED_KEYS: tuple[str, ...] = ("id", "name", "top_up", "email_status")

USER_REQUIRED_KEYS: tuple[str, ...] = (
    "id",
    "first_name",
    "last_name",
    "email",
    "company_id",
    "email_status",
    "active_status",
    "tokens",
)


def has_required_keys(record: Any, required_keys: tuple[str, ...]) -> bool:
    """Return True if record is a mapping containing every required key."""
    if not isinstance(record, Mapping):
        return False
    return all(key in record for key in required_keys)


def valid_company(record: Any) -> bool:
    """Company records need id, name, top_up and email_status."""
    return has_required_keys(record, COMPANY_REQUIRED_KEYS)


def valid_user(record: Any) -> bool:
    """User records need identity, contact, ownership, flags and a token balance."""
    return has_required_keys(record, USER_REQUIRED_KEYS)
