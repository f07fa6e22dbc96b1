"""
Record contracts for the report inputs.

All required-field rules are defined here so every loader validates
records the same way at the system boundary.
"""

from topup.schemas.records import (
    COMPANY_REQUIRED_KEYS,
    USER_REQUIRED_KEYS,
    Record,
    has_required_keys,
    valid_company,
    valid_user,
)
from topup.schemas.registry import RecordKind, RecordRegistry

__all__ = [
    "COMPANY_REQUIRED_KEYS",
    "USER_REQUIRED_KEYS",
    "Record",
    "RecordKind",
    "RecordRegistry",
    "has_required_keys",
    "valid_company",
    "valid_user",
]
