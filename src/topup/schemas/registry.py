"""
Record kind registry.

Provides centralized access to the record contracts by name, so tooling
such as the validate command can iterate over every known input.
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from topup.schemas.records import (
    COMPANY_REQUIRED_KEYS,
    USER_REQUIRED_KEYS,
    valid_company,
    valid_user,
)


@dataclass(frozen=True)
class RecordKind:
    """Metadata about a registered record kind."""

    name: str
    required_keys: tuple[str, ...]
    predicate: Callable[[Any], bool]
    description: str


class RecordRegistry:
    """Centralized registry for all record kinds."""

    _kinds: ClassVar[dict[str, RecordKind]] = {
        "company": RecordKind(
            name="company",
            required_keys=COMPANY_REQUIRED_KEYS,
            predicate=valid_company,
            description="Companies with their top-up rate and email permission",
        ),
        "user": RecordKind(
            name="user",
            required_keys=USER_REQUIRED_KEYS,
            predicate=valid_user,
            description="Users with email consent, activity flag and token balance",
        ),
    }

    @classmethod
    def get(cls, name: str) -> RecordKind:
        """
        Get a record kind by name.

        Raises:
            KeyError: If the kind is not registered.
        """
        if name not in cls._kinds:
            available = ", ".join(sorted(cls._kinds))
            msg = f"Unknown record kind '{name}'. Available: {available}"
            raise KeyError(msg)
        return cls._kinds[name]

    @classmethod
    def list_kinds(cls) -> list[str]:
        """List all registered record kind names."""
        return list(cls._kinds)

    @classmethod
    def validate(cls, record: Any, name: str) -> bool:
        """Check a single record against the named kind."""
        return cls.get(name).predicate(record)
