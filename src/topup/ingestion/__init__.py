"""
Data ingestion layer for loading raw records with contract validation.

All input loading happens through this module to ensure
consistent validation at system boundaries.
"""

from topup.ingestion.base import (
    IngestionError,
    InputReadError,
    MalformedInputError,
    MissingInputError,
    RecordLoader,
    load_records,
    read_records,
)

__all__ = [
    "IngestionError",
    "InputReadError",
    "MalformedInputError",
    "MissingInputError",
    "RecordLoader",
    "load_records",
    "read_records",
]
