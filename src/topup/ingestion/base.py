"""
Loading of JSON record files.

Reads a JSON array from disk and keeps the records that satisfy a
predicate. File-level problems are logged and turn into an empty result;
records failing the predicate are dropped without any log output.
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from topup.schemas.records import Record
from topup.utils.logging import get_logger

log = get_logger(__name__)

Predicate = Callable[[Any], bool]


class IngestionError(Exception):
    """Base class for input file failures."""

    diagnostic = "Unable to read input file"

    def __init__(self, path: Path, detail: str | None = None) -> None:
        self.path = path
        self.detail = detail
        message = f"{self.diagnostic} - {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class MissingInputError(IngestionError):
    """The input file does not exist."""

    diagnostic = "Input file not found"


class MalformedInputError(IngestionError):
    """The input file is not a JSON array."""

    diagnostic = "Invalid JSON in input file"


class InputReadError(IngestionError):
    """The input file exists but could not be read."""


def read_records(path: Path) -> list[Any]:
    """
    Read and parse a JSON array file.

    Args:
        path: Path to the JSON file.

    Returns:
        The decoded array entries, unfiltered.

    Raises:
        MissingInputError: If the file does not exist.
        MalformedInputError: If the content is not valid JSON or not an array.
        InputReadError: On any other I/O or decoding failure.
    """
    try:
        with path.open(encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError as e:
        raise MissingInputError(path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise InputReadError(path, f"{type(e).__name__}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedInputError(path, str(e)) from e
    except RecursionError as e:
        raise MalformedInputError(path, "nesting too deep") from e

    if not isinstance(data, list):
        raise MalformedInputError(path, f"expected an array, got {type(data).__name__}")

    return data


class RecordLoader:
    """
    Loads one JSON record file and filters it with a predicate.

    The predicate is any callable taking a decoded entry and returning a
    bool, typically one of the validators in topup.schemas.
    """

    def __init__(self, path: Path, predicate: Predicate) -> None:
        """
        Initialize record loader.

        Args:
            path: Path to the JSON array file.
            predicate: Record filter; entries for which it is false are dropped.
        """
        self.path = path
        self.predicate = predicate

    def load(self) -> list[Record]:
        """
        Load and filter records.

        Returns:
            Records passing the predicate, in file order. Empty if the
            file is missing, malformed or unreadable.
        """
        try:
            entries = read_records(self.path)
        except IngestionError as e:
            log.error(e.diagnostic, path=str(self.path), detail=e.detail)
            return []

        records = [entry for entry in entries if self.predicate(entry)]
        log.debug("Loaded records", path=str(self.path), records=len(records))
        return records


def load_records(path: Path, predicate: Predicate) -> list[Record]:
    """
    Load a JSON array file keeping only records accepted by predicate.

    Args:
        path: Path to the JSON array file.
        predicate: Record filter.

    Returns:
        Accepted records in file order, or an empty list on file failure.
    """
    return RecordLoader(Path(path), predicate).load()
