"""
Core validation logic for input files.

Checks each configured input against its record contract without
running the pipeline or writing a report.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from topup.config.settings import PipelineConfig
from topup.ingestion.base import IngestionError, MissingInputError, read_records
from topup.schemas.registry import RecordKind, RecordRegistry
from topup.utils.logging import get_logger

log = get_logger(__name__)

# Mapping from config path names to record kinds
DATASET_KIND_MAP: dict[str, str] = {
    "companies": "company",
    "users": "user",
}


@dataclass
class ValidationResult:
    """Result of validating a single input file."""

    dataset_name: str
    kind: str
    file_path: Path
    exists: bool
    parsed: bool
    total_records: int | None = None
    valid_records: int | None = None
    missing_keys: dict[str, int] = field(default_factory=dict)
    error_message: str | None = None

    @property
    def invalid_records(self) -> int | None:
        """Records that would be dropped by the pipeline."""
        if self.total_records is None or self.valid_records is None:
            return None
        return self.total_records - self.valid_records

    @property
    def usable(self) -> bool:
        """Whether the pipeline would get at least one record from this file."""
        return self.parsed and bool(self.valid_records)


def count_missing_keys(entries: list[Any], kind: RecordKind) -> dict[str, int]:
    """
    Count, per required key, how many entries lack it.

    Entries that are not JSON objects are counted under "<not an object>".
    """
    counts: Counter[str] = Counter()
    for entry in entries:
        if not isinstance(entry, dict):
            counts["<not an object>"] += 1
            continue
        for key in kind.required_keys:
            if key not in entry:
                counts[key] += 1
    return dict(counts)


class ValidationRunner:
    """
    Runs validation for all configured inputs.

    Reads every input file and reports how many records satisfy their
    contract.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize validation runner.

        Args:
            config: Pipeline configuration containing input paths.
        """
        self.config = config

    def run(self) -> list[ValidationResult]:
        """
        Run validation for all inputs in config.

        Returns:
            List of validation results, one per input file.
        """
        return [
            self._validate_dataset(dataset_name, kind_name)
            for dataset_name, kind_name in DATASET_KIND_MAP.items()
        ]

    def _validate_dataset(self, dataset_name: str, kind_name: str) -> ValidationResult:
        """
        Validate a single input file.

        Args:
            dataset_name: Path attribute name from PathsConfig.
            kind_name: Record kind name from RecordRegistry.

        Returns:
            ValidationResult for the input.
        """
        file_path = self.config.paths.resolve(dataset_name)
        kind = RecordRegistry.get(kind_name)

        try:
            entries = read_records(file_path)
        except MissingInputError:
            log.warning(
                "Input file not found", dataset=dataset_name, path=str(file_path)
            )
            return ValidationResult(
                dataset_name=dataset_name,
                kind=kind_name,
                file_path=file_path,
                exists=False,
                parsed=False,
                error_message="File not found",
            )
        except IngestionError as e:
            log.error(e.diagnostic, dataset=dataset_name, path=str(file_path))
            return ValidationResult(
                dataset_name=dataset_name,
                kind=kind_name,
                file_path=file_path,
                exists=True,
                parsed=False,
                error_message=e.detail or e.diagnostic,
            )

        valid = sum(1 for entry in entries if kind.predicate(entry))
        log.info(
            "Validation finished",
            dataset=dataset_name,
            kind=kind_name,
            records=len(entries),
            valid=valid,
        )
        return ValidationResult(
            dataset_name=dataset_name,
            kind=kind_name,
            file_path=file_path,
            exists=True,
            parsed=True,
            total_records=len(entries),
            valid_records=valid,
            missing_keys=count_missing_keys(entries, kind),
        )
