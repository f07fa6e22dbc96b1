"""
Token top-up pipeline implementation.

Loads both inputs, joins users to companies and writes the report.
Every recognized failure is logged at the stage where it happens and
ends the run early instead of raising.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from topup.aggregation.core import EnrichedCompany, aggregate
from topup.config.settings import PathsConfig, PipelineConfig
from topup.ingestion.base import load_records
from topup.report.writer import ReportRenderError, write_report
from topup.schemas.records import Record, valid_company, valid_user
from topup.utils.logging import get_logger, log_context

log = get_logger(__name__)


@dataclass
class PipelineResult:
    """
    Result of a pipeline run.

    Attributes:
        n_companies: Valid company records loaded.
        n_users: Valid user records loaded.
        companies: Enriched companies in report order (empty if skipped).
        output_path: Path of the written report, None if nothing was written.
        skipped: True when no report was attempted, because an input had
            no valid records or no company survived the id policy.
    """

    n_companies: int
    n_users: int
    companies: list[EnrichedCompany] = field(default_factory=list)
    output_path: Path | None = None
    skipped: bool = False

    @property
    def written(self) -> bool:
        """Whether a report file was produced."""
        return self.output_path is not None

    @property
    def n_reported_users(self) -> int:
        """Users that appear in the report (orphans excluded)."""
        return sum(len(company.users) for company in self.companies)


class TopUpPipeline:
    """
    Company token top-up report pipeline.

    Stages: load companies, load users, aggregate, write report.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize pipeline.

        Args:
            config: Pipeline configuration with input and output paths.
        """
        self.config = config

    def load_companies(self) -> list[Record]:
        """Load valid company records."""
        return load_records(self.config.companies_path, valid_company)

    def load_users(self) -> list[Record]:
        """Load valid user records."""
        return load_records(self.config.users_path, valid_user)

    def run(self) -> PipelineResult:
        """
        Run the full pipeline.

        Returns:
            PipelineResult describing what was loaded and written.
        """
        with log_context(
            companies_path=str(self.config.companies_path),
            users_path=str(self.config.users_path),
        ):
            companies = self.load_companies()
            users = self.load_users()
            log.info("Loaded records", companies=len(companies), users=len(users))

            result = PipelineResult(n_companies=len(companies), n_users=len(users))

            if not companies or not users:
                result.skipped = True
                return result

            result.companies = aggregate(
                companies, users, id_policy=self.config.id_policy
            )
            if not result.companies:
                result.skipped = True
                return result

            output_path = self.config.output_path
            try:
                result.output_path = write_report(result.companies, output_path)
            except ReportRenderError as e:
                log.error(
                    "Unable to render report",
                    path=str(output_path),
                    company_id=repr(e.company_id),
                    detail=e.detail,
                )

            return result


def run_pipeline(
    config: PipelineConfig | None = None,
    **paths: Any,
) -> PipelineResult:
    """
    Run the top-up pipeline.

    Args:
        config: Pipeline configuration. Defaults to companies.json,
            users.json and output.txt in the working directory.
        **paths: PathsConfig field overrides (data_root, companies,
            users, output).

    Returns:
        PipelineResult.
    """
    if config is None:
        config = PipelineConfig()
    if paths:
        unknown = sorted(set(paths) - set(PathsConfig.model_fields))
        if unknown:
            msg = f"Unknown path override(s): {', '.join(unknown)}"
            raise ValueError(msg)
        merged = PathsConfig(
            **{**config.paths.model_dump(), **{k: Path(v) for k, v in paths.items()}}
        )
        config = config.model_copy(update={"paths": merged})

    return TopUpPipeline(config).run()
