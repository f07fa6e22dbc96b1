"""
Typed configuration models using Pydantic.

All configuration is defined here with explicit typing and validation.
Processing code never hardcodes file locations; it reads them from here.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class IdPolicy(str, Enum):
    """How company ids are turned into integer sort keys."""

    LOOSE = "loose"  # leading numeric prefix wins, anything else is 0
    STRICT = "strict"  # non-integer ids are rejected with a warning


class PathsConfig(BaseModel):
    """Input and output file paths.

    All paths are relative to data_root. Use resolve() to get full paths.
    Defaults are the fixed file names the report job has always used.
    """

    model_config = ConfigDict(frozen=True)

    data_root: Path = Field(
        default=Path("."), description="Root directory for input and output files"
    )
    companies: Path = Field(
        default=Path("companies.json"), description="Path to companies JSON array"
    )
    users: Path = Field(
        default=Path("users.json"), description="Path to users JSON array"
    )
    output: Path = Field(
        default=Path("output.txt"), description="Path to the rendered text report"
    )

    def resolve(self, path_attr: str) -> Path:
        """Resolve a relative path against data_root."""
        if path_attr == "data_root" or path_attr not in type(self).model_fields:
            msg = f"Unknown path '{path_attr}'"
            raise ValueError(msg)
        return self.data_root / getattr(self, path_attr)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(default=False, description="Render logs as JSON lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level is a standard logging level name."""
        level = v.upper()
        if level not in LOG_LEVELS:
            msg = f"Log level must be one of {', '.join(LOG_LEVELS)}, got: {v!r}"
            raise ValueError(msg)
        return level


class PipelineConfig(BaseModel):
    """Complete pipeline configuration."""

    model_config = ConfigDict(frozen=True)

    paths: PathsConfig = Field(default_factory=PathsConfig)
    id_policy: IdPolicy = Field(default=IdPolicy.LOOSE)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def companies_path(self) -> Path:
        """Resolved path to the companies file."""
        return self.paths.resolve("companies")

    @property
    def users_path(self) -> Path:
        """Resolved path to the users file."""
        return self.paths.resolve("users")

    @property
    def output_path(self) -> Path:
        """Resolved path to the report file."""
        return self.paths.resolve("output")
