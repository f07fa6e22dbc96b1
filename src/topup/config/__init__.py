"""
Configuration management with typed Pydantic models.

Provides file path parameterization and environment-aware
configuration loading.
"""

from topup.config.loader import build_config, load_config
from topup.config.settings import (
    IdPolicy,
    LoggingConfig,
    PathsConfig,
    PipelineConfig,
)

__all__ = [
    "IdPolicy",
    "LoggingConfig",
    "PathsConfig",
    "PipelineConfig",
    "build_config",
    "load_config",
]
