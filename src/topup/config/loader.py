"""
Configuration loading utilities.

Supports environment variable interpolation and config inheritance.
Every key is optional; an empty or missing config yields the defaults.
"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from topup.config.settings import (
    IdPolicy,
    LoggingConfig,
    PathsConfig,
    PipelineConfig,
)

PATHS_KEYS = frozenset({"data_root", "root", "companies", "users", "output"})


def _interpolate_env_vars(value: str) -> str:
    """
    Interpolate environment variables in string values.

    Supports ${VAR} and ${VAR:default} syntax.
    """
    pattern = r"\$\{([^}:]+)(?::([^}]*))?\}"

    def replacer(match: re.Match[str]) -> str:
        var_name = match.group(1)
        default = match.group(2)
        return os.environ.get(var_name, default if default is not None else "")

    return re.sub(pattern, replacer, value)


def _process_config_values(obj: Any) -> Any:
    """Recursively process config values for env var interpolation."""
    if isinstance(obj, str):
        return _interpolate_env_vars(obj)
    if isinstance(obj, dict):
        return {k: _process_config_values(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_process_config_values(item) for item in obj]
    return obj


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _normalize_paths(data: dict[str, Any]) -> dict[str, Any]:
    """Check the paths section and rename the root alias to data_root."""
    paths_data = data.get("paths")
    if not paths_data:
        return data
    if not isinstance(paths_data, dict):
        msg = "Config paths must be a mapping"
        raise ValueError(msg)

    unknown = sorted(set(paths_data) - PATHS_KEYS)
    if unknown:
        msg = f"Unknown key(s) in paths: {', '.join(unknown)}"
        raise ValueError(msg)
    if "root" not in paths_data:
        return data
    if "data_root" in paths_data:
        msg = "Config paths may set 'data_root' or its alias 'root', not both"
        raise ValueError(msg)

    paths = {k: v for k, v in paths_data.items() if k != "root"}
    paths["data_root"] = paths_data["root"]
    return {**data, "paths": paths}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML file and process environment variables."""
    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        msg = f"Config file must contain a mapping: {path}"
        raise ValueError(msg)
    return _normalize_paths(_process_config_values(data)) if data else {}


def build_config(data: dict[str, Any]) -> PipelineConfig:
    """
    Build a PipelineConfig from an already merged config mapping.

    Recognized layout:

        paths:
          data_root: ./data   # "root" is accepted as an alias
          companies: companies.json
          users: users.json
          output: output.txt
        id_policy: loose
        logging:
          level: INFO
          json: false
    """
    paths_data = _normalize_paths(data).get("paths") or {}
    data_root = paths_data.get("data_root")

    defaults = PathsConfig()
    paths = PathsConfig(
        data_root=Path(data_root) if data_root else defaults.data_root,
        companies=Path(paths_data["companies"])
        if paths_data.get("companies")
        else defaults.companies,
        users=Path(paths_data["users"]) if paths_data.get("users") else defaults.users,
        output=Path(paths_data["output"])
        if paths_data.get("output")
        else defaults.output,
    )

    id_policy = IdPolicy(str(data.get("id_policy", IdPolicy.LOOSE.value)).lower())

    logging_data = data.get("logging") or {}
    logging = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        json_output=bool(logging_data.get("json", False)),
    )

    return PipelineConfig(paths=paths, id_policy=id_policy, logging=logging)


def load_config(
    config_path: Path | None = None,
    base_path: Path | None = None,
) -> PipelineConfig:
    """
    Load pipeline configuration from YAML file(s).

    Args:
        config_path: Path to the main configuration file. None means defaults.
        base_path: Optional path to base configuration for inheritance.

    Returns:
        Fully validated PipelineConfig instance.
    """
    if config_path is None:
        return build_config(load_yaml(base_path) if base_path is not None else {})

    if base_path is not None:
        base_data = load_yaml(base_path)
    else:
        # Try to find base.yaml in same directory
        potential_base = config_path.parent / "base.yaml"
        base_data = (
            load_yaml(potential_base)
            if potential_base.exists() and potential_base != config_path
            else {}
        )

    main_data = load_yaml(config_path)

    return build_config(_deep_merge(base_data, main_data))
