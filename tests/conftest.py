"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
import structlog

from topup.config import PathsConfig, PipelineConfig


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a test (e.g. the CLI) installed."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def acme_company() -> dict[str, Any]:
    """Single company that allows email and tops up 10 tokens."""
    return {"id": 1, "name": "Acme", "top_up": 10, "email_status": True}


@pytest.fixture
def acme_users() -> list[dict[str, Any]]:
    """One emailed and one not emailed user of Acme."""
    return [
        {
            "id": 1,
            "first_name": "A",
            "last_name": "Smith",
            "email": "a@x",
            "company_id": 1,
            "email_status": True,
            "active_status": True,
            "tokens": 5,
        },
        {
            "id": 2,
            "first_name": "B",
            "last_name": "Jones",
            "email": "b@x",
            "company_id": 1,
            "email_status": False,
            "active_status": True,
            "tokens": 20,
        },
    ]


@pytest.fixture
def make_user() -> Callable[..., dict[str, Any]]:
    """Factory for valid user records with overridable fields."""
    counter = iter(range(1, 10_000))

    def factory(**overrides: Any) -> dict[str, Any]:
        user_id = next(counter)
        user: dict[str, Any] = {
            "id": user_id,
            "first_name": f"First{user_id}",
            "last_name": f"Last{user_id}",
            "email": f"user{user_id}@example.com",
            "company_id": 1,
            "email_status": True,
            "active_status": True,
            "tokens": 10,
        }
        user.update(overrides)
        return user

    return factory


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[[str, Any], Path]:
    """Write a value as JSON into tmp_path and return the file path."""

    def writer(name: str, data: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return writer


@pytest.fixture
def pipeline_config(tmp_path: Path) -> PipelineConfig:
    """Config pointing every path into tmp_path with the default file names."""
    return PipelineConfig(paths=PathsConfig(data_root=tmp_path))
