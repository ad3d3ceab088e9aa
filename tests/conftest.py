"""Shared fixtures for thaisave-core tests."""

import os
from decimal import Decimal

import pytest
import structlog

from thaisave_core import SavingsCalculator


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test (e.g. the CLI) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep THAISAVE_* variables from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("THAISAVE_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def calculator() -> SavingsCalculator:
    return SavingsCalculator()


@pytest.fixture
def make_request():
    """Build a request payload with full-year 2025 defaults."""

    def _make(**overrides) -> dict:
        payload = {
            "principal_start": Decimal("100000"),
            "annual_rate_pct": Decimal("1"),
            "start_date": "2025-01-01",
            "end_date": "2025-12-31",
            "events": [],
        }
        payload.update(overrides)
        return payload

    return _make
