"""Shared pytest fixtures."""

from __future__ import annotations

import os

import pytest

from fakes import FakeConnection, orders_connection


@pytest.fixture
def connection() -> FakeConnection:
    """orders exists, customers does not; EXPLAIN and VERSION() succeed."""
    return orders_connection()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep AIEXPLAIN_* overrides from the developer's shell out of tests."""
    for key in list(os.environ):
        if key.startswith("AIEXPLAIN_"):
            monkeypatch.delenv(key)
