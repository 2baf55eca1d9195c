"""Shared fixtures for monadkit tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from monadkit import ImmediateScheduler, ThreadScheduler, clear_log_hooks


@pytest.fixture
def immediate() -> ImmediateScheduler:
    """A scheduler that runs Task computations inline."""
    return ImmediateScheduler()


@pytest.fixture
def threads() -> Generator[ThreadScheduler]:
    """A private thread pool, shut down after the test."""
    with ThreadScheduler(max_workers=4) as scheduler:
        yield scheduler


@pytest.fixture(autouse=True)
def _clear_hooks() -> Generator[None]:
    clear_log_hooks()
    yield
    clear_log_hooks()
