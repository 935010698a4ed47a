"""Pytest fixtures/config for Goalline tests."""

import os
import sys

import pytest


def pytest_sessionstart(session) -> None:  # type: ignore[unused-argument]
    repo_root = os.path.dirname(os.path.dirname(__file__))
    src_path = os.path.join(repo_root, "src")
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


# Shared scenario: per-player points [3, 9, 6, 0, 3, 9]
GOALS = [0, 1, 1, 0, 0, 1]
ASSISTS = [1, 1, 0, 0, 1, 1]


@pytest.fixture
def goals():
    return list(GOALS)


@pytest.fixture
def assists():
    return list(ASSISTS)


@pytest.fixture
def sink():
    from goalline.engine.events import InMemoryEventSink
    return InMemoryEventSink()


@pytest.fixture
def treasury():
    from goalline.engine.treasury import InMemoryTreasury
    return InMemoryTreasury(reserve_balance=100_000_000)


@pytest.fixture
def ledger(treasury, sink):
    """Initialized ledger with admin 'admin', fixed clock at 1000."""
    from goalline.engine.ledger import Ledger
    ledger = Ledger(treasury=treasury, sink=sink, clock=lambda: 1000)
    ledger.initialize("admin")
    return ledger
