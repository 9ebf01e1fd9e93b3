"""
Shared fixtures for the test suite.
"""

import os

import pytest

# Point settings at a throwaway database before the package is imported.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

from fakes import InMemoryDayLedgerRepository, seeded_directory  # noqa: E402
from timeledger.domain.services.reconciliation_engine import ReconciliationEngine  # noqa: E402


@pytest.fixture
def ledger_repository():
    return InMemoryDayLedgerRepository()


@pytest.fixture
def directory_repository():
    return seeded_directory()


@pytest.fixture
def engine(ledger_repository):
    return ReconciliationEngine(ledger_repository)
