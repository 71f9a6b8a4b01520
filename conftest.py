"""
Pallet Tracker — Root conftest for pytest

Shared fixtures available to all test modules.

@file conftest.py
"""

import pytest
from rest_framework.test import APIClient

from core.store import PersistentStore
from locations.services import LocationRegistry
from pallets.services import MissingPalletRegistry, MovementRecorder, PalletLedger
from scans.services import ScanHistoryLog
from stock.services import StockAggregator


@pytest.fixture
def api_client():
    """DRF test client (the API has no authentication)."""
    return APIClient()


@pytest.fixture
def store(db):
    return PersistentStore()


@pytest.fixture
def registry(store):
    return LocationRegistry(store)


@pytest.fixture
def movements(store):
    return MovementRecorder(store)


@pytest.fixture
def ledger(store, registry, movements):
    return PalletLedger(store, registry, movements)


@pytest.fixture
def history(store):
    return ScanHistoryLog(store)


@pytest.fixture
def missing(store):
    return MissingPalletRegistry(store)


@pytest.fixture
def aggregator(ledger, registry):
    return StockAggregator(ledger, registry)
