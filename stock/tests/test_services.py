"""
Tests — StockAggregator: sums per (location, type), ordering, determinism,
labels of deleted locations.

@file stock/tests/test_services.py
"""

import pytest

from locations.records import LocationKind, LocationRef
from pallets.records import PalletType
from pallets.services import ApplyScanMove
from stock.exports import STOCK_HEADERS, to_csv
from stock.services import StockRow
from tests.factories import DriverFactory, PalletFactory, ShopFactory


pytestmark = pytest.mark.django_db

SHOP = LocationKind.SHOP.value
DEPOT = LocationKind.DEPOT.value
DRIVER = LocationKind.DRIVER.value


class TestAggregate:

    def test_empty_ledger(self, aggregator):
        assert aggregator.aggregate() == []

    def test_sums_per_location_and_type(self, aggregator):
        shop = ShopFactory(name='Centro')
        PalletFactory(location=LocationRef(SHOP, shop.id), qty=3)
        PalletFactory(location=LocationRef(SHOP, shop.id), qty=4)
        PalletFactory(location=LocationRef(SHOP, shop.id), qty=2, pallet_type=PalletType.CHEP.value)

        rows = aggregator.aggregate()
        assert rows == [
            StockRow(SHOP, shop.id, 'Centro', 'CHEP', 2),
            StockRow(SHOP, shop.id, 'Centro', 'EUR/EPAL', 7),
        ]

    def test_total_matches_ledger(self, aggregator, ledger):
        for n, (kind, location_id) in enumerate([(SHOP, 'shop_main'), (DRIVER, 'drv_1'), (SHOP, 'shop_main')]):
            ledger.apply_scan_move(ApplyScanMove(code=f'P{n}', to_kind=kind, to_id=location_id, qty=n + 2))
        assert sum(r.qty for r in aggregator.aggregate()) == sum(p.qty for p in ledger.all())

    def test_sorted_by_label_then_type(self, aggregator):
        zeta = ShopFactory(name='Zeta')
        alfa = DriverFactory(name='Alfa')
        PalletFactory(location=LocationRef(SHOP, zeta.id), pallet_type=PalletType.IFCO.value)
        PalletFactory(location=LocationRef(DRIVER, alfa.id), pallet_type=PalletType.IFCO.value)
        PalletFactory(location=LocationRef(DRIVER, alfa.id), pallet_type=PalletType.CHEP.value)

        rows = aggregator.aggregate()
        assert [(r.label, r.pallet_type) for r in rows] == [
            ('Alfa', 'CHEP'), ('Alfa', 'IFCO'), ('Zeta', 'IFCO'),
        ]

    def test_deleted_location_uses_generic_label(self, aggregator):
        PalletFactory(location=LocationRef(DRIVER, 'drv_deleted'), qty=5)
        rows = aggregator.aggregate()
        assert rows == [StockRow(DRIVER, 'drv_deleted', 'Driver', 'EUR/EPAL', 5)]

    def test_recompute_is_identical(self, aggregator):
        ShopFactory(name='Centro')
        PalletFactory(location=LocationRef(SHOP, 'shop_main'), qty=2)
        PalletFactory(location=LocationRef(DEPOT, 'depot_main'), qty=1)

        first = aggregator.aggregate()
        second = aggregator.aggregate()
        assert first == second

        def csv_of(rows):
            return to_csv(STOCK_HEADERS, [
                [r.location_kind, r.location_id, r.label, r.pallet_type, r.qty] for r in rows
            ]).encode()

        assert csv_of(first) == csv_of(second)

    def test_move_shifts_stock(self, aggregator, ledger):
        ledger.apply_scan_move(ApplyScanMove(code='P1', to_kind=SHOP, to_id='shop_main', qty=3))
        ledger.apply_scan_move(ApplyScanMove(code='P1', to_kind=DRIVER, to_id='drv_1', qty=3))
        rows = aggregator.aggregate()
        assert [(r.location_kind, r.location_id, r.qty) for r in rows] == [(DRIVER, 'drv_1', 3)]


class TestTotals:

    def test_totals_by_type(self, aggregator):
        PalletFactory(qty=2)
        PalletFactory(qty=3, location=LocationRef(SHOP, 'shop_main'))
        PalletFactory(qty=4, pallet_type=PalletType.CP1.value)
        assert aggregator.totals_by_type() == {'CP1': 4, 'EUR/EPAL': 5}
