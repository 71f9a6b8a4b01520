"""
Tests — PersistentStore: round-trips, corrupt payload recovery, capped prepend,
malformed location entries.

@file core/tests/test_store.py
"""

import pytest

from core.models import StoreRecord
from core.store import prepend_capped
from locations.records import LocationRef
from pallets.services import ApplyScanMove
from stock.exports import build_export
from tests.factories import PalletFactory


pytestmark = pytest.mark.django_db


class TestRead:

    def test_missing_key_returns_default(self, store):
        assert store.read('pallets', []) == []
        assert store.read_text('lastScan') == ''

    def test_write_then_read(self, store):
        store.write('shops', [{'id': 'shop_1', 'name': 'Centro'}])
        assert store.read_list('shops') == [{'id': 'shop_1', 'name': 'Centro'}]
        assert StoreRecord.objects.filter(key='shops').count() == 1

    def test_write_overwrites_whole_collection(self, store):
        store.write('shops', [{'id': 'a'}, {'id': 'b'}])
        store.write('shops', [{'id': 'c'}])
        assert store.read_list('shops') == [{'id': 'c'}]
        assert StoreRecord.objects.count() == 1

    def test_corrupt_payload_falls_back_to_empty(self, store):
        StoreRecord.objects.create(key='pallets', payload='[{"id": "p1",')
        assert store.read_list('pallets') == []

    def test_non_list_payload_falls_back_to_empty(self, store):
        store.write('history', {'not': 'a list'})
        assert store.read_list('history') == []

    def test_malformed_entries_are_dropped(self, store):
        store.write('history', [{'id': 's1'}, 'garbage', 42, {'id': 's2'}])
        assert store.read_list('history') == [{'id': 's1'}, {'id': 's2'}]

    def test_read_text_ignores_non_string(self, store):
        store.write('lastScan', ['P1'])
        assert store.read_text('lastScan') == ''

    def test_delete(self, store):
        store.write('history', [{'id': 's1'}])
        store.write('stockMoves', [{'id': 'm1'}])
        store.delete('history', 'stockMoves')
        assert not StoreRecord.objects.exists()


class TestAtomic:

    def test_rollback_discards_all_writes(self, store):
        store.write('pallets', [{'id': 'p0'}])
        with pytest.raises(RuntimeError):
            with store.atomic():
                store.write('pallets', [{'id': 'p1'}])
                store.write('stockMoves', [{'id': 'm1'}])
                raise RuntimeError('boom')
        assert store.read_list('pallets') == [{'id': 'p0'}]
        assert store.read_list('stockMoves') == []


class TestPrependCapped:

    def test_inserts_at_head(self):
        assert prepend_capped([2, 1], 3, 10) == [3, 2, 1]

    def test_evicts_oldest_past_limit(self):
        assert prepend_capped([3, 2, 1], 4, 3) == [4, 3, 2]

    def test_zero_limit_means_unbounded(self):
        assert prepend_capped([1] * 5, 2, 0) == [2, 1, 1, 1, 1, 1]


class TestMalformedLocationEntries:

    def test_entry_without_id_is_dropped(self, store, registry):
        store.write('shops', [{'name': 'no id'}, {'id': 'shop_ok', 'name': 'Centro'}])
        assert [s.id for s in registry.list('NEGOZIO')] == ['shop_ok']

    def test_entry_without_name_is_kept_with_generic_label(self, store, registry):
        store.write('shops', [{'id': 'shop_x'}])
        shops = registry.list('NEGOZIO')
        assert [s.id for s in shops] == ['shop_x']
        assert registry.resolve_label('NEGOZIO', 'shop_x') == 'Shop'

    def test_only_malformed_depots_fall_back_to_default(self, store, ledger):
        store.write('depots', [{'name': 'no id'}])
        result = ledger.apply_scan_move(ApplyScanMove(code='P1', to_kind='NEGOZIO', to_id='shop_main'))
        assert result.from_ == LocationRef('DEPOSITO', 'depot_main')
        assert [d['id'] for d in store.read_list('depots')] == ['depot_main']

    def test_stock_and_exports_survive(self, store, aggregator):
        store.write('depots', [{'name': 'no id'}, {'id': 'depot_2'}])
        PalletFactory(location=LocationRef('DEPOSITO', 'depot_2'), qty=2)
        assert [(r.label, r.qty) for r in aggregator.aggregate()] == [('Depot', 2)]
        _, text = build_export('depots')
        assert text.splitlines()[1].startswith('depot_2,')
