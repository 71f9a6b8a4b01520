"""
Stock — CSV Exports

Fixed-header CSV renditions of stock, ledger, movements, scan history
and location registries. A field is quoted, with inner quotes doubled,
only when it contains the separator, a quote or a line break; missing values
are written as empty fields. The excel dialect uses ';' as separator and
starts with a UTF-8 BOM.

@file stock/exports.py
"""

import csv
import io
from typing import Callable, Iterable, Sequence

from django.utils import timezone

from core.exceptions import NotFoundError, ValidationError
from locations.records import LocationKind
from locations.services import LocationRegistry
from pallets.services import MovementRecorder, PalletLedger
from scans.services import ScanHistoryLog

from .services import StockAggregator

STOCK_HEADERS = ['location_kind', 'location_id', 'label', 'pallet_type', 'qty']
PALLET_HEADERS = [
    'id', 'code', 'alt_code', 'pallet_type', 'qty',
    'location_kind', 'location_id', 'location_label', 'note', 'updated_at',
]
MOVE_HEADERS = [
    'ts', 'code', 'pallet_type', 'qty',
    'from_kind', 'from_id', 'from_label', 'to_kind', 'to_id', 'to_label', 'note',
]
HISTORY_HEADERS = [
    'ts', 'code', 'source', 'lat', 'lng', 'accuracy',
    'declared_kind', 'declared_id', 'pallet_type', 'qty',
]
LOCATION_HEADERS = ['id', 'name', 'address', 'phone', 'notes', 'lat', 'lng', 'active', 'created_at']

UTF8_BOM = '\ufeff'

# dialect -> (delimiter, leading BOM)
CSV_DIALECTS = {
    'standard': (',', False),
    'excel': (';', True),
}


def to_csv(headers: Sequence[str], rows: Iterable[Sequence], delimiter: str = ',', bom: bool = False) -> str:
    buf = io.StringIO()
    if bom:
        buf.write(UTF8_BOM)
    writer = csv.writer(buf, delimiter=delimiter, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
    writer.writerow(headers)
    for row in rows:
        writer.writerow(['' if value is None else value for value in row])
    return buf.getvalue()


def _stock_rows():
    for row in StockAggregator().aggregate():
        yield [row.location_kind, row.location_id, row.label, row.pallet_type, row.qty]


def _pallet_rows():
    ledger = PalletLedger()
    labels = ledger.registry.label_index()
    for p in ledger.all():
        yield [
            p.id, p.code, p.alt_code, p.pallet_type, p.qty,
            p.location.kind, p.location.id,
            ledger.registry.resolve_label(p.location.kind, p.location.id, labels),
            p.note, p.updated_at,
        ]


def _move_rows():
    registry = LocationRegistry()
    labels = registry.label_index()
    for m in MovementRecorder().all():
        yield [
            m.ts, m.code, m.pallet_type, m.qty,
            m.from_.kind, m.from_.id, registry.resolve_label(m.from_.kind, m.from_.id, labels),
            m.to.kind, m.to.id, registry.resolve_label(m.to.kind, m.to.id, labels),
            m.note,
        ]


def _history_rows():
    for s in ScanHistoryLog().all():
        yield [
            s.ts, s.code, s.source, s.lat, s.lng, s.accuracy,
            s.declared_kind, s.declared_id, s.pallet_type, s.qty,
        ]


def _location_rows(kind: str) -> Callable:
    def rows():
        for loc in LocationRegistry().list(kind):
            yield [
                loc.id, loc.name, loc.address, loc.phone, loc.notes,
                loc.lat, loc.lng, loc.active, loc.created_at,
            ]
    return rows


EXPORTS = {
    'stock': (STOCK_HEADERS, _stock_rows),
    'pallets': (PALLET_HEADERS, _pallet_rows),
    'moves': (MOVE_HEADERS, _move_rows),
    'history': (HISTORY_HEADERS, _history_rows),
    'shops': (LOCATION_HEADERS, _location_rows(LocationKind.SHOP)),
    'depots': (LOCATION_HEADERS, _location_rows(LocationKind.DEPOT)),
    'drivers': (LOCATION_HEADERS, _location_rows(LocationKind.DRIVER)),
}


def build_export(dataset: str, dialect: str = 'standard') -> tuple[str, str]:
    """Return (filename, csv text) for one dataset."""
    try:
        headers, rows = EXPORTS[dataset]
    except KeyError:
        raise NotFoundError(detail=f'Unknown export {dataset!r}.')
    try:
        delimiter, bom = CSV_DIALECTS[dialect]
    except KeyError:
        raise ValidationError(detail=f'Unknown CSV dialect {dialect!r}.')
    filename = f'{dataset}_{timezone.localdate().isoformat()}.csv'
    return filename, to_csv(headers, rows(), delimiter=delimiter, bom=bom)
