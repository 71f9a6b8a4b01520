"""
Scans — Service Layer

ScanHistoryLog is the raw scan log: newest first, capped at
PALLET_HISTORY_LIMIT with the oldest insertions evicted. Recording never
depends on the ledger; a scan is logged even if the operator never
commits the move. GPS positions arrive later and overwrite the
coordinates of an already-logged entry (last writer wins).

@file scans/services.py
"""

import logging
from dataclasses import dataclass

from django.conf import settings

from core.constants import LOGGER_NAME, STORE_KEY_HISTORY
from core.store import PersistentStore, prepend_capped
from core.utils import new_id, now_iso

from .records import ScanHistoryItem, ScanSource

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class RecordScan:
    code: str
    source: str = ScanSource.MANUAL.value
    declared_kind: str | None = None
    declared_id: str | None = None
    pallet_type: str | None = None
    qty: int | None = None
    lat: float | None = None
    lng: float | None = None
    accuracy: float | None = None


class ScanHistoryLog:
    """Append-only log of scan events."""

    def __init__(self, store: PersistentStore | None = None):
        self.store = store or PersistentStore()

    def all(self) -> list[ScanHistoryItem]:
        """Retained entries in insertion order, newest first."""
        return [ScanHistoryItem.from_dict(item) for item in self.store.read_list(STORE_KEY_HISTORY)]

    def for_code(self, code: str) -> list[ScanHistoryItem]:
        key = (code or '').strip().casefold()
        return [item for item in self.all() if item.code.strip().casefold() == key]

    def record(self, command: RecordScan) -> ScanHistoryItem:
        item = ScanHistoryItem(
            id=new_id('scan'),
            code=(command.code or '').strip(),
            ts=now_iso(),
            source=command.source or ScanSource.MANUAL.value,
            lat=command.lat,
            lng=command.lng,
            accuracy=command.accuracy,
            declared_kind=command.declared_kind or None,
            declared_id=command.declared_id or None,
            pallet_type=command.pallet_type or None,
            qty=command.qty,
        )
        items = self.store.read_list(STORE_KEY_HISTORY)
        prepend_capped(items, item.to_dict(), settings.PALLET_HISTORY_LIMIT)
        self.store.write(STORE_KEY_HISTORY, items)
        logger.info('Scan %s logged: code=%s source=%s', item.id, item.code, item.source)
        return item

    def attach_position(
        self,
        scan_id: str,
        lat: float,
        lng: float,
        accuracy: float | None = None,
    ) -> ScanHistoryItem | None:
        """
        Set the coordinates of a logged scan. Returns None when the entry
        is no longer retained; a late position is simply dropped.
        """
        items = self.store.read_list(STORE_KEY_HISTORY)
        for raw in items:
            if raw.get('id') == scan_id:
                raw.update({'lat': lat, 'lng': lng, 'accuracy': accuracy})
                self.store.write(STORE_KEY_HISTORY, items)
                return ScanHistoryItem.from_dict(raw)
        logger.debug('Position for scan %s dropped: entry no longer retained.', scan_id)
        return None

    def clear(self) -> None:
        self.store.delete(STORE_KEY_HISTORY)
        logger.info('Scan history cleared.')
