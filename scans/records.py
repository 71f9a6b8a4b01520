"""
Scans — Records

ScanHistoryItem is one raw scan event: the decoded (or typed) text, when
it happened, where (if GPS answered) and what the operator declared.
It is logged whether or not the scan is later committed to the ledger.

@file scans/records.py
"""

from dataclasses import asdict, dataclass, fields

from django.db import models
from django.utils.translation import gettext_lazy as _


class ScanSource(models.TextChoices):
    QR = 'qr', _('QR code')
    MANUAL = 'manual', _('Manual entry')


@dataclass
class ScanHistoryItem:
    id: str
    code: str
    ts: str
    source: str = ScanSource.MANUAL.value
    lat: float | None = None
    lng: float | None = None
    accuracy: float | None = None
    declared_kind: str | None = None
    declared_id: str | None = None
    pallet_type: str | None = None
    qty: int | None = None

    @property
    def has_position(self) -> bool:
        return self.lat is not None and self.lng is not None

    @classmethod
    def from_dict(cls, data: dict) -> 'ScanHistoryItem':
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values.setdefault('id', '')
        values.setdefault('code', '')
        values.setdefault('ts', '')
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)
