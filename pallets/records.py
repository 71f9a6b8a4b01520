"""
Pallets — Records

Pallet (one ledger row per code), StockMove (immutable movement entry)
and MissingPallet (operator report). Persisted as plain dicts in the
``pallets``, ``stockMoves`` and ``missing`` store collections.

@file pallets/records.py
"""

from dataclasses import dataclass, field

from django.db import models
from django.utils.translation import gettext_lazy as _

from locations.records import DEFAULT_LOCATIONS, LocationKind, LocationRef


class PalletType(models.TextChoices):
    EUR_EPAL = 'EUR/EPAL', _('EUR/EPAL')
    CHEP = 'CHEP', _('CHEP')
    IFCO = 'IFCO', _('IFCO')
    CP1 = 'CP1', _('CP1')
    CP2 = 'CP2', _('CP2')
    CP3 = 'CP3', _('CP3')
    CP4 = 'CP4', _('CP4')
    CP5 = 'CP5', _('CP5')
    CP6 = 'CP6', _('CP6')
    CP7 = 'CP7', _('CP7')
    CP8 = 'CP8', _('CP8')
    ALTRO = 'ALTRO', _('Other')


DEFAULT_PALLET_TYPE = PalletType.EUR_EPAL.value


def _default_depot_ref() -> LocationRef:
    return LocationRef(LocationKind.DEPOT.value, DEFAULT_LOCATIONS[LocationKind.DEPOT][0])


def _qty(value) -> int:
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return 1


def _location(data) -> LocationRef:
    if isinstance(data, dict) and data.get('kind') and data.get('id'):
        return LocationRef.from_dict(data)
    return _default_depot_ref()


@dataclass
class Pallet:
    id: str
    code: str
    alt_code: str | None = None
    pallet_type: str = DEFAULT_PALLET_TYPE
    qty: int = 1
    location: LocationRef = field(default_factory=_default_depot_ref)
    note: str | None = None
    updated_at: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'Pallet':
        return cls(
            id=str(data.get('id', '')),
            code=str(data.get('code', '')),
            alt_code=data.get('alt_code') or None,
            pallet_type=data.get('pallet_type') or DEFAULT_PALLET_TYPE,
            qty=_qty(data.get('qty')),
            location=_location(data.get('location')),
            note=data.get('note') or None,
            updated_at=data.get('updated_at') or '',
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'code': self.code,
            'alt_code': self.alt_code,
            'pallet_type': self.pallet_type,
            'qty': self.qty,
            'location': self.location.to_dict(),
            'note': self.note,
            'updated_at': self.updated_at,
        }


@dataclass(frozen=True)
class StockMove:
    """One location change of one pallet. Never edited once written."""

    id: str
    ts: str
    code: str
    pallet_type: str
    qty: int
    from_: LocationRef
    to: LocationRef
    note: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> 'StockMove':
        return cls(
            id=str(data.get('id', '')),
            ts=data.get('ts') or '',
            code=str(data.get('code', '')),
            pallet_type=data.get('pallet_type') or DEFAULT_PALLET_TYPE,
            qty=_qty(data.get('qty')),
            from_=_location(data.get('from')),
            to=_location(data.get('to')),
            note=data.get('note') or None,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'ts': self.ts,
            'code': self.code,
            'pallet_type': self.pallet_type,
            'qty': self.qty,
            'from': self.from_.to_dict(),
            'to': self.to.to_dict(),
            'note': self.note,
        }


@dataclass
class MissingPallet:
    id: str
    pallet_code: str
    reason: str | None = None
    resolved: bool = False
    created_at: str = ''
    resolved_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> 'MissingPallet':
        return cls(
            id=str(data.get('id', '')),
            pallet_code=str(data.get('pallet_code', '')),
            reason=data.get('reason') or None,
            resolved=bool(data.get('resolved')),
            created_at=data.get('created_at') or '',
            resolved_at=data.get('resolved_at') or None,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'pallet_code': self.pallet_code,
            'reason': self.reason,
            'resolved': self.resolved,
            'created_at': self.created_at,
            'resolved_at': self.resolved_at,
        }
