"""
Locations — Records

Location kinds and the Location / LocationRef records persisted in the
``shops``, ``depots`` and ``drivers`` store collections.

@file locations/records.py
"""

from dataclasses import asdict, dataclass, fields

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.constants import STORE_KEY_DEPOTS, STORE_KEY_DRIVERS, STORE_KEY_SHOPS


class LocationKind(models.TextChoices):
    SHOP = 'NEGOZIO', _('Shop')
    DEPOT = 'DEPOSITO', _('Depot')
    DRIVER = 'AUTISTA', _('Driver')


STORE_KEYS = {
    LocationKind.SHOP: STORE_KEY_SHOPS,
    LocationKind.DEPOT: STORE_KEY_DEPOTS,
    LocationKind.DRIVER: STORE_KEY_DRIVERS,
}

ID_PREFIXES = {
    LocationKind.SHOP: 'shop',
    LocationKind.DEPOT: 'depot',
    LocationKind.DRIVER: 'drv',
}

# Well-known entries synthesized when a collection is empty
DEFAULT_LOCATIONS = {
    LocationKind.SHOP: ('shop_main', 'Negozio principale'),
    LocationKind.DEPOT: ('depot_main', 'Deposito principale'),
    LocationKind.DRIVER: ('driver_main', 'Autista principale'),
}

# Label shown for references to deleted locations
FALLBACK_LABELS = {
    LocationKind.SHOP: 'Shop',
    LocationKind.DEPOT: 'Depot',
    LocationKind.DRIVER: 'Driver',
}

EDITABLE_FIELDS = ('name', 'address', 'phone', 'notes', 'lat', 'lng', 'active')


@dataclass
class Location:
    id: str
    name: str
    address: str | None = None
    phone: str | None = None
    notes: str | None = None
    lat: float | None = None
    lng: float | None = None
    active: bool = True
    created_at: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'Location':
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        values['id'] = str(values.get('id') or '')
        values['name'] = str(values.get('name') or '')
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class LocationRef:
    """Pointer to a location: kind plus id. Resolved to a label lazily."""

    kind: str
    id: str

    @classmethod
    def from_dict(cls, data: dict) -> 'LocationRef':
        return cls(kind=data.get('kind', ''), id=data.get('id', ''))

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'id': self.id}
