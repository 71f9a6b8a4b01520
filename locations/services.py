"""
Locations — Service Layer

LocationRegistry manages the shop, depot and driver collections. Each
collection is never empty: reads synthesize and persist a well-known
default entry, and removing the last entry of a kind is refused.
Every mutation persists the whole collection.

@file locations/services.py
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

from django.conf import settings

from core.constants import LOGGER_NAME
from core.exceptions import LastItemError, LimitExceededError, NotFoundError, ValidationError
from core.store import PersistentStore
from core.utils import new_id, now_iso

from .records import (
    DEFAULT_LOCATIONS,
    EDITABLE_FIELDS,
    FALLBACK_LABELS,
    ID_PREFIXES,
    STORE_KEYS,
    Location,
    LocationKind,
)

logger = logging.getLogger(LOGGER_NAME)


def parse_kind(kind: str) -> LocationKind:
    try:
        return LocationKind(kind)
    except ValueError:
        raise ValidationError(detail=f'Unknown location kind: {kind!r}.')


def _collection_limit(kind: LocationKind) -> int:
    return {
        LocationKind.SHOP: settings.PALLET_MAX_SHOPS,
        LocationKind.DEPOT: settings.PALLET_MAX_DEPOTS,
        LocationKind.DRIVER: settings.PALLET_MAX_DRIVERS,
    }[kind]


class LocationRegistry:
    """Shops, depots and drivers, each a most-recent-first collection."""

    def __init__(self, store: PersistentStore | None = None):
        self.store = store or PersistentStore()

    def _load(self, kind: LocationKind) -> list[Location]:
        items = [Location.from_dict(item) for item in self.store.read_list(STORE_KEYS[kind])]
        valid = [item for item in items if item.id]
        if len(valid) != len(items):
            logger.warning(
                'Dropped %d %s entries without an id.', len(items) - len(valid), STORE_KEYS[kind],
            )
        return valid

    def _save(self, kind: LocationKind, items: list[Location]) -> None:
        self.store.write(STORE_KEYS[kind], [item.to_dict() for item in items])

    def _index_of(self, items: list[Location], location_id: str) -> int:
        for idx, item in enumerate(items):
            if item.id == location_id:
                return idx
        return -1

    def get_or_create_default(self, kind: str) -> Location:
        """First entry of the collection; synthesized and persisted if empty."""
        kind = parse_kind(kind)
        items = self._load(kind)
        if items:
            return items[0]
        default_id, default_name = DEFAULT_LOCATIONS[kind]
        location = Location(id=default_id, name=default_name, created_at=now_iso())
        self._save(kind, [location])
        logger.info('Default %s %s created.', kind.value, default_id)
        return location

    def list(self, kind: str) -> Sequence[Location]:
        kind = parse_kind(kind)
        items = self._load(kind)
        if not items:
            return [self.get_or_create_default(kind)]
        return items

    def get(self, kind: str, location_id: str) -> Location:
        kind = parse_kind(kind)
        for item in self.list(kind):
            if item.id == location_id:
                return item
        raise NotFoundError(detail=f'{FALLBACK_LABELS[kind]} {location_id} not found.')

    def add(self, kind: str, name: str, address: str | None = None, **extra: Any) -> Location:
        kind = parse_kind(kind)
        name = (name or '').strip()
        if not name:
            raise ValidationError(detail='Location name is required.')

        items = list(self.list(kind))
        limit = _collection_limit(kind)
        if limit and len(items) >= limit:
            raise LimitExceededError(
                detail=f'At most {limit} {STORE_KEYS[kind]} can be registered.',
            )

        location = Location(
            id=new_id(ID_PREFIXES[kind]),
            name=name,
            address=(address or '').strip() or None,
            created_at=now_iso(),
        )
        for key in ('phone', 'notes', 'lat', 'lng'):
            if extra.get(key) not in (None, ''):
                setattr(location, key, extra[key])
        if extra.get('active') is not None:
            location.active = bool(extra['active'])

        items.insert(0, location)
        self._save(kind, items)
        logger.info('%s %s added: %s', kind.value, location.id, name)
        return location

    def update(self, kind: str, location_id: str, patch: dict) -> Location:
        """Apply ``patch`` in place. The id never changes."""
        kind = parse_kind(kind)
        items = self._load(kind)
        idx = self._index_of(items, location_id)
        if idx < 0:
            raise NotFoundError(detail=f'{FALLBACK_LABELS[kind]} {location_id} not found.')

        changes = {k: v for k, v in patch.items() if k in EDITABLE_FIELDS}
        if 'name' in changes:
            changes['name'] = (changes['name'] or '').strip()
            if not changes['name']:
                raise ValidationError(detail='Location name is required.')

        location = items[idx]
        for key, value in changes.items():
            setattr(location, key, value)
        self._save(kind, items)
        logger.info('%s %s updated: %s', kind.value, location_id, sorted(changes))
        return location

    def remove(self, kind: str, location_id: str) -> None:
        kind = parse_kind(kind)
        items = self._load(kind)
        idx = self._index_of(items, location_id)
        if idx < 0:
            raise NotFoundError(detail=f'{FALLBACK_LABELS[kind]} {location_id} not found.')
        if len(items) == 1:
            raise LastItemError(
                detail=f'{location_id} is the last {FALLBACK_LABELS[kind].lower()}; it cannot be removed.',
            )
        del items[idx]
        self._save(kind, items)
        logger.info('%s %s removed.', kind.value, location_id)

    def label_index(self) -> dict[tuple[str, str], str]:
        """(kind, id) -> display name for every registered location."""
        index = {}
        for kind in LocationKind:
            for item in self._load(kind):
                index[(kind.value, item.id)] = item.name
        return index

    def resolve_label(self, kind: str, location_id: str, index: dict | None = None) -> str:
        """Display name of a location, or the generic kind label if it no longer exists."""
        if index is None:
            index = self.label_index()
        name = index.get((kind, location_id))
        if name:
            return name
        try:
            return FALLBACK_LABELS[LocationKind(kind)]
        except ValueError:
            return '—'


@dataclass(frozen=True)
class AddLocation:
    kind: str
    name: str
    address: str | None = None
    extra: dict = field(default_factory=dict)

    def execute(self, registry: LocationRegistry) -> Location:
        return registry.add(self.kind, self.name, self.address, **self.extra)


@dataclass(frozen=True)
class UpdateLocation:
    kind: str
    location_id: str
    patch: dict = field(default_factory=dict)

    def execute(self, registry: LocationRegistry) -> Location:
        return registry.update(self.kind, self.location_id, self.patch)
