"""
Core — Persistent Store

Process-wide key/value store backed by StoreRecord. Every collection is
read and written as a whole; services own a PersistentStore and funnel all
reads and writes through it.

Reads never raise on bad data: a missing key, unparseable JSON or a payload
of the wrong shape falls back to the caller's default and is logged.

@file core/store.py
"""

import json
import logging
from typing import Any

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from core.constants import LOGGER_NAME

from .models import StoreRecord

logger = logging.getLogger(LOGGER_NAME)


class PersistentStore:
    """Durable key/value access. One StoreRecord row per key."""

    def atomic(self):
        """Group several writes so readers see all of them or none."""
        return transaction.atomic()

    def read(self, key: str, default: Any = None) -> Any:
        payload = (
            StoreRecord.objects.filter(pk=key)
            .values_list('payload', flat=True)
            .first()
        )
        if not payload:
            return default
        try:
            return json.loads(payload)
        except ValueError:
            logger.warning('Corrupt payload under store key %r; using default.', key)
            return default

    def read_list(self, key: str) -> list[dict]:
        """Read an ordered collection; anything that is not a list of objects degrades to []."""
        value = self.read(key, [])
        if not isinstance(value, list):
            logger.warning('Store key %r does not hold a list; using empty collection.', key)
            return []
        items = [item for item in value if isinstance(item, dict)]
        if len(items) != len(value):
            logger.warning('Dropped %d malformed entries under store key %r.', len(value) - len(items), key)
        return items

    def read_text(self, key: str) -> str:
        value = self.read(key, '')
        return value if isinstance(value, str) else ''

    def write(self, key: str, value: Any) -> None:
        StoreRecord.objects.update_or_create(
            key=key,
            defaults={'payload': json.dumps(value, cls=DjangoJSONEncoder)},
        )

    def delete(self, *keys: str) -> None:
        StoreRecord.objects.filter(pk__in=keys).delete()


def prepend_capped(items: list, item, limit: int) -> list:
    """Insert at the head and evict the oldest entries past ``limit``."""
    items.insert(0, item)
    if limit > 0:
        del items[limit:]
    return items
