"""
Pallets — Service Layer

PalletLedger is the single source of truth for where each pallet is.
apply_scan_move updates the ledger row, appends the movement and records
the last scanned code inside one transaction: no reader ever sees the
pallet moved without its movement, or the reverse.
Pallets can also be registered and edited by hand; those writes go through
the same upsert and never touch the movement log.
MovementRecorder is the capped, append-only movement log.
INSERT ONLY — movements are never edited; only a bulk clear removes them.

@file pallets/services.py
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any

from django.conf import settings

from core.constants import (
    LOGGER_NAME,
    STORE_KEY_LAST_SCAN,
    STORE_KEY_MISSING,
    STORE_KEY_PALLET_TYPES,
    STORE_KEY_PALLETS,
    STORE_KEY_STOCK_MOVES,
)
from core.exceptions import DuplicateCodeError, NotFoundError, ValidationError
from core.store import PersistentStore, prepend_capped
from core.utils import new_id, now_iso
from locations.records import LocationKind, LocationRef
from locations.services import LocationRegistry, parse_kind

from .records import DEFAULT_PALLET_TYPE, MissingPallet, Pallet, PalletType, StockMove

logger = logging.getLogger(LOGGER_NAME)


def normalize_code(code: str | None) -> str:
    return (code or '').strip()


def code_key(code: str | None) -> str:
    """Lookup key for code / alt code matching: trimmed, case-insensitive."""
    return normalize_code(code).casefold()


def pallet_keys(pallet: Pallet) -> set[str]:
    keys = {code_key(pallet.code)}
    if code_key(pallet.alt_code):
        keys.add(code_key(pallet.alt_code))
    return keys


def normalize_qty(qty: Any) -> int:
    """Whole number of pallets, at least 1. Missing means 1."""
    if qty in (None, ''):
        return 1
    try:
        value = float(qty)
    except (TypeError, ValueError):
        raise ValidationError(detail=f'Invalid quantity: {qty!r}.')
    if not math.isfinite(value):
        raise ValidationError(detail=f'Invalid quantity: {qty!r}.')
    return max(1, math.floor(value))


@dataclass(frozen=True)
class ApplyScanMove:
    """Operator command: pallet ``code`` now sits at ``to_kind``/``to_id``."""

    code: str
    to_kind: str
    to_id: str
    pallet_type: str = DEFAULT_PALLET_TYPE
    qty: Any = 1
    note: str | None = None
    alt_code: str | None = None


@dataclass(frozen=True)
class MoveResult:
    pallet: Pallet
    from_: LocationRef
    to: LocationRef
    move: StockMove


PALLET_EDITABLE_FIELDS = ('code', 'alt_code', 'pallet_type', 'qty', 'note')


@dataclass(frozen=True)
class RegisterPallet:
    """Operator command: add a pallet to the ledger without moving it."""

    code: str
    pallet_type: str | None = None
    alt_code: str | None = None
    qty: Any = 1
    note: str | None = None
    location_kind: str | None = None
    location_id: str | None = None

    def execute(self, ledger: 'PalletLedger') -> Pallet:
        return ledger.register(self)


@dataclass(frozen=True)
class UpdatePallet:
    pallet_id: str
    patch: dict = field(default_factory=dict)

    def execute(self, ledger: 'PalletLedger') -> Pallet:
        return ledger.update(self.pallet_id, self.patch)


class PalletTypeCatalog:
    """Built-in pallet types plus the custom ones operators have used, newest first."""

    def __init__(self, store: PersistentStore | None = None):
        self.store = store or PersistentStore()

    def custom(self) -> list[str]:
        value = self.store.read(STORE_KEY_PALLET_TYPES, [])
        if not isinstance(value, list):
            logger.warning('Store key %r does not hold a list; using no custom types.', STORE_KEY_PALLET_TYPES)
            return []
        return [item.strip() for item in value if isinstance(item, str) and item.strip()]

    def all(self) -> list[str]:
        return [t.value for t in PalletType] + self.custom()

    def canonical(self, name: str | None) -> str | None:
        """The known spelling of ``name`` (case-insensitive), or None."""
        key = (name or '').strip().casefold()
        for known in self.all():
            if known.casefold() == key:
                return known
        return None

    def add(self, name: str) -> str:
        pallet_type = (name or '').strip()
        if not pallet_type:
            raise ValidationError(detail='Pallet type is required.')
        known = self.canonical(pallet_type)
        if known is not None:
            return known
        self.store.write(STORE_KEY_PALLET_TYPES, [pallet_type] + self.custom())
        logger.info('Custom pallet type %r added.', pallet_type)
        return pallet_type


class MovementRecorder:
    """Append-only movement log, newest first, capped at PALLET_STOCK_MOVES_LIMIT."""

    def __init__(self, store: PersistentStore | None = None):
        self.store = store or PersistentStore()

    def record(self, move: StockMove) -> StockMove:
        items = self.store.read_list(STORE_KEY_STOCK_MOVES)
        prepend_capped(items, move.to_dict(), settings.PALLET_STOCK_MOVES_LIMIT)
        self.store.write(STORE_KEY_STOCK_MOVES, items)
        return move

    def all(self) -> list[StockMove]:
        """Every retained movement, most recent timestamp first."""
        moves = [StockMove.from_dict(item) for item in self.store.read_list(STORE_KEY_STOCK_MOVES)]
        return sorted(moves, key=lambda m: m.ts, reverse=True)

    def for_code(self, code: str) -> list[StockMove]:
        key = code_key(code)
        return [m for m in self.all() if code_key(m.code) == key]

    def clear(self) -> None:
        self.store.delete(STORE_KEY_STOCK_MOVES)
        logger.info('Stock movement log cleared.')


class PalletLedger:
    """One row per pallet code; where each pallet is right now."""

    def __init__(
        self,
        store: PersistentStore | None = None,
        registry: LocationRegistry | None = None,
        movements: MovementRecorder | None = None,
        types: PalletTypeCatalog | None = None,
    ):
        self.store = store or PersistentStore()
        self.registry = registry or LocationRegistry(self.store)
        self.movements = movements or MovementRecorder(self.store)
        self.types = types or PalletTypeCatalog(self.store)

    def all(self) -> list[Pallet]:
        """Current ledger snapshot, most recently created first."""
        return [Pallet.from_dict(item) for item in self.store.read_list(STORE_KEY_PALLETS)]

    def _save(self, items: list[Pallet]) -> None:
        self.store.write(STORE_KEY_PALLETS, [item.to_dict() for item in items])

    def get(self, pallet_id: str) -> Pallet:
        for pallet in self.all():
            if pallet.id == pallet_id:
                return pallet
        raise NotFoundError(detail=f'Pallet {pallet_id} not found.')

    def find_by_code(self, code: str) -> Pallet | None:
        """First row, in persisted order, whose code or alt code matches."""
        key = code_key(code)
        if not key:
            return None
        for pallet in self.all():
            if key in pallet_keys(pallet):
                return pallet
        return None

    def upsert(self, pallet: Pallet) -> Pallet:
        """
        Replace the row with the same id, else prepend a new row.
        Refuses a row whose code or alt code already belongs to another pallet.
        """
        if not normalize_code(pallet.code):
            raise ValidationError(detail='Pallet code is required.')

        items = self.all()
        keys = pallet_keys(pallet)
        for other in items:
            if other.id != pallet.id and keys & pallet_keys(other):
                raise DuplicateCodeError(
                    detail=f'Code {pallet.code!r} conflicts with pallet {other.code!r}.',
                )

        for idx, existing in enumerate(items):
            if existing.id == pallet.id:
                items[idx] = pallet
                break
        else:
            items.insert(0, pallet)
        self._save(items)
        return pallet

    def apply_scan_move(self, command: ApplyScanMove) -> MoveResult:
        code = normalize_code(command.code)
        if not code:
            raise ValidationError(detail='Pallet code is required.')
        to_kind = parse_kind(command.to_kind)
        to_id = (command.to_id or '').strip()
        if not to_id:
            raise ValidationError(detail='Destination is required.')
        qty = normalize_qty(command.qty)
        pallet_type = (command.pallet_type or '').strip() or DEFAULT_PALLET_TYPE
        pallet_type = self.types.canonical(pallet_type) or pallet_type
        to = LocationRef(to_kind.value, to_id)

        with self.store.atomic():
            found = self.find_by_code(code)
            if found is not None:
                from_ = found.location
            else:
                # Unseen pallets are assumed to start at the default depot
                depot = self.registry.get_or_create_default(LocationKind.DEPOT)
                from_ = LocationRef(LocationKind.DEPOT.value, depot.id)

            note = (command.note or '').strip() or (found.note if found else None)
            alt_code = normalize_code(command.alt_code) or (found.alt_code if found else None)
            now = now_iso()

            pallet = Pallet(
                id=found.id if found else new_id('pallet'),
                code=found.code if found else code,
                alt_code=alt_code,
                pallet_type=pallet_type,
                qty=qty,
                location=to,
                note=note,
                updated_at=now,
            )
            self.upsert(pallet)
            self.types.add(pallet_type)
            move = self.movements.record(StockMove(
                id=new_id('move'),
                ts=now,
                code=pallet.code,
                pallet_type=pallet_type,
                qty=qty,
                from_=from_,
                to=to,
                note=(command.note or '').strip() or None,
            ))
            self.store.write(STORE_KEY_LAST_SCAN, pallet.code)

        logger.info(
            'Pallet %s moved %s:%s -> %s:%s qty=%s type=%s',
            pallet.code, from_.kind, from_.id, to.kind, to.id, qty, pallet_type,
        )
        return MoveResult(pallet=pallet, from_=from_, to=to, move=move)

    def register(self, command: RegisterPallet) -> Pallet:
        """Add a pallet by hand. No movement is recorded."""
        code = normalize_code(command.code)
        if not code:
            raise ValidationError(detail='Pallet code is required.')
        qty = normalize_qty(command.qty)
        pallet_type = command.pallet_type if command.pallet_type is not None else DEFAULT_PALLET_TYPE
        if not pallet_type.strip():
            raise ValidationError(detail='Pallet type is required.')

        with self.store.atomic():
            if command.location_kind:
                kind = parse_kind(command.location_kind)
                location_id = (command.location_id or '').strip()
                if not location_id:
                    raise ValidationError(detail='Location id is required with a location kind.')
                location = LocationRef(kind.value, location_id)
            else:
                depot = self.registry.get_or_create_default(LocationKind.DEPOT)
                location = LocationRef(LocationKind.DEPOT.value, depot.id)

            pallet_type = self.types.canonical(pallet_type) or pallet_type.strip()
            pallet = self.upsert(Pallet(
                id=new_id('pallet'),
                code=code,
                alt_code=normalize_code(command.alt_code) or None,
                pallet_type=pallet_type,
                qty=qty,
                location=location,
                note=(command.note or '').strip() or None,
                updated_at=now_iso(),
            ))
            self.types.add(pallet_type)

        logger.info('Pallet %s registered at %s:%s.', code, location.kind, location.id)
        return pallet

    def update(self, pallet_id: str, patch: dict) -> Pallet:
        """
        Edit code, alt code, type, quantity or note of one row. The location
        only changes through apply_scan_move, and the id never changes.
        """
        pallet = self.get(pallet_id)
        changes = {k: v for k, v in patch.items() if k in PALLET_EDITABLE_FIELDS}
        if 'code' in changes:
            changes['code'] = normalize_code(changes['code'])
            if not changes['code']:
                raise ValidationError(detail='Pallet code is required.')
        if 'alt_code' in changes:
            changes['alt_code'] = normalize_code(changes['alt_code']) or None
        if 'pallet_type' in changes:
            pallet_type = (changes['pallet_type'] or '').strip()
            if not pallet_type:
                raise ValidationError(detail='Pallet type is required.')
            changes['pallet_type'] = self.types.canonical(pallet_type) or pallet_type
        if 'qty' in changes:
            changes['qty'] = normalize_qty(changes['qty'])
        if 'note' in changes:
            changes['note'] = (changes['note'] or '').strip() or None

        for key, value in changes.items():
            setattr(pallet, key, value)
        pallet.updated_at = now_iso()
        with self.store.atomic():
            self.upsert(pallet)
            self.types.add(pallet.pallet_type)
        logger.info('Pallet %s updated: %s', pallet_id, sorted(changes))
        return pallet

    def delete(self, pallet_id: str) -> None:
        """Remove the row only; history and movements keep referring to it."""
        items = self.all()
        remaining = [p for p in items if p.id != pallet_id]
        if len(remaining) == len(items):
            raise NotFoundError(detail=f'Pallet {pallet_id} not found.')
        self._save(remaining)
        logger.info('Pallet %s deleted.', pallet_id)

    def last_scan(self) -> str:
        return self.store.read_text(STORE_KEY_LAST_SCAN)

    def search(self, q: str) -> list[Pallet]:
        """Rows whose code, alt code, type, note or location label contains ``q``."""
        pallets = self.all()
        needle = (q or '').strip().casefold()
        if not needle:
            return pallets
        labels = self.registry.label_index()
        matches = []
        for pallet in pallets:
            label = self.registry.resolve_label(pallet.location.kind, pallet.location.id, labels)
            haystack = ' '.join([
                pallet.code, pallet.alt_code or '', pallet.pallet_type, pallet.note or '', label,
            ]).casefold()
            if needle in haystack:
                matches.append(pallet)
        return matches


class MissingPalletRegistry:
    """Operator reports of pallets that could not be found."""

    def __init__(self, store: PersistentStore | None = None):
        self.store = store or PersistentStore()

    def all(self) -> list[MissingPallet]:
        return [MissingPallet.from_dict(item) for item in self.store.read_list(STORE_KEY_MISSING)]

    def _save(self, items: list[MissingPallet]) -> None:
        self.store.write(STORE_KEY_MISSING, [item.to_dict() for item in items])

    def add(self, pallet_code: str, reason: str | None = None) -> MissingPallet:
        code = normalize_code(pallet_code)
        if not code:
            raise ValidationError(detail='Pallet code is required.')
        report = MissingPallet(
            id=new_id('missing'),
            pallet_code=code,
            reason=(reason or '').strip() or None,
            created_at=now_iso(),
        )
        items = self.all()
        items.insert(0, report)
        self._save(items)
        logger.info('Pallet %s reported missing.', code)
        return report

    def set_resolved(self, report_id: str, resolved: bool = True) -> MissingPallet:
        items = self.all()
        for report in items:
            if report.id == report_id:
                report.resolved = resolved
                report.resolved_at = now_iso() if resolved else None
                self._save(items)
                return report
        raise NotFoundError(detail=f'Missing-pallet report {report_id} not found.')

    def remove(self, report_id: str) -> None:
        items = self.all()
        remaining = [r for r in items if r.id != report_id]
        if len(remaining) == len(items):
            raise NotFoundError(detail=f'Missing-pallet report {report_id} not found.')
        self._save(remaining)
