"""
Stock — Service Layer

Stock on hand is never stored: it is folded from the current pallet
ledger snapshot on every read, one row per (location, pallet type).
Recomputing from the same ledger always yields the same rows.

@file stock/services.py
"""

from dataclasses import dataclass

from locations.services import LocationRegistry
from pallets.services import PalletLedger


@dataclass(frozen=True)
class StockRow:
    location_kind: str
    location_id: str
    label: str
    pallet_type: str
    qty: int


class StockAggregator:
    """Quantity per (location kind, location id, pallet type)."""

    def __init__(self, ledger: PalletLedger | None = None, registry: LocationRegistry | None = None):
        self.ledger = ledger or PalletLedger()
        self.registry = registry or self.ledger.registry

    def aggregate(self) -> list[StockRow]:
        """Rows sorted by (label, pallet type)."""
        totals: dict[tuple[str, str, str], int] = {}
        for pallet in self.ledger.all():
            key = (pallet.location.kind, pallet.location.id, pallet.pallet_type)
            totals[key] = totals.get(key, 0) + pallet.qty

        labels = self.registry.label_index()
        rows = [
            StockRow(
                location_kind=kind,
                location_id=location_id,
                label=self.registry.resolve_label(kind, location_id, labels),
                pallet_type=pallet_type,
                qty=qty,
            )
            for (kind, location_id, pallet_type), qty in totals.items()
        ]
        # kind and id only break ties between locations sharing a label
        rows.sort(key=lambda r: (r.label, r.pallet_type, r.location_kind, r.location_id))
        return rows

    def totals_by_type(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for row in self.aggregate():
            totals[row.pallet_type] = totals.get(row.pallet_type, 0) + row.qty
        return dict(sorted(totals.items()))
