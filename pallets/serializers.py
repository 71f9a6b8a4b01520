"""
Pallets — Serializers

Read representations for ledger rows, movements and missing-pallet
reports, and the validated input of the scan-move command.
Location references are rendered with their display label; pass the
registry's label index as ``labels`` in the serializer context.

@file pallets/serializers.py
"""

from rest_framework import serializers

from locations.records import FALLBACK_LABELS, LocationKind

from .records import DEFAULT_PALLET_TYPE
from .services import ApplyScanMove, RegisterPallet, UpdatePallet

__all__ = [
    'PalletReadSerializer',
    'StockMoveReadSerializer',
    'ApplyScanMoveSerializer',
    'PalletCreateSerializer',
    'PalletUpdateSerializer',
    'PalletTypeSerializer',
    'MissingPalletReadSerializer',
    'MissingPalletWriteSerializer',
    'MissingPalletResolveSerializer',
]


def location_payload(ref, labels: dict) -> dict:
    label = labels.get((ref.kind, ref.id))
    if not label:
        try:
            label = FALLBACK_LABELS[LocationKind(ref.kind)]
        except ValueError:
            label = '—'
    return {'kind': ref.kind, 'id': ref.id, 'label': label}


class PalletReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    code = serializers.CharField(read_only=True)
    alt_code = serializers.CharField(read_only=True, allow_null=True)
    pallet_type = serializers.CharField(read_only=True)
    qty = serializers.IntegerField(read_only=True)
    location = serializers.SerializerMethodField()
    note = serializers.CharField(read_only=True, allow_null=True)
    updated_at = serializers.CharField(read_only=True)

    def get_location(self, obj):
        return location_payload(obj.location, self.context.get('labels', {}))


class StockMoveReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    ts = serializers.CharField(read_only=True)
    code = serializers.CharField(read_only=True)
    pallet_type = serializers.CharField(read_only=True)
    qty = serializers.IntegerField(read_only=True)
    note = serializers.CharField(read_only=True, allow_null=True)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        labels = self.context.get('labels', {})
        data['from'] = location_payload(instance.from_, labels)
        data['to'] = location_payload(instance.to, labels)
        return data


class ApplyScanMoveSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=200)
    alt_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)
    pallet_type = serializers.CharField(required=False, default=DEFAULT_PALLET_TYPE, max_length=50)
    qty = serializers.FloatField(required=False, default=1)
    to_kind = serializers.ChoiceField(choices=LocationKind.choices)
    to_id = serializers.CharField(max_length=100)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def to_command(self) -> ApplyScanMove:
        return ApplyScanMove(**self.validated_data)


class PalletUpdateSerializer(serializers.Serializer):
    """Manual edit of a ledger row; the location is not editable here."""

    code = serializers.CharField(required=False, max_length=200)
    alt_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)
    pallet_type = serializers.CharField(required=False, max_length=50)
    qty = serializers.FloatField(required=False)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        moved = {'location', 'location_kind', 'location_id'} & set(self.initial_data)
        if moved:
            raise serializers.ValidationError(
                {key: 'Use scan-move to change the location.' for key in sorted(moved)},
            )
        return attrs

    def to_update_command(self, pallet_id: str) -> UpdatePallet:
        return UpdatePallet(pallet_id=pallet_id, patch=dict(self.validated_data))


class PalletCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=200)
    alt_code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=200)
    pallet_type = serializers.CharField(required=False, default=DEFAULT_PALLET_TYPE, max_length=50)
    qty = serializers.FloatField(required=False, default=1)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    location_kind = serializers.ChoiceField(choices=LocationKind.choices, required=False)
    location_id = serializers.CharField(required=False, max_length=100)

    def validate(self, attrs):
        if bool(attrs.get('location_kind')) != bool(attrs.get('location_id')):
            raise serializers.ValidationError('location_kind and location_id go together.')
        return attrs

    def to_command(self) -> RegisterPallet:
        return RegisterPallet(**self.validated_data)


class PalletTypeSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=50)


class MissingPalletReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    pallet_code = serializers.CharField(read_only=True)
    reason = serializers.CharField(read_only=True, allow_null=True)
    resolved = serializers.BooleanField(read_only=True)
    created_at = serializers.CharField(read_only=True)
    resolved_at = serializers.CharField(read_only=True, allow_null=True)


class MissingPalletWriteSerializer(serializers.Serializer):
    pallet_code = serializers.CharField(max_length=200)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class MissingPalletResolveSerializer(serializers.Serializer):
    resolved = serializers.BooleanField(required=False, default=True)
