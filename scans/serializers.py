"""
Scans — Serializers

@file scans/serializers.py
"""

from rest_framework import serializers

from locations.records import LocationKind

from .records import ScanSource
from .services import RecordScan

__all__ = [
    'ScanHistoryReadSerializer',
    'RecordScanSerializer',
    'ScanPositionSerializer',
]


class ScanHistoryReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    code = serializers.CharField(read_only=True)
    ts = serializers.CharField(read_only=True)
    source = serializers.CharField(read_only=True)
    lat = serializers.FloatField(read_only=True, allow_null=True)
    lng = serializers.FloatField(read_only=True, allow_null=True)
    accuracy = serializers.FloatField(read_only=True, allow_null=True)
    declared_kind = serializers.CharField(read_only=True, allow_null=True)
    declared_id = serializers.CharField(read_only=True, allow_null=True)
    pallet_type = serializers.CharField(read_only=True, allow_null=True)
    qty = serializers.IntegerField(read_only=True, allow_null=True)


class ScanPositionSerializer(serializers.Serializer):
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    accuracy = serializers.FloatField(required=False, allow_null=True, min_value=0)


class RecordScanSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=200)
    source = serializers.ChoiceField(choices=ScanSource.choices, default=ScanSource.MANUAL)
    declared_kind = serializers.ChoiceField(choices=LocationKind.choices, required=False, allow_null=True)
    declared_id = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=100)
    pallet_type = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    qty = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    lat = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    lng = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    accuracy = serializers.FloatField(required=False, allow_null=True, min_value=0)

    def to_command(self) -> RecordScan:
        return RecordScan(**self.validated_data)
