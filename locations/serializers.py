"""
Locations — Serializers

Input validation for location commands and the read representation.

@file locations/serializers.py
"""

from rest_framework import serializers

from .services import AddLocation, UpdateLocation

__all__ = [
    'LocationReadSerializer',
    'LocationWriteSerializer',
]


class LocationReadSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    kind = serializers.SerializerMethodField()
    name = serializers.CharField(read_only=True)
    address = serializers.CharField(read_only=True, allow_null=True)
    phone = serializers.CharField(read_only=True, allow_null=True)
    notes = serializers.CharField(read_only=True, allow_null=True)
    lat = serializers.FloatField(read_only=True, allow_null=True)
    lng = serializers.FloatField(read_only=True, allow_null=True)
    active = serializers.BooleanField(read_only=True)
    created_at = serializers.CharField(read_only=True)

    def get_kind(self, obj):
        return self.context.get('kind')


class LocationWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=500)
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    lat = serializers.FloatField(required=False, allow_null=True, min_value=-90, max_value=90)
    lng = serializers.FloatField(required=False, allow_null=True, min_value=-180, max_value=180)
    active = serializers.BooleanField(required=False)

    def to_add_command(self, kind: str) -> AddLocation:
        data = dict(self.validated_data)
        name = data.pop('name')
        address = data.pop('address', None)
        return AddLocation(kind=kind, name=name, address=address, extra=data)

    def to_update_command(self, kind: str, location_id: str) -> UpdateLocation:
        return UpdateLocation(kind=kind, location_id=location_id, patch=dict(self.validated_data))
