"""
Stock — Serializers

@file stock/serializers.py
"""

from rest_framework import serializers

__all__ = ['StockRowSerializer']


class StockRowSerializer(serializers.Serializer):
    location_kind = serializers.CharField(read_only=True)
    location_id = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    pallet_type = serializers.CharField(read_only=True)
    qty = serializers.IntegerField(read_only=True)
