"""
Core — Django Admin Configuration

Read-only view of the raw store records.

@file core/admin.py
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from core.models import StoreRecord


@admin.register(StoreRecord)
class StoreRecordAdmin(admin.ModelAdmin):
    """Inspect persisted collections; edits go through the API only."""

    list_display = ('key', 'payload_size', 'updated_at')
    search_fields = ('key',)
    readonly_fields = ('key', 'payload', 'updated_at')
    ordering = ('key',)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Payload size'))
    def payload_size(self, obj):
        return len(obj.payload or '')
