"""
Core — Persistent Store Model

The application keeps all of its state in a key/value table: one row per
collection, the payload stored as serialized JSON text. Payloads are kept
as raw text so a corrupt record can be detected and recovered on read
instead of failing at the ORM layer.

@file core/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class StoreRecord(models.Model):
    """One durable record per store key (shops, pallets, history, ...)."""

    key = models.CharField(_('key'), max_length=64, primary_key=True)
    payload = models.TextField(_('payload'), blank=True, default='')
    updated_at = models.DateTimeField(_('updated at'), auto_now=True)

    class Meta:
        verbose_name = _('store record')
        verbose_name_plural = _('store records')
        ordering = ['key']

    def __str__(self):
        return self.key
