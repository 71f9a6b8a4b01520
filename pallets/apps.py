"""
Pallets — Application Configuration
"""

from django.apps import AppConfig


class PalletsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'pallets'
    verbose_name = 'Pallet Ledger'
