"""
Core — Constants

Store keys and pagination limits shared across apps.

@file core/constants.py
"""

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500

# One durable record per key
STORE_KEY_SHOPS = 'shops'
STORE_KEY_DEPOTS = 'depots'
STORE_KEY_DRIVERS = 'drivers'
STORE_KEY_PALLETS = 'pallets'
STORE_KEY_HISTORY = 'history'
STORE_KEY_STOCK_MOVES = 'stockMoves'
STORE_KEY_LAST_SCAN = 'lastScan'
STORE_KEY_MISSING = 'missing'
STORE_KEY_PALLET_TYPES = 'palletTypes'

LOGGER_NAME = 'pallet_tracker'
