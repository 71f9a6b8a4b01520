"""
Core — Identifiers & Timestamps

@file core/utils.py
"""

import uuid

from django.utils import timezone


def new_id(prefix: str = 'id') -> str:
    """Short, prefixed identifier (``shop_3f9a1c2b7d4e``)."""
    return f'{prefix}_{uuid.uuid4().hex[:12]}'


def now_iso() -> str:
    """Current time as an ISO-8601 UTC string; sorts chronologically as text."""
    return timezone.now().isoformat()
