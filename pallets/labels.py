"""
Pallets — QR Labels

PNG label encoding a pallet's code, so scanning the printed label feeds
the same code back into apply_scan_move.

@file pallets/labels.py
"""

import io

import qrcode

from .records import Pallet


def render_qr_label(pallet: Pallet) -> bytes:
    img = qrcode.make(pallet.code)
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    return buf.getvalue()


def label_filename(pallet: Pallet) -> str:
    safe = ''.join(ch if ch.isalnum() or ch in '-_' else '_' for ch in pallet.code)
    return f'pallet_{safe}_qr.png'
