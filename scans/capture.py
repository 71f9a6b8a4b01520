"""
Scans — Capture Session

Bridges a camera/QR decoder and a GPS source to the scan history.
The decoder is an external collaborator (see ``Scanner``); it calls
``on_decode`` zero or more times, in any order. A session accepts at most
one decode: the first one stops the scanner, and anything that fires
after a stop has been requested is ignored. Positions are optional and
may arrive before or after the decode; the latest one wins.

@file scans/capture.py
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from core.constants import LOGGER_NAME

from .records import ScanHistoryItem, ScanSource
from .services import RecordScan, ScanHistoryLog

logger = logging.getLogger(LOGGER_NAME)

SCANNER_CONFIG = {
    'fps': 12,
    'qrbox': {'width': 260, 'height': 260},
    'aspect_ratio': 1.0,
    'disable_flip': False,
}

BACK_CAMERA_PATTERN = re.compile(r'back|rear|posteriore|environment', re.IGNORECASE)
FALLBACK_SELECTOR = {'facingMode': 'environment'}

IDLE = 'IDLE'
SCANNING = 'SCANNING'
STOPPED = 'STOPPED'


@dataclass(frozen=True)
class Camera:
    id: str
    label: str


class Scanner(Protocol):
    def enumerate_cameras(self) -> Sequence[Camera]: ...

    def start_scanning(
        self,
        device_selector: dict,
        config: dict,
        on_decode: Callable[[str], Any],
        on_error: Callable[[str], Any],
    ) -> None: ...

    def stop(self) -> None: ...


def pick_camera(cameras: Sequence[Camera], preferred_id: str | None = None) -> Camera | None:
    """The requested camera if present, else a back-facing one, else the first."""
    if preferred_id:
        for camera in cameras:
            if camera.id == preferred_id:
                return camera
    for camera in cameras:
        if BACK_CAMERA_PATTERN.search(camera.label or ''):
            return camera
    return cameras[0] if cameras else None


class ScanSession:
    """One scanning session: at most one accepted decode."""

    def __init__(
        self,
        scanner: Scanner,
        history: ScanHistoryLog | None = None,
        source: str = ScanSource.QR.value,
        declared: dict | None = None,
    ):
        self.scanner = scanner
        self.history = history or ScanHistoryLog()
        self.source = source
        self.declared = dict(declared or {})
        self.state = IDLE
        self.item: ScanHistoryItem | None = None
        self._stop_requested = False
        self._position: tuple[float, float, float | None] | None = None

    def start(self, camera_id: str | None = None) -> None:
        if self.state == SCANNING:
            return
        if self.state == STOPPED:
            # restarting begins a fresh scan
            self.reset()
        camera = pick_camera(self.scanner.enumerate_cameras(), camera_id)
        selector = {'deviceId': {'exact': camera.id}} if camera else FALLBACK_SELECTOR
        self._stop_requested = False
        self.state = SCANNING
        try:
            self.scanner.start_scanning(selector, SCANNER_CONFIG, self.on_decode, self.on_error)
        except Exception:
            if selector == FALLBACK_SELECTOR:
                self.state = IDLE
                raise
            logger.warning('Camera %s failed to start; retrying with the rear camera.', camera.id)
            try:
                self.scanner.start_scanning(FALLBACK_SELECTOR, SCANNER_CONFIG, self.on_decode, self.on_error)
            except Exception:
                self.state = IDLE
                raise

    def stop(self) -> None:
        """Idempotent. Any decode delivered after this call is ignored."""
        if self._stop_requested:
            return
        self._stop_requested = True
        self.state = STOPPED
        self.scanner.stop()

    def on_decode(self, text: str) -> ScanHistoryItem | None:
        if self._stop_requested or self.item is not None:
            logger.debug('Late decode ignored: %r', text)
            return None
        self.stop()
        lat, lng, accuracy = self._position or (None, None, None)
        self.item = self.history.record(RecordScan(
            code=text,
            source=self.source,
            lat=lat,
            lng=lng,
            accuracy=accuracy,
            **self.declared,
        ))
        return self.item

    def on_position(self, lat: float, lng: float, accuracy: float | None = None) -> None:
        self._position = (lat, lng, accuracy)
        if self.item is not None:
            updated = self.history.attach_position(self.item.id, lat, lng, accuracy)
            if updated is not None:
                self.item = updated

    def on_error(self, message: str) -> None:
        # Frames without a readable code are reported here continuously.
        logger.debug('Decoder: %s', message)

    def reset(self) -> None:
        """Forget the accepted scan so the session can be started again."""
        self.item = None
        self._position = None
        self._stop_requested = False
        self.state = IDLE
