"""
Tests — ScanSession: single accepted decode, stop semantics, camera choice,
GPS fix arriving before or after the decode.

@file scans/tests/test_capture.py
"""

import pytest

from scans.capture import (
    FALLBACK_SELECTOR,
    SCANNING,
    STOPPED,
    Camera,
    ScanSession,
    pick_camera,
)


pytestmark = pytest.mark.django_db


class FakeScanner:
    """Records start/stop calls; decodes are delivered by the test."""

    def __init__(self, cameras=(), fail_selectors=()):
        self.cameras = list(cameras)
        self.fail_selectors = list(fail_selectors)
        self.started_with = []
        self.stop_calls = 0

    def enumerate_cameras(self):
        return self.cameras

    def start_scanning(self, device_selector, config, on_decode, on_error):
        self.started_with.append(device_selector)
        if device_selector in self.fail_selectors:
            raise RuntimeError('camera busy')

    def stop(self):
        self.stop_calls += 1


FRONT = Camera(id='cam-front', label='Front camera')
BACK = Camera(id='cam-back', label='Back camera')


class TestPickCamera:

    def test_preferred(self):
        assert pick_camera([FRONT, BACK], 'cam-front') == FRONT

    def test_back_facing_when_preferred_missing(self):
        assert pick_camera([FRONT, BACK], 'cam-gone') == BACK

    def test_italian_label(self):
        rear = Camera(id='c2', label='Fotocamera posteriore')
        assert pick_camera([FRONT, rear]) == rear

    def test_first_when_no_back(self):
        assert pick_camera([FRONT]) == FRONT

    def test_none_when_empty(self):
        assert pick_camera([]) is None


class TestStart:

    def test_starts_with_device_selector(self, history):
        scanner = FakeScanner([FRONT, BACK])
        session = ScanSession(scanner, history)
        session.start()
        assert scanner.started_with == [{'deviceId': {'exact': 'cam-back'}}]
        assert session.state == SCANNING

    def test_falls_back_to_rear_camera(self, history):
        scanner = FakeScanner([FRONT], fail_selectors=[{'deviceId': {'exact': 'cam-front'}}])
        session = ScanSession(scanner, history)
        session.start('cam-front')
        assert scanner.started_with[-1] == FALLBACK_SELECTOR
        assert session.state == SCANNING

    def test_no_cameras_uses_facing_mode(self, history):
        scanner = FakeScanner()
        ScanSession(scanner, history).start()
        assert scanner.started_with == [FALLBACK_SELECTOR]

    def test_both_attempts_fail(self, history):
        scanner = FakeScanner(
            [FRONT],
            fail_selectors=[{'deviceId': {'exact': 'cam-front'}}, FALLBACK_SELECTOR],
        )
        session = ScanSession(scanner, history)
        with pytest.raises(RuntimeError):
            session.start()
        assert session.state != SCANNING


class TestDecode:

    def test_first_decode_recorded_and_stops(self, history):
        scanner = FakeScanner([BACK])
        session = ScanSession(scanner, history, declared={'declared_kind': 'NEGOZIO', 'declared_id': 'shop_main'})
        session.start()
        item = session.on_decode('PEDANA-1')
        assert item.code == 'PEDANA-1'
        assert item.source == 'qr'
        assert item.declared_id == 'shop_main'
        assert session.state == STOPPED
        assert scanner.stop_calls == 1
        assert [s.code for s in history.all()] == ['PEDANA-1']

    def test_second_decode_ignored(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.on_decode('PEDANA-1')
        assert session.on_decode('PEDANA-2') is None
        assert [s.code for s in history.all()] == ['PEDANA-1']

    def test_decode_after_stop_ignored(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.stop()
        assert session.on_decode('PEDANA-1') is None
        assert history.all() == []

    def test_stop_is_idempotent(self, history):
        scanner = FakeScanner([BACK])
        session = ScanSession(scanner, history)
        session.start()
        session.stop()
        session.stop()
        assert scanner.stop_calls == 1

    def test_reset_allows_new_scan(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.on_decode('PEDANA-1')
        session.reset()
        session.start()
        session.on_decode('PEDANA-2')
        assert [s.code for s in history.all()] == ['PEDANA-2', 'PEDANA-1']

    def test_restart_after_decode_accepts_new_scan(self, history):
        scanner = FakeScanner([BACK])
        session = ScanSession(scanner, history)
        session.start()
        session.on_decode('PEDANA-1')
        session.start()
        item = session.on_decode('PEDANA-2')
        assert item is not None
        assert item.code == 'PEDANA-2'
        assert [s.code for s in history.all()] == ['PEDANA-2', 'PEDANA-1']
        assert scanner.stop_calls == 2

    def test_restart_forgets_previous_position(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.on_position(45.0, 9.0)
        session.on_decode('PEDANA-1')
        session.start()
        item = session.on_decode('PEDANA-2')
        assert not item.has_position


class TestPosition:

    def test_position_before_decode(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.on_position(45.46, 9.19, 8.0)
        item = session.on_decode('PEDANA-1')
        assert (item.lat, item.lng, item.accuracy) == (45.46, 9.19, 8.0)

    def test_position_after_decode(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.on_decode('PEDANA-1')
        session.on_position(45.46, 9.19)
        assert session.item.has_position
        assert history.all()[0].lat == 45.46

    def test_latest_position_wins(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        session.on_decode('PEDANA-1')
        session.on_position(45.0, 9.0, 30.0)
        session.on_position(45.1, 9.1, 5.0)
        stored = history.all()[0]
        assert (stored.lat, stored.lng, stored.accuracy) == (45.1, 9.1, 5.0)

    def test_no_position_leaves_coordinates_empty(self, history):
        session = ScanSession(FakeScanner([BACK]), history)
        session.start()
        item = session.on_decode('PEDANA-1')
        assert not item.has_position
