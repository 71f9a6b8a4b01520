"""
Tests — Scan history API endpoints.

@file scans/tests/test_views.py
"""

import pytest
from django.urls import reverse


pytestmark = pytest.mark.django_db


class TestScanHistoryEndpoints:

    def test_record(self, api_client):
        url = reverse('api-v1:scans:scan-list')
        resp = api_client.post(url, {
            'code': 'PEDANA-1',
            'source': 'qr',
            'declared_kind': 'NEGOZIO',
            'declared_id': 'shop_main',
            'pallet_type': 'CHEP',
            'qty': 2,
        }, format='json')
        assert resp.status_code == 201
        assert resp.data['code'] == 'PEDANA-1'
        assert resp.data['lat'] is None

    def test_record_requires_code(self, api_client):
        resp = api_client.post(reverse('api-v1:scans:scan-list'), {'code': ''}, format='json')
        assert resp.status_code == 400

    def test_list_newest_first(self, api_client):
        url = reverse('api-v1:scans:scan-list')
        api_client.post(url, {'code': 'P1'}, format='json')
        api_client.post(url, {'code': 'P2'}, format='json')
        resp = api_client.get(url)
        assert resp.data['count'] == 2
        assert [s['code'] for s in resp.data['results']] == ['P2', 'P1']

    def test_filter_by_code(self, api_client):
        url = reverse('api-v1:scans:scan-list')
        api_client.post(url, {'code': 'P1'}, format='json')
        api_client.post(url, {'code': 'P2'}, format='json')
        resp = api_client.get(url, {'code': 'p1'})
        assert [s['code'] for s in resp.data['results']] == ['P1']

    def test_attach_position(self, api_client):
        created = api_client.post(reverse('api-v1:scans:scan-list'), {'code': 'P1'}, format='json').data
        url = reverse('api-v1:scans:scan-position', kwargs={'pk': created['id']})
        resp = api_client.post(url, {'lat': 45.46, 'lng': 9.19, 'accuracy': 10}, format='json')
        assert resp.status_code == 200
        assert resp.data['lat'] == 45.46
        assert resp.data['accuracy'] == 10.0

    def test_attach_position_unknown_scan(self, api_client):
        url = reverse('api-v1:scans:scan-position', kwargs={'pk': 'scan_gone'})
        resp = api_client.post(url, {'lat': 45.0, 'lng': 9.0}, format='json')
        assert resp.status_code == 404

    def test_attach_position_out_of_range(self, api_client):
        created = api_client.post(reverse('api-v1:scans:scan-list'), {'code': 'P1'}, format='json').data
        url = reverse('api-v1:scans:scan-position', kwargs={'pk': created['id']})
        resp = api_client.post(url, {'lat': 120, 'lng': 9.0}, format='json')
        assert resp.status_code == 400

    def test_clear(self, api_client):
        url = reverse('api-v1:scans:scan-list')
        api_client.post(url, {'code': 'P1'}, format='json')
        assert api_client.delete(reverse('api-v1:scans:scan-clear')).status_code == 204
        assert api_client.get(url).data['count'] == 0
