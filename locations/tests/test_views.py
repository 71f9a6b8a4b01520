"""
Tests — Locations API endpoints.

@file locations/tests/test_views.py
"""

import pytest
from django.urls import reverse

from tests.factories import ShopFactory


pytestmark = pytest.mark.django_db


class TestShopEndpoints:

    def test_list_synthesizes_default(self, api_client):
        resp = api_client.get(reverse('api-v1:locations:shop-list'))
        assert resp.status_code == 200
        assert [s['id'] for s in resp.data] == ['shop_main']
        assert resp.data[0]['kind'] == 'NEGOZIO'

    def test_search(self, api_client):
        ShopFactory(name='Centro Milano')
        ShopFactory(name='Outlet Torino')
        resp = api_client.get(reverse('api-v1:locations:shop-list'), {'q': 'torino'})
        assert [s['name'] for s in resp.data] == ['Outlet Torino']

    def test_create(self, api_client):
        url = reverse('api-v1:locations:shop-list')
        resp = api_client.post(url, {'name': 'Nuovo', 'address': 'Via Po 3'}, format='json')
        assert resp.status_code == 201
        assert resp.data['name'] == 'Nuovo'
        assert resp.data['id'].startswith('shop_')

    def test_create_inactive(self, api_client):
        url = reverse('api-v1:locations:shop-list')
        resp = api_client.post(url, {'name': 'Chiuso', 'active': False}, format='json')
        assert resp.status_code == 201
        assert resp.data['active'] is False
        assert api_client.get(url, {'q': 'chiuso'}).data[0]['active'] is False

    def test_create_blank_name(self, api_client):
        url = reverse('api-v1:locations:shop-list')
        resp = api_client.post(url, {'name': ''}, format='json')
        assert resp.status_code == 400
        assert resp.data['success'] is False

    def test_partial_update(self, api_client):
        shop = ShopFactory()
        url = reverse('api-v1:locations:shop-detail', kwargs={'pk': shop.id})
        resp = api_client.patch(url, {'phone': '+39 02 000'}, format='json')
        assert resp.status_code == 200
        assert resp.data['phone'] == '+39 02 000'
        assert resp.data['name'] == shop.name

    def test_retrieve_unknown(self, api_client):
        url = reverse('api-v1:locations:shop-detail', kwargs={'pk': 'shop_nope'})
        resp = api_client.get(url)
        assert resp.status_code == 404
        assert resp.data['code'] == 'NOT_FOUND'


class TestDepotEndpoints:

    def test_delete_last_depot_conflicts(self, api_client):
        api_client.get(reverse('api-v1:locations:depot-default'))
        url = reverse('api-v1:locations:depot-detail', kwargs={'pk': 'depot_main'})
        resp = api_client.delete(url)
        assert resp.status_code == 409
        assert resp.data['code'] == 'LAST_ITEM'

    def test_delete(self, api_client):
        list_url = reverse('api-v1:locations:depot-list')
        created = api_client.post(list_url, {'name': 'Secondario'}, format='json').data
        resp = api_client.delete(reverse('api-v1:locations:depot-detail', kwargs={'pk': created['id']}))
        assert resp.status_code == 204
        assert [d['id'] for d in api_client.get(list_url).data] == ['depot_main']


class TestDriverEndpoints:

    def test_default(self, api_client):
        resp = api_client.get(reverse('api-v1:locations:driver-default'))
        assert resp.status_code == 200
        assert resp.data['id'] == 'driver_main'
        assert resp.data['kind'] == 'AUTISTA'

    def test_limit(self, api_client, settings):
        settings.PALLET_MAX_DRIVERS = 2
        url = reverse('api-v1:locations:driver-list')
        assert api_client.post(url, {'name': 'Luca'}, format='json').status_code == 201
        resp = api_client.post(url, {'name': 'Paolo'}, format='json')
        assert resp.status_code == 400
        assert resp.data['code'] == 'LIMIT_EXCEEDED'
