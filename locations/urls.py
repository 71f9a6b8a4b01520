"""
Locations — URL Configuration

@file locations/urls.py
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import DepotViewSet, DriverViewSet, ShopViewSet

app_name = 'locations'

router = SimpleRouter()
router.register('shops', ShopViewSet, basename='shop')
router.register('depots', DepotViewSet, basename='depot')
router.register('drivers', DriverViewSet, basename='driver')

urlpatterns = [
    path('', include(router.urls)),
]
