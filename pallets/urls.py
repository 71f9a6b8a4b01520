"""
Pallets — URL Configuration

@file pallets/urls.py
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import MissingPalletViewSet, MovementViewSet, PalletViewSet

app_name = 'pallets'

router = SimpleRouter()
router.register('pallets', PalletViewSet, basename='pallet')
router.register('moves', MovementViewSet, basename='move')
router.register('missing', MissingPalletViewSet, basename='missing')

urlpatterns = [
    path('', include(router.urls)),
]
