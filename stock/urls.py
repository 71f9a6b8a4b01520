"""
Stock — URL Configuration

@file stock/urls.py
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import StockViewSet, export_csv

app_name = 'stock'

router = SimpleRouter()
router.register('stock', StockViewSet, basename='stock')

urlpatterns = [
    path('', include(router.urls)),
    path('exports/<slug:dataset>/', export_csv, name='export'),
]
