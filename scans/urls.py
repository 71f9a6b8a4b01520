"""
Scans — URL Configuration

@file scans/urls.py
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import ScanHistoryViewSet

app_name = 'scans'

router = SimpleRouter()
router.register('scans', ScanHistoryViewSet, basename='scan')

urlpatterns = [
    path('', include(router.urls)),
]
