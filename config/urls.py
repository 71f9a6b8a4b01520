"""
Pallet Tracker — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework.reverse import reverse

admin.site.site_header = 'Pallet Tracker Administration'
admin.site.site_title = 'Pallet Tracker'
admin.site.index_title = 'Pallet location ledger'


@api_view(['GET'])
def api_root(request, format=None):
    """Pallet Tracker API v1 — endpoint directory."""
    return Response({
        'locations': {
            'shops': reverse('api-v1:locations:shop-list', request=request, format=format),
            'depots': reverse('api-v1:locations:depot-list', request=request, format=format),
            'drivers': reverse('api-v1:locations:driver-list', request=request, format=format),
        },
        'pallets': {
            'list': reverse('api-v1:pallets:pallet-list', request=request, format=format),
            'scan_move': reverse('api-v1:pallets:pallet-scan-move', request=request, format=format),
            'types': reverse('api-v1:pallets:pallet-types', request=request, format=format),
            'moves': reverse('api-v1:pallets:move-list', request=request, format=format),
            'missing': reverse('api-v1:pallets:missing-list', request=request, format=format),
        },
        'scans': reverse('api-v1:scans:scan-list', request=request, format=format),
        'stock': {
            'rows': reverse('api-v1:stock:stock-list', request=request, format=format),
            'totals': reverse('api-v1:stock:stock-totals', request=request, format=format),
        },
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('', include('locations.urls', namespace='locations')),
    path('', include('pallets.urls', namespace='pallets')),
    path('', include('scans.urls', namespace='scans')),
    path('', include('stock.urls', namespace='stock')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
