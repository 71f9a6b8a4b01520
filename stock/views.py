"""
Stock — Views

Derived stock on hand and CSV downloads.

@file stock/views.py
"""

from django.http import HttpResponse
from rest_framework import viewsets
from rest_framework.decorators import action, api_view
from rest_framework.response import Response

from .exports import build_export
from .serializers import StockRowSerializer
from .services import StockAggregator


class StockViewSet(viewsets.ViewSet):
    """Quantity per location and pallet type, recomputed on every request."""

    def list(self, request):
        rows = StockAggregator().aggregate()
        kind = request.query_params.get('location_kind')
        if kind:
            rows = [r for r in rows if r.location_kind == kind]
        return Response(StockRowSerializer(rows, many=True).data)

    @action(detail=False, methods=['get'], url_path='totals')
    def totals(self, request):
        return Response(StockAggregator().totals_by_type())


@api_view(['GET'])
def export_csv(request, dataset):
    """Download one dataset as CSV. ``?dialect=excel`` gives the ';' variant with a BOM."""
    filename, text = build_export(dataset, request.query_params.get('dialect', 'standard'))
    response = HttpResponse(text, content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response
