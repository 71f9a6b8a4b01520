"""
Scans — Views

Raw scan log: list, record, attach a GPS fix, bulk clear.

@file scans/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.exceptions import NotFoundError

from .serializers import RecordScanSerializer, ScanHistoryReadSerializer, ScanPositionSerializer
from .services import ScanHistoryLog


class ScanHistoryViewSet(viewsets.GenericViewSet):
    """Scan history, newest first. Entries are only appended or bulk-cleared."""

    serializer_class = ScanHistoryReadSerializer

    def get_log(self):
        return ScanHistoryLog()

    def list(self, request):
        log = self.get_log()
        code = request.query_params.get('code', '').strip()
        items = log.for_code(code) if code else log.all()
        page = self.paginate_queryset(items)
        return self.get_paginated_response(ScanHistoryReadSerializer(page, many=True).data)

    def create(self, request):
        ser = RecordScanSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        item = self.get_log().record(ser.to_command())
        return Response(ScanHistoryReadSerializer(item).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='position')
    def position(self, request, pk=None):
        ser = ScanPositionSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        item = self.get_log().attach_position(pk, **ser.validated_data)
        if item is None:
            raise NotFoundError(detail=f'Scan {pk} is not in the retained history.')
        return Response(ScanHistoryReadSerializer(item).data)

    @action(detail=False, methods=['delete'], url_path='clear')
    def clear(self, request):
        self.get_log().clear()
        return Response(status=status.HTTP_204_NO_CONTENT)
