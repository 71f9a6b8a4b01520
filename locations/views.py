"""
Locations — Views

One ViewSet per location kind (shops, depots, drivers). All reads and
writes go through LocationRegistry.

@file locations/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .records import LocationKind
from .serializers import LocationReadSerializer, LocationWriteSerializer
from .services import LocationRegistry


class LocationViewSet(viewsets.ViewSet):
    """
    list / create / retrieve / partial_update / destroy for one kind.
    ``default`` returns the guaranteed fallback entry.
    """

    kind: str = ''

    def get_registry(self):
        return LocationRegistry()

    def _read(self, location_or_list, many=False):
        return LocationReadSerializer(
            location_or_list, many=many, context={'kind': self.kind},
        ).data

    def list(self, request):
        q = request.query_params.get('q', '').strip().lower()
        items = self.get_registry().list(self.kind)
        if q:
            items = [
                item for item in items
                if q in f'{item.name} {item.address or ""} {item.phone or ""} {item.notes or ""}'.lower()
            ]
        return Response(self._read(items, many=True))

    def create(self, request):
        ser = LocationWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        location = ser.to_add_command(self.kind).execute(self.get_registry())
        return Response(self._read(location), status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        return Response(self._read(self.get_registry().get(self.kind, pk)))

    def partial_update(self, request, pk=None):
        ser = LocationWriteSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        location = ser.to_update_command(self.kind, pk).execute(self.get_registry())
        return Response(self._read(location))

    def destroy(self, request, pk=None):
        self.get_registry().remove(self.kind, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path='default')
    def default(self, request):
        return Response(self._read(self.get_registry().get_or_create_default(self.kind)))


class ShopViewSet(LocationViewSet):
    kind = LocationKind.SHOP


class DepotViewSet(LocationViewSet):
    kind = LocationKind.DEPOT


class DriverViewSet(LocationViewSet):
    kind = LocationKind.DRIVER
