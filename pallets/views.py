"""
Pallets — Views

Ledger endpoints (list, lookup, scan-move, delete, QR label), the
movement log and missing-pallet reports. Every mutation goes through
PalletLedger / MovementRecorder / MissingPalletRegistry.

@file pallets/views.py
"""

from django.http import HttpResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from core.exceptions import NotFoundError, ValidationError
from locations.services import LocationRegistry

from .labels import label_filename, render_qr_label
from .records import PalletType
from .serializers import (
    ApplyScanMoveSerializer,
    MissingPalletReadSerializer,
    MissingPalletResolveSerializer,
    MissingPalletWriteSerializer,
    PalletCreateSerializer,
    PalletReadSerializer,
    PalletTypeSerializer,
    PalletUpdateSerializer,
    StockMoveReadSerializer,
)
from .services import MissingPalletRegistry, MovementRecorder, PalletLedger


def _label_context():
    return {'labels': LocationRegistry().label_index()}


class PalletViewSet(viewsets.ViewSet):
    """
    Pallet ledger.

    scan-move: record that a pallet now sits at a location (creates the
    row on first sight). lookup: find a row by code or alt code.
    create / partial_update: manual registration and edits; a code or alt
    code already used by another pallet is a 409.
    """

    def get_ledger(self):
        return PalletLedger()

    def list(self, request):
        pallets = self.get_ledger().search(request.query_params.get('q', ''))
        return Response(PalletReadSerializer(pallets, many=True, context=_label_context()).data)

    def create(self, request):
        ser = PalletCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        pallet = ser.to_command().execute(self.get_ledger())
        return Response(
            PalletReadSerializer(pallet, context=_label_context()).data,
            status=status.HTTP_201_CREATED,
        )

    def retrieve(self, request, pk=None):
        pallet = self.get_ledger().get(pk)
        return Response(PalletReadSerializer(pallet, context=_label_context()).data)

    def partial_update(self, request, pk=None):
        ser = PalletUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        pallet = ser.to_update_command(pk).execute(self.get_ledger())
        return Response(PalletReadSerializer(pallet, context=_label_context()).data)

    def destroy(self, request, pk=None):
        self.get_ledger().delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['get'], url_path='lookup')
    def lookup(self, request):
        code = request.query_params.get('code', '').strip()
        if not code:
            raise ValidationError(detail='Query parameter "code" is required.')
        pallet = self.get_ledger().find_by_code(code)
        if pallet is None:
            raise NotFoundError(detail=f'No pallet with code {code!r}.')
        return Response(PalletReadSerializer(pallet, context=_label_context()).data)

    @action(detail=False, methods=['post'], url_path='scan-move')
    def scan_move(self, request):
        ser = ApplyScanMoveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = self.get_ledger().apply_scan_move(ser.to_command())
        context = _label_context()
        move = StockMoveReadSerializer(result.move, context=context).data
        return Response(
            {
                'pallet': PalletReadSerializer(result.pallet, context=context).data,
                'from': move['from'],
                'to': move['to'],
                'move': move,
            },
            status=status.HTTP_200_OK,
        )

    @action(detail=False, methods=['get', 'post'], url_path='types')
    def types(self, request):
        """Built-in and custom pallet types. POST adds a custom one."""
        catalog = self.get_ledger().types
        if request.method == 'POST':
            ser = PalletTypeSerializer(data=request.data)
            ser.is_valid(raise_exception=True)
            name = catalog.add(ser.validated_data['name'])
            return Response({'name': name, 'types': catalog.all()}, status=status.HTTP_201_CREATED)
        return Response({'builtin': [t.value for t in PalletType], 'custom': catalog.custom()})

    @action(detail=False, methods=['get'], url_path='last-scan')
    def last_scan(self, request):
        return Response({'code': self.get_ledger().last_scan()})

    @action(detail=True, methods=['get'], url_path='moves')
    def moves(self, request, pk=None):
        pallet = self.get_ledger().get(pk)
        moves = MovementRecorder().for_code(pallet.code)
        return Response(StockMoveReadSerializer(moves, many=True, context=_label_context()).data)

    @action(detail=True, methods=['get'], url_path='qr')
    def qr(self, request, pk=None):
        """PNG label encoding the pallet code."""
        pallet = self.get_ledger().get(pk)
        response = HttpResponse(render_qr_label(pallet), content_type='image/png')
        response['Content-Disposition'] = f'inline; filename="{label_filename(pallet)}"'
        return response


class MovementViewSet(viewsets.GenericViewSet):
    """Movement log, most recent first. Read-only apart from a bulk clear."""

    serializer_class = StockMoveReadSerializer

    def list(self, request):
        recorder = MovementRecorder()
        code = request.query_params.get('code', '').strip()
        moves = recorder.for_code(code) if code else recorder.all()
        page = self.paginate_queryset(moves)
        ser = StockMoveReadSerializer(page, many=True, context=_label_context())
        return self.get_paginated_response(ser.data)

    @action(detail=False, methods=['delete'], url_path='clear')
    def clear(self, request):
        MovementRecorder().clear()
        return Response(status=status.HTTP_204_NO_CONTENT)


class MissingPalletViewSet(viewsets.ViewSet):
    """Pallets reported as missing; open reports first."""

    def get_registry(self):
        return MissingPalletRegistry()

    def list(self, request):
        reports = sorted(self.get_registry().all(), key=lambda r: r.resolved)
        return Response(MissingPalletReadSerializer(reports, many=True).data)

    def create(self, request):
        ser = MissingPalletWriteSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = self.get_registry().add(**ser.validated_data)
        return Response(MissingPalletReadSerializer(report).data, status=status.HTTP_201_CREATED)

    def destroy(self, request, pk=None):
        self.get_registry().remove(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'], url_path='resolve')
    def resolve(self, request, pk=None):
        ser = MissingPalletResolveSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        report = self.get_registry().set_resolved(pk, ser.validated_data['resolved'])
        return Response(MissingPalletReadSerializer(report).data)
