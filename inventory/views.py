"""
Inventory — Views

DRF ViewSets for the ledger: pool records (with intake and distribute
actions), location stock, the transfer journal and the distribution view.
Intake, distribute and transfer create are the only mutating endpoints.

@file inventory/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .filters import StockRecordFilter, TransferRecordFilter
from .models import PoolRecord, StockRecord, TransferRecord
from .permissions import CanMoveStock
from .selectors import DistributionView
from .serializers import (
    DistributeSerializer,
    DistributionSummarySerializer,
    IntakeSerializer,
    PoolRecordSerializer,
    StockRecordSerializer,
    TransferCreateSerializer,
    TransferRecordSerializer,
)
from .services import DistributionService, PoolLedgerService, TransferService


class PoolRecordViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Undistributed pool per product: list, retrieve.
    Actions: intake, distribute.
    """

    permission_classes = [IsAuthenticated, CanMoveStock]
    serializer_class = PoolRecordSerializer
    filterset_fields = ['product']
    search_fields = ['product__name', 'product__sku']
    ordering_fields = ['total_quantity', 'available_quantity', 'updated_at']
    ordering = ['product_id']

    def get_queryset(self):
        return PoolRecord.objects.select_related('product')

    def get_serializer_class(self):
        if self.action == 'intake':
            return IntakeSerializer
        if self.action == 'distribute':
            return DistributeSerializer
        return PoolRecordSerializer

    @action(detail=False, methods=['post'], url_path='intake')
    def intake(self, request):
        ser = IntakeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        pool = PoolLedgerService.intake(
            product_id=ser.validated_data['product_id'],
            amount=ser.validated_data['amount'],
            actor=request.user,
        )
        return Response(
            PoolRecordSerializer(pool, context={'request': request}).data,
            status=status.HTTP_201_CREATED,
        )

    @action(detail=False, methods=['post'], url_path='distribute')
    def distribute(self, request):
        ser = DistributeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        result = DistributionService.distribute(
            product_id=ser.validated_data['product_id'],
            targets=ser.validated_data['targets'],
            actor=request.user,
        )
        ctx = {'request': request}
        return Response(
            {
                'pool': PoolRecordSerializer(result.pool, context=ctx).data,
                'stock': StockRecordSerializer(result.stock_records, many=True, context=ctx).data,
            },
            status=status.HTTP_200_OK,
        )


class StockRecordViewSet(viewsets.ReadOnlyModelViewSet):
    """On-hand quantity per (product, location). Read-only."""

    permission_classes = [IsAuthenticated, CanMoveStock]
    serializer_class = StockRecordSerializer
    filterset_class = StockRecordFilter
    search_fields = ['product__name', 'product__sku', 'location__name']
    ordering_fields = ['quantity', 'updated_at', 'product__name', 'location__name']
    ordering = ['product_id', 'location_id']

    def get_queryset(self):
        return StockRecord.objects.select_related('product', 'location')


class TransferRecordViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Transfer journal: list, retrieve, create.
    No update or delete; correct a transfer by recording the reverse one.
    """

    permission_classes = [IsAuthenticated, CanMoveStock]
    filterset_class = TransferRecordFilter
    search_fields = ['product__name', 'note']
    ordering_fields = ['created_at', 'quantity']
    ordering = ['-created_at', '-transfer_id']

    def get_queryset(self):
        return TransferRecord.objects.select_related(
            'product', 'from_location', 'to_location', 'performed_by',
        )

    def get_serializer_class(self):
        if self.action == 'create':
            return TransferCreateSerializer
        return TransferRecordSerializer

    def create(self, request, *args, **kwargs):
        ser = self.get_serializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = TransferService.transfer(
            product_id=ser.validated_data['product_id'],
            from_location_id=ser.validated_data['from_location_id'],
            to_location_id=ser.validated_data['to_location_id'],
            amount=ser.validated_data['amount'],
            actor=request.user,
            note=ser.validated_data.get('note', ''),
        )
        return Response(
            TransferRecordSerializer(record, context={'request': request}).data,
            status=status.HTTP_201_CREATED,
        )


class DistributionViewSet(viewsets.ViewSet):
    """Per-product pool and located totals. Computed on read."""

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r'\d+'

    def list(self, request):
        summaries = DistributionView.all()
        return Response(DistributionSummarySerializer(summaries, many=True).data)

    def retrieve(self, request, pk=None):
        summary = DistributionView.for_product(pk)
        return Response(DistributionSummarySerializer(summary).data)
