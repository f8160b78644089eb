"""
Inventory — Serializers

Read serializers for ledger rows and write serializers that only check
request shape. Ledger rules (positive amounts, distinct locations,
availability) are enforced by the services so every caller gets the same
typed errors.

@file inventory/serializers.py
"""

from rest_framework import serializers

from core.constants import MAX_LEDGER_QUANTITY, MAX_RECORD_ID

from .models import PoolRecord, StockRecord, TransferRecord
from .selectors import stock_status


class PoolRecordSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = PoolRecord
        fields = [
            'product', 'product_name', 'total_quantity', 'reserved_quantity',
            'available_quantity', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class StockRecordSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    location_name = serializers.CharField(source='location.name', read_only=True)
    location_kind = serializers.CharField(source='location.kind', read_only=True)
    stock_status = serializers.SerializerMethodField()

    class Meta:
        model = StockRecord
        fields = [
            'id', 'product', 'product_name', 'location', 'location_name',
            'location_kind', 'quantity', 'stock_status', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_stock_status(self, obj):
        return stock_status(obj.quantity)


class TransferRecordSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    from_location_name = serializers.CharField(source='from_location.name', read_only=True)
    to_location_name = serializers.CharField(source='to_location.name', read_only=True)
    performed_by_username = serializers.CharField(
        source='performed_by.get_username', read_only=True, default=None,
    )

    class Meta:
        model = TransferRecord
        fields = [
            'transfer_id', 'product', 'product_name',
            'from_location', 'from_location_name', 'to_location', 'to_location_name',
            'quantity', 'note', 'performed_by', 'performed_by_username', 'created_at',
        ]
        read_only_fields = fields


class IntakeSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(max_value=MAX_RECORD_ID)
    amount = serializers.IntegerField(max_value=MAX_LEDGER_QUANTITY)


class DistributionTargetSerializer(serializers.Serializer):
    location_id = serializers.IntegerField(max_value=MAX_RECORD_ID)
    amount = serializers.IntegerField(max_value=MAX_LEDGER_QUANTITY)


class DistributeSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(max_value=MAX_RECORD_ID)
    targets = DistributionTargetSerializer(many=True, allow_empty=True)


class TransferCreateSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(max_value=MAX_RECORD_ID)
    from_location_id = serializers.IntegerField(max_value=MAX_RECORD_ID)
    to_location_id = serializers.IntegerField(max_value=MAX_RECORD_ID)
    amount = serializers.IntegerField(max_value=MAX_LEDGER_QUANTITY)
    note = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class DistributionSummarySerializer(serializers.Serializer):
    """Plain read model; see inventory.selectors.DistributionSummary."""

    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(read_only=True)
    total_quantity = serializers.IntegerField(read_only=True)
    reserved_quantity = serializers.IntegerField(read_only=True)
    available_quantity = serializers.IntegerField(read_only=True)
    located_quantity = serializers.IntegerField(read_only=True)
    on_hand_quantity = serializers.IntegerField(read_only=True)
