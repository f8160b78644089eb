"""
Inventory — Django Admin Configuration

Read-only views of the ledger. Quantities only change through the
inventory services; transfers are INSERT ONLY and never edited or deleted.

@file inventory/admin.py
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from .models import PoolRecord, StockRecord, TransferRecord


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    show_full_result_count = False
    list_per_page = 50

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(PoolRecord)
class PoolRecordAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        'product', 'total_quantity', 'reserved_quantity', 'available_quantity', 'updated_at',
    )
    search_fields = ('product__name', 'product__sku')
    list_select_related = ('product',)
    ordering = ('product__name',)


@admin.register(StockRecord)
class StockRecordAdmin(ReadOnlyLedgerAdmin):
    list_display = ('product', 'location', 'quantity', 'updated_at')
    list_filter = ('location__kind', 'location')
    search_fields = ('product__name', 'product__sku', 'location__name')
    list_select_related = ('product', 'location')
    ordering = ('product__name', 'location__name')


@admin.register(TransferRecord)
class TransferRecordAdmin(ReadOnlyLedgerAdmin):
    list_display = (
        'transfer_id', 'product', 'from_location', 'to_location',
        'quantity', 'performed_by', 'created_at',
    )
    list_filter = ('from_location', 'to_location', 'created_at')
    search_fields = ('product__name', 'note')
    readonly_fields = (
        'transfer_id', 'product', 'from_location', 'to_location',
        'quantity', 'note', 'performed_by', 'created_at',
    )
    list_select_related = ('product', 'from_location', 'to_location', 'performed_by')
    date_hierarchy = 'created_at'
    ordering = ('-created_at',)

    fieldsets = (
        (_('Movement'), {
            'fields': ('transfer_id', 'product', 'from_location', 'to_location', 'quantity'),
        }),
        (_('Audit'), {
            'fields': ('performed_by', 'note', 'created_at'),
        }),
    )
