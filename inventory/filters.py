"""
Inventory — Filter Sets

@file inventory/filters.py
"""

import django_filters

from .models import StockRecord, TransferRecord
from .selectors import STOCK_STATUS_IN, STOCK_STATUS_LOW, STOCK_STATUS_OUT, low_stock_threshold


class StockRecordFilter(django_filters.FilterSet):
    stock_level = django_filters.ChoiceFilter(
        choices=[
            (STOCK_STATUS_OUT, 'Out of stock'),
            (STOCK_STATUS_LOW, 'Low stock'),
            (STOCK_STATUS_IN, 'In stock'),
        ],
        method='filter_stock_level',
    )

    class Meta:
        model = StockRecord
        fields = {
            'product': ['exact'],
            'location': ['exact'],
            'location__kind': ['exact'],
        }

    def filter_stock_level(self, queryset, name, value):
        threshold = low_stock_threshold()
        if value == STOCK_STATUS_OUT:
            return queryset.filter(quantity=0)
        if value == STOCK_STATUS_LOW:
            return queryset.filter(quantity__gt=0, quantity__lte=threshold)
        return queryset.filter(quantity__gt=threshold)


class TransferRecordFilter(django_filters.FilterSet):
    created_after = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    created_before = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = TransferRecord
        fields = ['product', 'from_location', 'to_location']
