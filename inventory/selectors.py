"""
Inventory — Read Models

Distribution View: per-product pool figures joined with the sum of all
location stock. Computed from PoolRecord and StockRecord on every read;
nothing here is stored.

@file inventory/selectors.py
"""

from dataclasses import dataclass

from django.conf import settings
from django.db.models import Exists, F, IntegerField, OuterRef, Q, Subquery, Sum, Value
from django.db.models.functions import Coalesce

from catalog.models import Product
from core.exceptions import ResourceNotFoundError

from .models import StockRecord

STOCK_STATUS_OUT = 'OUT_OF_STOCK'
STOCK_STATUS_LOW = 'LOW_STOCK'
STOCK_STATUS_IN = 'IN_STOCK'


def low_stock_threshold() -> int:
    return int(getattr(settings, 'LOW_STOCK_THRESHOLD', 10))


def stock_status(quantity: int, threshold: int | None = None) -> str:
    """Classify an on-hand quantity as out of, low on, or in stock."""
    if threshold is None:
        threshold = low_stock_threshold()
    if quantity <= 0:
        return STOCK_STATUS_OUT
    if quantity <= threshold:
        return STOCK_STATUS_LOW
    return STOCK_STATUS_IN


@dataclass(frozen=True)
class DistributionSummary:
    product_id: int
    product_name: str
    total_quantity: int
    reserved_quantity: int
    available_quantity: int
    located_quantity: int

    @property
    def on_hand_quantity(self) -> int:
        return self.total_quantity + self.located_quantity


def _zero_if_null(expression):
    return Coalesce(expression, Value(0), output_field=IntegerField())


class DistributionView:
    """Per-product totals across the pool and every location."""

    @staticmethod
    def _annotated():
        located = (
            StockRecord.objects.filter(product=OuterRef('pk'))
            .order_by()
            .values('product')
            .annotate(total=Sum('quantity'))
            .values('total')
        )
        return Product.objects.annotate(
            pool_total=_zero_if_null(F('pool_record__total_quantity')),
            pool_reserved=_zero_if_null(F('pool_record__reserved_quantity')),
            pool_available=_zero_if_null(F('pool_record__available_quantity')),
            located_quantity=_zero_if_null(Subquery(located)),
            has_stock=Exists(StockRecord.objects.filter(product=OuterRef('pk'))),
        )

    @staticmethod
    def _to_summary(product) -> DistributionSummary:
        return DistributionSummary(
            product_id=product.pk,
            product_name=product.name,
            total_quantity=product.pool_total,
            reserved_quantity=product.pool_reserved,
            available_quantity=product.pool_available,
            located_quantity=product.located_quantity,
        )

    @staticmethod
    def for_product(product_id) -> DistributionSummary:
        product = DistributionView._annotated().filter(pk=product_id).first()
        if product is None:
            raise ResourceNotFoundError(
                detail=f'Product {product_id} not found.', product_id=product_id,
            )
        return DistributionView._to_summary(product)

    @staticmethod
    def all() -> list[DistributionSummary]:
        """Every product that has a pool record or any location stock."""
        products = (
            DistributionView._annotated()
            .filter(Q(pool_record__isnull=False) | Q(has_stock=True))
            .order_by('name', 'pk')
        )
        return [DistributionView._to_summary(p) for p in products]
