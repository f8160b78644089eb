"""
Catalog — Models

Product registry consumed read-only by the inventory ledger. Pricing and
category management live outside this service; only the fields the ledger
and its reports need are kept here.

@file catalog/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin


class Product(TimestampMixin):
    """A sellable product. Immutable from the ledger's point of view."""

    name = models.CharField(_('name'), max_length=255)
    sku = models.CharField(
        _('SKU'), max_length=64, unique=True, null=True, blank=True,
    )
    unit_price = models.DecimalField(
        _('unit price'), max_digits=12, decimal_places=2,
    )
    is_active = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=0),
                name='product_unit_price_non_negative',
            ),
        ]

    def __str__(self):
        sku = f' ({self.sku})' if self.sku else ''
        return f'{self.name}{sku}'
