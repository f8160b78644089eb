"""
Inventory — Models

Quantity-accounting ledger. Stock lives in one undistributed pool per
product (PoolRecord) and in one on-hand record per (product, location)
(StockRecord). Movements between locations are journaled in TransferRecord,
which is INSERT ONLY: never updated or deleted.

Every PoolRecord / StockRecord write bumps ``version``; services write with
a condition on the previously-read version so that a lost race surfaces as
a conflict instead of a silent overwrite.

@file inventory/models.py
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin


class PoolRecord(TimestampMixin):
    """
    Undistributed stock for one product.

    available_quantity is always total_quantity - reserved_quantity; it is
    stored for reporting and recomputed by every write (see recompute()).
    """

    product = models.OneToOneField(
        'catalog.Product',
        on_delete=models.PROTECT,
        primary_key=True,
        related_name='pool_record',
        verbose_name=_('product'),
    )
    total_quantity = models.PositiveIntegerField(_('total quantity'), default=0)
    reserved_quantity = models.PositiveIntegerField(_('reserved quantity'), default=0)
    available_quantity = models.PositiveIntegerField(_('available quantity'), default=0)
    version = models.PositiveIntegerField(_('version'), default=0)

    class Meta:
        db_table = 'pool_ledger'
        verbose_name = _('pool record')
        verbose_name_plural = _('pool records')
        ordering = ['product_id']
        permissions = [
            ('move_stock', _('Can take in, distribute and transfer stock')),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    available_quantity=models.F('total_quantity') - models.F('reserved_quantity'),
                ),
                name='pool_available_is_total_minus_reserved',
            ),
            models.CheckConstraint(
                condition=models.Q(reserved_quantity__lte=models.F('total_quantity')),
                name='pool_reserved_within_total',
            ),
        ]

    def __str__(self):
        return (
            f'pool product={self.product_id} total={self.total_quantity} '
            f'reserved={self.reserved_quantity} available={self.available_quantity}'
        )

    def recompute(self) -> None:
        self.available_quantity = self.total_quantity - self.reserved_quantity


class StockRecord(TimestampMixin):
    """
    On-hand quantity of one product at one location.

    Created lazily on the first movement into the pair and kept forever;
    a zero quantity means "known empty".
    """

    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='stock_records',
        verbose_name=_('product'),
    )
    location = models.ForeignKey(
        'locations.Location',
        on_delete=models.PROTECT,
        related_name='stock_records',
        verbose_name=_('location'),
    )
    quantity = models.PositiveIntegerField(_('quantity'), default=0)
    version = models.PositiveIntegerField(_('version'), default=0)

    class Meta:
        db_table = 'location_stock'
        verbose_name = _('stock record')
        verbose_name_plural = _('stock records')
        ordering = ['product_id', 'location_id']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'location'],
                name='unique_stock_per_product_location',
            ),
        ]
        indexes = [
            models.Index(fields=['location', 'product'], name='stock_location_product_idx'),
        ]

    def __str__(self):
        return f'stock product={self.product_id} location={self.location_id} qty={self.quantity}'

    def delete(self, *args, **kwargs):
        raise NotImplementedError('StockRecord rows are never deleted; a zero quantity means empty.')


class TransferRecordQuerySet(models.QuerySet):
    """Blocks bulk writes that would bypass the model-level guards."""

    def update(self, **kwargs):
        raise NotImplementedError('TransferRecord is insert-only; updates are not allowed.')

    def delete(self):
        raise NotImplementedError('TransferRecord records cannot be deleted.')


class TransferRecord(models.Model):
    """
    A single immutable location-to-location movement (insert only).

    Correcting a mistaken transfer means recording the reverse transfer.
    """

    transfer_id = models.BigAutoField(primary_key=True)
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='transfers',
        verbose_name=_('product'),
    )
    from_location = models.ForeignKey(
        'locations.Location',
        on_delete=models.PROTECT,
        related_name='outgoing_transfers',
        verbose_name=_('from location'),
    )
    to_location = models.ForeignKey(
        'locations.Location',
        on_delete=models.PROTECT,
        related_name='incoming_transfers',
        verbose_name=_('to location'),
    )
    quantity = models.PositiveIntegerField(_('quantity'))
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('performed by'),
    )
    note = models.CharField(_('note'), max_length=500, blank=True)
    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )
    # No updated_at: immutable record.

    objects = TransferRecordQuerySet.as_manager()

    class Meta:
        db_table = 'transfers'
        verbose_name = _('transfer')
        verbose_name_plural = _('transfers')
        ordering = ['-created_at', '-transfer_id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='transfer_product_created_idx'),
            models.Index(fields=['from_location', 'created_at'], name='transfer_from_created_idx'),
            models.Index(fields=['to_location', 'created_at'], name='transfer_to_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='transfer_quantity_positive',
            ),
            models.CheckConstraint(
                condition=~models.Q(from_location=models.F('to_location')),
                name='transfer_locations_differ',
            ),
        ]

    def __str__(self):
        return (
            f'transfer #{self.transfer_id} product={self.product_id} '
            f'{self.from_location_id}->{self.to_location_id} qty={self.quantity}'
        )

    def save(self, *args, **kwargs):
        if self.pk and TransferRecord.objects.filter(pk=self.pk).exists():
            raise NotImplementedError('TransferRecord is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('TransferRecord records cannot be deleted.')
