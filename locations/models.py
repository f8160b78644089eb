"""
Locations — Models

Physical places that hold stock. A location is either a warehouse or a
store; the kind is a closed enumeration and is validated here, once.

@file locations/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin


class LocationKind(models.TextChoices):
    WAREHOUSE = 'WAREHOUSE', _('Warehouse')
    STORE = 'STORE', _('Store')


class Location(TimestampMixin):
    """A warehouse or store. Immutable from the ledger's point of view."""

    name = models.CharField(_('name'), max_length=150)
    kind = models.CharField(
        _('kind'), max_length=12,
        choices=LocationKind.choices, db_index=True,
    )
    address = models.CharField(_('address'), max_length=500, blank=True)

    class Meta:
        verbose_name = _('location')
        verbose_name_plural = _('locations')
        ordering = ['kind', 'name']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(kind__in=LocationKind.values),
                name='location_kind_valid',
            ),
        ]

    def __str__(self):
        return f'{self.name} ({self.get_kind_display()})'
