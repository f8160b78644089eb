"""
Catalog — Service Layer

Read-only product lookups for the inventory ledger.

@file catalog/services.py
"""

from dataclasses import dataclass
from decimal import Decimal

from core.exceptions import ResourceNotFoundError

from .models import Product


@dataclass(frozen=True)
class ProductRef:
    id: int
    name: str
    unit_price: Decimal


class ProductCatalog:
    """Resolves product identifiers to display data and unit price."""

    @staticmethod
    def get_product(product_id) -> ProductRef:
        row = (
            Product.objects.filter(pk=product_id)
            .values('id', 'name', 'unit_price')
            .first()
        )
        if row is None:
            raise ResourceNotFoundError(
                detail=f'Product {product_id} not found.', product_id=product_id,
            )
        return ProductRef(**row)
