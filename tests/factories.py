"""
Back office — Test Factories

Factory Boy factories for generating test data. Used across all test
modules.

@file tests/factories.py
"""

import uuid
from decimal import Decimal

import factory
from django.contrib.auth import get_user_model

from catalog.models import Product
from core.models import AuditLog
from inventory.models import PoolRecord, StockRecord, TransferRecord
from locations.models import Location, LocationKind


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = get_user_model()
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f'user-{n}')
    email = factory.LazyAttribute(lambda o: f'{o.username}@backoffice.test')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        password = extracted or 'TestPass2026!'
        self.set_password(password)
        if create:
            self.save(update_fields=['password'])


class SuperuserFactory(UserFactory):
    is_staff = True
    is_superuser = True


# ---------------------------------------------------------------------------
# Catalog and locations
# ---------------------------------------------------------------------------

class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f'Product-{n}')
    sku = factory.Sequence(lambda n: f'SKU-{n:05d}')
    unit_price = factory.LazyFunction(lambda: Decimal('12.50'))
    is_active = True


class LocationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Location

    name = factory.Sequence(lambda n: f'Location-{n}')
    kind = LocationKind.WAREHOUSE
    address = factory.Faker('address')


class WarehouseFactory(LocationFactory):
    name = factory.Sequence(lambda n: f'Warehouse-{n}')
    kind = LocationKind.WAREHOUSE


class StoreFactory(LocationFactory):
    name = factory.Sequence(lambda n: f'Store-{n}')
    kind = LocationKind.STORE


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------

class PoolRecordFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = PoolRecord

    product = factory.SubFactory(ProductFactory)
    total_quantity = 100
    reserved_quantity = 0
    available_quantity = factory.LazyAttribute(lambda o: o.total_quantity - o.reserved_quantity)


class StockRecordFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = StockRecord

    product = factory.SubFactory(ProductFactory)
    location = factory.SubFactory(WarehouseFactory)
    quantity = 50


class TransferRecordFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = TransferRecord

    product = factory.SubFactory(ProductFactory)
    from_location = factory.SubFactory(WarehouseFactory)
    to_location = factory.SubFactory(StoreFactory)
    quantity = 5
    performed_by = factory.SubFactory(UserFactory)
    note = ''


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = AuditLog

    actor = factory.SubFactory(UserFactory)
    action = AuditLog.ActionChoices.CREATE
    model_name = 'PoolRecord'
    object_id = factory.LazyFunction(lambda: str(uuid.uuid4()))
