"""
Inventory — View / API Tests

Integration tests for the ledger endpoints: authentication, the
move_stock permission, success payloads and the error envelope.

@file inventory/tests/test_views.py
"""

import pytest
from django.urls import reverse
from rest_framework import status

from inventory.models import PoolRecord, StockRecord, TransferRecord
from tests.factories import (
    PoolRecordFactory,
    ProductFactory,
    StockRecordFactory,
    StoreFactory,
    TransferRecordFactory,
    WarehouseFactory,
)

POOL_URL = 'api-v1:inventory:pool-list'
INTAKE_URL = 'api-v1:inventory:pool-intake'
DISTRIBUTE_URL = 'api-v1:inventory:pool-distribute'
STOCK_URL = 'api-v1:inventory:stock-list'
TRANSFER_URL = 'api-v1:inventory:transfer-list'
TRANSFER_DETAIL_URL = 'api-v1:inventory:transfer-detail'
DISTRIBUTION_URL = 'api-v1:inventory:distribution-list'
DISTRIBUTION_DETAIL_URL = 'api-v1:inventory:distribution-detail'


@pytest.mark.django_db
class TestAccess:
    def test_unauthenticated_rejected(self, api_client):
        response = api_client.get(reverse(STOCK_URL))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['success'] is False

    def test_reads_open_to_authenticated_users(self, authenticated_client):
        PoolRecordFactory()
        response = authenticated_client.get(reverse(POOL_URL))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_movement_requires_permission(self, authenticated_client):
        product = ProductFactory()
        response = authenticated_client.post(
            reverse(INTAKE_URL), {'product_id': product.pk, 'amount': 5}, format='json',
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not PoolRecord.objects.exists()

    def test_superuser_may_move_stock(self, admin_client):
        product = ProductFactory()
        response = admin_client.post(
            reverse(INTAKE_URL), {'product_id': product.pk, 'amount': 5}, format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED


@pytest.mark.django_db
class TestPoolEndpoints:
    def test_intake(self, mover_client):
        product = ProductFactory()
        response = mover_client.post(
            reverse(INTAKE_URL), {'product_id': product.pk, 'amount': 100}, format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['product'] == product.pk
        assert response.data['total_quantity'] == 100
        assert response.data['available_quantity'] == 100

    def test_intake_invalid_amount(self, mover_client):
        product = ProductFactory()
        response = mover_client.post(
            reverse(INTAKE_URL), {'product_id': product.pk, 'amount': 0}, format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'INVALID_AMOUNT'

    def test_intake_oversized_amount(self, mover_client):
        product = ProductFactory()
        response = mover_client.post(
            reverse(INTAKE_URL), {'product_id': product.pk, 'amount': 2**64}, format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False
        assert 'amount' in response.data['errors']
        assert not PoolRecord.objects.exists()

    def test_transfer_oversized_ids_rejected(self, mover_client):
        response = mover_client.post(
            reverse(TRANSFER_URL),
            {'product_id': 2**64, 'from_location_id': 1, 'to_location_id': 2, 'amount': 1},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'product_id' in response.data['errors']

    def test_intake_malformed_body(self, mover_client):
        response = mover_client.post(reverse(INTAKE_URL), {'product_id': 'x'}, format='json')
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['success'] is False

    def test_distribute(self, mover_client):
        pool = PoolRecordFactory(total_quantity=100)
        warehouse, store = WarehouseFactory(), StoreFactory()
        response = mover_client.post(
            reverse(DISTRIBUTE_URL),
            {
                'product_id': pool.pk,
                'targets': [
                    {'location_id': warehouse.pk, 'amount': 60},
                    {'location_id': store.pk, 'amount': 15},
                ],
            },
            format='json',
        )
        assert response.status_code == status.HTTP_200_OK
        assert response.data['pool']['total_quantity'] == 25
        assert sorted(s['quantity'] for s in response.data['stock']) == [15, 60]

    def test_distribute_insufficient_envelope(self, mover_client):
        pool = PoolRecordFactory(total_quantity=40)
        warehouse, store = WarehouseFactory(), StoreFactory()
        response = mover_client.post(
            reverse(DISTRIBUTE_URL),
            {
                'product_id': pool.pk,
                'targets': [
                    {'location_id': warehouse.pk, 'amount': 50},
                    {'location_id': store.pk, 'amount': 50},
                ],
            },
            format='json',
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['success'] is False
        assert response.data['code'] == 'INSUFFICIENT_AVAILABLE'
        assert response.data['context']['available'] == 40
        assert response.data['context']['requested'] == 100
        assert not StockRecord.objects.exists()

    def test_distribute_too_many_targets(self, mover_client):
        pool = PoolRecordFactory()
        targets = [{'location_id': WarehouseFactory().pk, 'amount': 1} for _ in range(3)]
        response = mover_client.post(
            reverse(DISTRIBUTE_URL), {'product_id': pool.pk, 'targets': targets}, format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'INVALID_TARGET'

    def test_distribute_without_pool_is_404(self, mover_client):
        product = ProductFactory()
        response = mover_client.post(
            reverse(DISTRIBUTE_URL),
            {'product_id': product.pk, 'targets': [{'location_id': WarehouseFactory().pk, 'amount': 1}]},
            format='json',
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_success_envelope(self, authenticated_client):
        PoolRecordFactory()
        response = authenticated_client.get(reverse(POOL_URL))
        body = response.json()
        assert body['success'] is True
        assert len(body['data']) == 1
        assert body['meta']['count'] == 1


@pytest.mark.django_db
class TestStockEndpoints:
    def test_filter_by_location_kind(self, authenticated_client):
        product = ProductFactory()
        StockRecordFactory(product=product, location=WarehouseFactory(), quantity=30)
        store_stock = StockRecordFactory(product=product, location=StoreFactory(), quantity=4)
        response = authenticated_client.get(reverse(STOCK_URL), {'location__kind': 'STORE'})
        assert response.status_code == status.HTTP_200_OK
        assert [r['id'] for r in response.data['results']] == [store_stock.pk]
        assert response.data['results'][0]['stock_status'] == 'LOW_STOCK'

    def test_filter_by_stock_level(self, authenticated_client):
        empty = StockRecordFactory(quantity=0)
        StockRecordFactory(quantity=50)
        response = authenticated_client.get(reverse(STOCK_URL), {'stock_level': 'OUT_OF_STOCK'})
        assert [r['id'] for r in response.data['results']] == [empty.pk]


@pytest.mark.django_db
class TestTransferEndpoints:
    def test_create_transfer(self, mover_client, stock_mover):
        product = ProductFactory()
        warehouse, store = WarehouseFactory(), StoreFactory()
        StockRecordFactory(product=product, location=warehouse, quantity=60)
        response = mover_client.post(
            reverse(TRANSFER_URL),
            {
                'product_id': product.pk,
                'from_location_id': warehouse.pk,
                'to_location_id': store.pk,
                'amount': 25,
                'note': 'weekly restock',
            },
            format='json',
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['quantity'] == 25
        assert response.data['performed_by'] == stock_mover.pk
        assert response.data['performed_by_username'] == stock_mover.username
        assert StockRecord.objects.get(product=product, location=store).quantity == 25

    def test_create_transfer_insufficient_stock(self, mover_client):
        product = ProductFactory()
        warehouse, store = WarehouseFactory(), StoreFactory()
        StockRecordFactory(product=product, location=warehouse, quantity=35)
        response = mover_client.post(
            reverse(TRANSFER_URL),
            {'product_id': product.pk, 'from_location_id': warehouse.pk, 'to_location_id': store.pk, 'amount': 1000},
            format='json',
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data['code'] == 'INSUFFICIENT_STOCK'
        assert response.data['context']['available'] == 35
        assert not TransferRecord.objects.exists()

    def test_same_location_rejected(self, mover_client):
        product = ProductFactory()
        warehouse = WarehouseFactory()
        response = mover_client.post(
            reverse(TRANSFER_URL),
            {'product_id': product.pk, 'from_location_id': warehouse.pk, 'to_location_id': warehouse.pk, 'amount': 1},
            format='json',
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['code'] == 'INVALID_TRANSFER'

    def test_list_and_filter_by_product(self, authenticated_client):
        transfer = TransferRecordFactory()
        TransferRecordFactory()
        response = authenticated_client.get(reverse(TRANSFER_URL), {'product': transfer.product_id})
        assert response.status_code == status.HTTP_200_OK
        assert [r['transfer_id'] for r in response.data['results']] == [transfer.transfer_id]

    def test_retrieve(self, authenticated_client):
        transfer = TransferRecordFactory(quantity=9)
        response = authenticated_client.get(reverse(TRANSFER_DETAIL_URL, args=[transfer.pk]))
        assert response.status_code == status.HTTP_200_OK
        assert response.data['quantity'] == 9

    @pytest.mark.parametrize('method', ['put', 'patch', 'delete'])
    def test_journal_is_immutable(self, admin_client, method):
        transfer = TransferRecordFactory(quantity=9)
        response = getattr(admin_client, method)(
            reverse(TRANSFER_DETAIL_URL, args=[transfer.pk]), {'quantity': 1}, format='json',
        )
        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        transfer.refresh_from_db()
        assert transfer.quantity == 9


@pytest.mark.django_db
class TestDistributionEndpoints:
    def test_list(self, authenticated_client):
        pool = PoolRecordFactory(total_quantity=40)
        StockRecordFactory(product=pool.product, quantity=60)
        response = authenticated_client.get(reverse(DISTRIBUTION_URL))
        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['product_id'] == pool.pk
        assert response.data[0]['on_hand_quantity'] == 100

    def test_retrieve_unknown_product(self, authenticated_client):
        response = authenticated_client.get(reverse(DISTRIBUTION_DETAIL_URL, args=[999999]))
        assert response.status_code == status.HTTP_404_NOT_FOUND
