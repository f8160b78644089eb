"""
Inventory — URL Configuration

@file inventory/urls.py
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import DistributionViewSet, PoolRecordViewSet, StockRecordViewSet, TransferRecordViewSet

app_name = 'inventory'

router = DefaultRouter()
router.register('pool', PoolRecordViewSet, basename='pool')
router.register('stock', StockRecordViewSet, basename='stock')
router.register('transfers', TransferRecordViewSet, basename='transfer')
router.register('distribution', DistributionViewSet, basename='distribution')

urlpatterns = [
    path('', include(router.urls)),
]
