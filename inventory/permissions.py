"""
Inventory — Permissions

Ledger reads are open to authenticated users; intake, distribution and
transfers need the ``inventory.move_stock`` permission (or superuser).

@file inventory/permissions.py
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class CanMoveStock(BasePermission):
    """Read is open to authenticated users; stock movements require move_stock."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_superuser or user.has_perm('inventory.move_stock')
