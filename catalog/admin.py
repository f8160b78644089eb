"""
Catalog — Django Admin Configuration

@file catalog/admin.py
"""

from django.contrib import admin

from .models import Product


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'sku', 'unit_price', 'is_active', 'updated_at')
    list_filter = ('is_active',)
    search_fields = ('name', 'sku')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('name',)
