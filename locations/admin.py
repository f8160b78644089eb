"""
Locations — Django Admin Configuration

@file locations/admin.py
"""

from django.contrib import admin

from .models import Location


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'kind', 'address', 'created_at')
    list_filter = ('kind',)
    search_fields = ('name', 'address')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('kind', 'name')
