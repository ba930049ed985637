# restaurant/admin.py

from django.contrib import admin
from .models import RestoTable


@admin.register(RestoTable)
class RestoTableAdmin(admin.ModelAdmin):
    """
    Admin configuration for the table catalog.
    """
    list_display = ('table_name', 'seat_capacity')
    list_filter = ('seat_capacity',)
    search_fields = ('table_name',)
    ordering = ('table_name',)
