# occupancy/admin.py

from django.contrib import admin
from django.utils.html import format_html
from .models import TableState, TableStateEvent
from .services.table_state import TableStateService


@admin.register(TableState)
class TableStateAdmin(admin.ModelAdmin):
    """
    Admin configuration for TableState model.
    """
    list_display = ('table', 'status_badge', 'guest_count', 'timestamp')
    list_filter = ('status', 'timestamp')
    search_fields = ('table__table_name',)
    ordering = ('table',)
    date_hierarchy = 'timestamp'
    list_select_related = ('table',)

    def status_badge(self, obj):
        """
        Display status as colored badge.
        """
        colors = {
            'empty': '#5cb85c',  # Green for free tables
            'busy': '#d9534f',   # Red for occupied tables
        }
        color = colors.get(obj.status, '#777')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; '
            'border-radius: 3px;">{}</span>',
            color,
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    # Admin actions
    actions = ['release_selected']

    @admin.action(description='Release selected tables')
    def release_selected(self, request, queryset):
        """
        Bulk action to free tables through the occupancy service.
        """
        table_names = set(queryset.values_list('table_id', flat=True))
        TableStateService.release_tables(table_names)

        self.message_user(request, f'{len(table_names)} table(s) released.')


@admin.register(TableStateEvent)
class TableStateEventAdmin(admin.ModelAdmin):
    """
    Read-only view of the transition trail.
    """
    list_display = ('table_name', 'status', 'guest_count', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('table_name',)
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
