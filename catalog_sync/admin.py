from django.contrib import admin

from catalog_sync.models import SyncOption
from catalog_sync.options import STATUS_KEYS


@admin.register(SyncOption)
class SyncOptionAdmin(admin.ModelAdmin):
    list_display = ('key', 'value', 'updated_at')
    search_fields = ('key',)

    def get_readonly_fields(self, request, obj=None):
        # Status keys are written by the sync cycle only
        if obj is not None and obj.key in STATUS_KEYS:
            return ('key', 'value', 'updated_at')
        return ('updated_at',)
