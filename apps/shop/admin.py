from django.contrib import admin
from unfold.admin import ModelAdmin

from apps.shop.models import ShopSettings


@admin.register(ShopSettings)
class ShopSettingsAdmin(ModelAdmin):
    list_display = ("restaurant_name", "operation_mode", "currency", "estimated_wait_per_queue", "updated_at")
    readonly_fields = ("created_at", "updated_at")
    exclude = ("deleted_at", "is_active")

    def has_add_permission(self, request):
        return not ShopSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
