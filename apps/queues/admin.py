from django.contrib import admin, messages
from unfold.admin import ModelAdmin

from apps.queues.codec import format_queue_number
from apps.queues.counter import reset_queue_counter
from apps.queues.models import QueueCounter


@admin.register(QueueCounter)
class QueueCounterAdmin(ModelAdmin):
    list_display = ("name", "value", "last_issued", "reset_at", "updated_at")
    readonly_fields = ("value", "reset_at", "created_at", "updated_at")
    exclude = ("deleted_at", "is_active")
    actions = ["reset_selected"]

    @admin.display(description="Last ticket")
    def last_issued(self, obj):
        return format_queue_number(obj.value) if obj.value else "-"

    @admin.action(description="Restart numbering at Q001", permissions=["reset"])
    def reset_selected(self, request, queryset):
        for counter in queryset:
            reset_queue_counter(counter.name)
        self.message_user(request, f"{queryset.count()} counter(s) reset.", messages.SUCCESS)

    def has_reset_permission(self, request):
        return request.user.has_perm("queues.reset_queuecounter")
