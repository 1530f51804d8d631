from django.contrib import admin, messages
from unfold.admin import ModelAdmin, TabularInline

from apps.orders.models import Order, OrderItem
from apps.orders.transitions import TransitionError, advance_order, cancel_order


class OrderItemInline(TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item", "menu_item_name", "quantity", "unit_price", "total_price", "notes")
    exclude = ("deleted_at",)
    can_delete = False

    def has_add_permission(self, request, obj):
        return False


@admin.register(Order)
class OrderAdmin(ModelAdmin):
    list_display = ("order_no", "queue_label", "mode", "table_number", "status", "total_amount", "created_at")
    list_filter = ("status", "mode", "created_at")
    search_fields = ("order_no", "customer_name", "customer_phone", "table_number")
    readonly_fields = ("order_no", "queue_number", "total_amount", "tracking_url", "created_at", "updated_at")
    exclude = ("deleted_at",)
    inlines = [OrderItemInline]
    actions = ["advance_selected", "cancel_selected"]

    def get_readonly_fields(self, request, obj=None):
        readonly = list(self.readonly_fields)
        if not request.user.has_perm("orders.change_order_status"):
            readonly.append("status")
        return readonly

    def get_list_display_links(self, request, list_display):
        return ("order_no",)

    @admin.display(description="Queue", ordering="queue_number")
    def queue_label(self, obj):
        return obj.queue_label or "-"

    def _apply(self, request, queryset, transition, verb):
        done = 0
        for order in queryset:
            try:
                transition(order)
                done += 1
            except TransitionError as e:
                self.message_user(request, str(e), messages.WARNING)
        if done:
            self.message_user(request, f"{done} order(s) {verb}.", messages.SUCCESS)

    @admin.action(description="Advance to next status", permissions=["change_status"])
    def advance_selected(self, request, queryset):
        self._apply(request, queryset, advance_order, "advanced")

    @admin.action(description="Cancel pending orders", permissions=["change_status"])
    def cancel_selected(self, request, queryset):
        self._apply(request, queryset, cancel_order, "cancelled")

    def has_change_status_permission(self, request):
        return request.user.has_perm("orders.change_order_status")


@admin.register(OrderItem)
class OrderItemAdmin(ModelAdmin):
    list_display = ("order_no", "menu_item_name", "quantity", "unit_price", "total_price")
    list_filter = ("order__status", "menu_item__category")
    search_fields = ("order__order_no", "menu_item_name")
    readonly_fields = ("created_at", "updated_at")
    exclude = ("deleted_at",)
    autocomplete_fields = ["order"]

    @admin.display(description="Order No", ordering="order__order_no")
    def order_no(self, obj):
        return obj.order.order_no
