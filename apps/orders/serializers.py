from rest_framework import serializers

from apps.menus.models import MenuItem
from apps.orders.models import Order, OrderItem
from apps.orders.transitions import can_cancel, next_status
from apps.queues.exceptions import OrderDraftError
from apps.queues.services import LineItemDraft, OrderDraft, create_table_order
from apps.shop.models import ShopSettings


class OrderItemCreateSerializer(serializers.Serializer):
    menu_item_id = serializers.PrimaryKeyRelatedField(
        queryset=MenuItem.objects.live(),
        source="menu_item",
    )
    quantity = serializers.IntegerField(min_value=1)
    notes = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")

    def validate(self, attrs):
        menu_item = attrs["menu_item"]
        if not menu_item.is_available:
            raise serializers.ValidationError(f"{menu_item.name} is sold out.")
        return attrs


class CheckoutSerializerMixin:
    """Builds an ``OrderDraft`` from validated checkout data, pricing lines from the menu."""

    def build_draft(self, validated_data) -> OrderDraft:
        items = [
            LineItemDraft(
                name=item["menu_item"].name,
                quantity=item["quantity"],
                unit_price=item["menu_item"].price,
                menu_item=item["menu_item"],
                notes=item.get("notes", ""),
            )
            for item in validated_data.get("items", [])
        ]
        return OrderDraft(
            items=items,
            customer_name=validated_data.get("customer_name", ""),
            customer_phone=validated_data.get("customer_phone", ""),
            table_number=validated_data.get("table_number", ""),
            notes=validated_data.get("notes", ""),
        )


class OrderItemListSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderItem
        fields = ["id", "menu_item", "menu_item_name", "quantity", "unit_price", "total_price", "notes"]


class OrderListSerializer(serializers.ModelSerializer):
    items = OrderItemListSerializer(many=True, read_only=True)
    queue_label = serializers.CharField(read_only=True, allow_null=True)
    ticket = serializers.CharField(read_only=True, allow_null=True)
    next_status = serializers.SerializerMethodField()
    can_cancel = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "mode",
            "queue_number",
            "queue_label",
            "ticket",
            "table_number",
            "customer_name",
            "customer_phone",
            "status",
            "next_status",
            "can_cancel",
            "items",
            "total_amount",
            "notes",
            "tracking_url",
            "created_at",
            "updated_at",
        ]

    def get_next_status(self, obj) -> str | None:
        return next_status(obj.status)

    def get_can_cancel(self, obj) -> bool:
        return can_cancel(obj.status)


class TableOrderCreateSerializer(CheckoutSerializerMixin, serializers.Serializer):
    table_number = serializers.CharField(max_length=20)
    customer_name = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = OrderItemCreateSerializer(many=True, allow_empty=True)

    def validate(self, attrs):
        if not ShopSettings.load().enable_table_ordering:
            raise serializers.ValidationError("Table ordering is disabled.")
        return attrs

    def create(self, validated_data):
        try:
            return create_table_order(self.build_draft(validated_data))
        except OrderDraftError as err:
            raise serializers.ValidationError(str(err)) from err

    def to_representation(self, instance):
        return OrderListSerializer(instance, context=self.context).data


class OrderStatusSerializer(serializers.Serializer):
    # checked against OrderStatus by the service so the error names the valid values
    status = serializers.CharField()

    def to_representation(self, instance):
        return {
            "id": str(instance.id),
            "order_no": instance.order_no,
            "queue_number": instance.queue_number,
            "status": instance.status,
            "updated_at": serializers.DateTimeField().to_representation(instance.updated_at),
        }
