from rest_framework import serializers

from apps.orders.models import Order
from apps.orders.serializers import (
    CheckoutSerializerMixin,
    OrderItemCreateSerializer,
    OrderItemListSerializer,
    OrderListSerializer,
)
from apps.queues import codec
from apps.queues.exceptions import OrderDraftError
from apps.queues.qr import render_qr_base64
from apps.queues.services import create_ticket, create_walk_in_ticket
from apps.shop.models import ShopSettings


class TicketCheckoutSerializer(CheckoutSerializerMixin, serializers.Serializer):
    customer_name = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = OrderItemCreateSerializer(many=True, allow_empty=True)

    def validate(self, attrs):
        if not ShopSettings.load().enable_queue_system:
            raise serializers.ValidationError("Queue ordering is disabled.")
        return attrs

    def create(self, validated_data):
        try:
            return create_ticket(self.build_draft(validated_data))
        except OrderDraftError as err:
            raise serializers.ValidationError(str(err)) from err

    def to_representation(self, instance):
        return TicketCreatedSerializer(instance, context=self.context).data


class WalkInSerializer(serializers.Serializer):
    customer_name = serializers.CharField(max_length=120, required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True, default="")

    def create(self, validated_data):
        return create_walk_in_ticket(**validated_data)

    def to_representation(self, instance):
        return TicketCreatedSerializer(instance, context=self.context).data


class TicketCreatedSerializer(serializers.ModelSerializer):
    order_id = serializers.UUIDField(source="id", read_only=True)
    queue_label = serializers.CharField(read_only=True)
    ticket = serializers.CharField(read_only=True)
    path = serializers.SerializerMethodField()
    hash = serializers.SerializerMethodField()
    url = serializers.CharField(source="tracking_url", read_only=True)
    qr_code = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "order_id",
            "order_no",
            "queue_number",
            "queue_label",
            "ticket",
            "path",
            "url",
            "hash",
            "qr_code",
            "status",
            "total_amount",
            "created_at",
        ]

    def get_path(self, obj) -> str:
        return codec.mint_queue_url(obj.queue_number, obj.id).path

    def get_hash(self, obj) -> str:
        return codec.queue_digest(obj.id)

    def get_qr_code(self, obj) -> str:
        """Base64 PNG of the tracking URL, ready for a printed or on-screen ticket."""
        return render_qr_base64(obj.tracking_url)


class TicketSerializer(serializers.ModelSerializer):
    """What a ticket holder sees when polling their ticket."""

    items = OrderItemListSerializer(many=True, read_only=True)
    queue_label = serializers.CharField(read_only=True)
    orders_ahead = serializers.SerializerMethodField()
    estimated_wait_minutes = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "queue_number",
            "queue_label",
            "customer_name",
            "status",
            "items",
            "total_amount",
            "notes",
            "tracking_url",
            "orders_ahead",
            "estimated_wait_minutes",
            "created_at",
            "updated_at",
        ]

    def get_orders_ahead(self, obj) -> int:
        return self.context["position"].orders_ahead

    def get_estimated_wait_minutes(self, obj) -> int:
        return self.context["position"].estimated_wait_minutes


class QueueDisplaySerializer(serializers.ModelSerializer):
    queue_label = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = ["queue_number", "queue_label", "status"]


class QueueBoardSerializer(OrderListSerializer):
    orders_ahead = serializers.SerializerMethodField()
    estimated_wait_minutes = serializers.SerializerMethodField()

    class Meta(OrderListSerializer.Meta):
        fields = [*OrderListSerializer.Meta.fields, "orders_ahead", "estimated_wait_minutes"]

    def get_orders_ahead(self, obj) -> int:
        return self.context["positions"][obj.pk].orders_ahead

    def get_estimated_wait_minutes(self, obj) -> int:
        return self.context["positions"][obj.pk].estimated_wait_minutes


class ResetCounterSerializer(serializers.Serializer):
    force = serializers.BooleanField(required=False, default=False)
