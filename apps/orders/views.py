from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.generics import ListCreateAPIView, RetrieveAPIView
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.drf_permissions import RoleBasedPermission
from apps.common.mixins import PermissionMixin
from apps.common.throttling import CheckoutRateThrottle
from apps.orders.models import Order
from apps.orders.serializers import OrderListSerializer, OrderStatusSerializer, TableOrderCreateSerializer
from apps.orders.transitions import TransitionError, advance_order, cancel_order
from apps.queues.exceptions import InvalidStatus
from apps.queues.services import update_status

ORDER_ID_PARAMETER = OpenApiParameter(
    name="order_id",
    description="Order ID",
    required=True,
    type=str,
    location=OpenApiParameter.PATH,
)


@extend_schema_view(
    get=extend_schema(summary="Staff: List orders, filterable by status and mode"),
    post=extend_schema(summary="Customer: Place a table order", request=TableOrderCreateSerializer),
)
class OrderListCreateView(ListCreateAPIView):
    required_permission = "orders.view_order"
    filterset_fields = ["status", "mode"]

    def get_queryset(self):
        return Order.objects.live().prefetch_related("items").order_by("-created_at")

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [RoleBasedPermission()]

    def get_throttles(self):
        if self.request.method == "POST":
            return [CheckoutRateThrottle()]
        return super().get_throttles()

    def get_serializer_class(self):
        if self.request.method == "POST":
            return TableOrderCreateSerializer
        return OrderListSerializer


@extend_schema(summary="Staff: Get order by ID", parameters=[ORDER_ID_PARAMETER])
class OrderDetailView(PermissionMixin, RetrieveAPIView):
    serializer_class = OrderListSerializer
    required_permission = "orders.view_order"
    lookup_url_kwarg = "order_id"

    def get_queryset(self):
        return Order.objects.live().prefetch_related("items")


@extend_schema(summary="Staff: Get order by 6 character UPPERCASE code")
class OrderByNumberView(PermissionMixin, RetrieveAPIView):
    serializer_class = OrderListSerializer
    required_permission = "orders.view_order"
    lookup_field = "order_no"

    def get_queryset(self):
        return Order.objects.live().prefetch_related("items")


class _OrderActionView(PermissionMixin, APIView):
    required_permission = "orders.change_order_status"
    transition = None

    def post(self, request, order_id):
        order = get_object_or_404(Order.objects.live(), id=order_id)
        try:
            order = self.transition(order)
        except TransitionError as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(OrderListSerializer(order, context={"request": request}).data)


@extend_schema(
    summary="Staff: Move an order one step forward",
    description="pending → confirmed → preparing → ready → completed.",
    parameters=[ORDER_ID_PARAMETER],
    request=None,
    responses={200: OrderListSerializer},
    tags=["orders"],
)
class OrderAdvanceView(_OrderActionView):
    transition = staticmethod(advance_order)


@extend_schema(
    summary="Staff: Cancel a pending order",
    parameters=[ORDER_ID_PARAMETER],
    request=None,
    responses={200: OrderListSerializer},
    tags=["orders"],
)
class OrderCancelView(_OrderActionView):
    transition = staticmethod(cancel_order)


@extend_schema(
    summary="Staff: Overwrite an order's status",
    description="Accepts any of the six statuses regardless of the current one.",
    parameters=[ORDER_ID_PARAMETER],
    request=OrderStatusSerializer,
    responses={200: OrderStatusSerializer},
    tags=["orders"],
)
class OrderStatusView(PermissionMixin, APIView):
    required_permission = "orders.change_order_status"

    def patch(self, request, order_id):
        order = get_object_or_404(Order.objects.live(), id=order_id)
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_status(order, serializer.validated_data["status"])
        except InvalidStatus as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(OrderStatusSerializer(order).data)
