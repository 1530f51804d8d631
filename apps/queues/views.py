import logging

from django.http import HttpResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.drf_permissions import RoleBasedPermission
from apps.common.mixins import PermissionMixin, PublicCheckoutMixin, PublicDisplayMixin, PublicTicketMixin
from apps.common.throttling import TicketPollingThrottle
from apps.orders.models import Order
from apps.orders.serializers import OrderStatusSerializer
from apps.queues.codec import format_queue_number
from apps.queues.counter import reset_queue_counter
from apps.queues.exceptions import (
    TICKET_NOT_FOUND_MESSAGE,
    AllocationError,
    InvalidStatus,
    InvalidTicketFormat,
    TicketForbidden,
    TicketNotFound,
)
from apps.queues.qr import render_qr_png
from apps.queues.serializers import (
    QueueBoardSerializer,
    QueueDisplaySerializer,
    ResetCounterSerializer,
    TicketCheckoutSerializer,
    TicketCreatedSerializer,
    TicketSerializer,
    WalkInSerializer,
)
from apps.queues.services import queue_position, queue_positions, resolve_ticket, update_status

logger = logging.getLogger(__name__)

TICKET_PARAMETER = OpenApiParameter(
    name="ticket",
    description="Queue ticket, e.g. Q007-1a2b3c4d",
    required=True,
    type=str,
    location=OpenApiParameter.PATH,
)


def ticket_error_response(err) -> Response:
    """
    One body for every lookup failure; only the status code differs.

    A 403 still tells the caller that the queue number is held by some
    order. Guessing the 8-hex digest stays as hard either way, and staff
    clients rely on telling a stale ticket (404) from a mistyped one (403).
    """
    if isinstance(err, InvalidTicketFormat):
        code = status.HTTP_400_BAD_REQUEST
    elif isinstance(err, TicketForbidden):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_404_NOT_FOUND
    return Response({"error": TICKET_NOT_FOUND_MESSAGE}, status=code)


def allocation_error_response(err) -> Response:
    return Response({"error": str(err)}, status=status.HTTP_503_SERVICE_UNAVAILABLE)


@extend_schema(
    summary="Customer: Check out and take a queue ticket",
    description="Creates a pending market order with the next queue number and returns its tracking ticket.",
    request=TicketCheckoutSerializer,
    responses={201: TicketCreatedSerializer},
    tags=["queue"],
)
class TicketCheckoutView(PublicCheckoutMixin, generics.CreateAPIView):
    serializer_class = TicketCheckoutSerializer

    def create(self, request, *args, **kwargs):
        try:
            return super().create(request, *args, **kwargs)
        except AllocationError as e:
            return allocation_error_response(e)


@extend_schema(
    summary="Staff: Admit a walk-in customer to the queue",
    description="Walk-ins get a queue number without ordering anything; the order starts empty.",
    request=WalkInSerializer,
    responses={201: TicketCreatedSerializer},
    tags=["queue"],
)
class WalkInView(PermissionMixin, generics.CreateAPIView):
    serializer_class = WalkInSerializer
    required_permission = "orders.add_order"

    def create(self, request, *args, **kwargs):
        try:
            return super().create(request, *args, **kwargs)
        except AllocationError as e:
            return allocation_error_response(e)


@extend_schema(summary="Public: Queue display board", tags=["queue"])
class QueueDisplayView(PublicDisplayMixin, generics.ListAPIView):
    serializer_class = QueueDisplaySerializer
    pagination_class = None

    def get_queryset(self):
        return Order.objects.active()


@extend_schema(summary="Staff: Active queue with positions and available actions", tags=["queue"])
class QueueBoardView(PermissionMixin, generics.ListAPIView):
    serializer_class = QueueBoardSerializer
    required_permission = "orders.view_order"
    pagination_class = None

    def get_queryset(self):
        return Order.objects.active().prefetch_related("items")

    def list(self, request, *args, **kwargs):
        orders = list(self.get_queryset())
        context = {**self.get_serializer_context(), "positions": queue_positions(orders)}
        serializer = self.get_serializer_class()(orders, many=True, context=context)
        return Response(serializer.data)


@extend_schema(
    summary="Admin: Restart queue numbering from Q001",
    description="Refused while active queue orders still hold numbers, unless `force` is set.",
    request=ResetCounterSerializer,
    tags=["queue"],
)
class ResetCounterView(PermissionMixin, APIView):
    required_permission = "queues.reset_queuecounter"

    def post(self, request):
        serializer = ResetCounterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if not serializer.validated_data["force"] and Order.objects.active().exists():
            return Response(
                {"error": "Active queue orders still hold numbers. Finish them or pass force=true."},
                status=status.HTTP_409_CONFLICT,
            )

        counter = reset_queue_counter()
        logger.info(f"Queue counter reset requested by {request.user}")
        return Response(
            {
                "message": "Queue counter reset successfully",
                "queue_counter": counter.value,
                "next_queue": format_queue_number(counter.value + 1),
            }
        )


class TicketView(APIView):
    required_permission = "orders.change_order_status"

    def get_permissions(self):
        if self.request.method == "PATCH":
            return [RoleBasedPermission()]
        return [AllowAny()]

    def get_throttles(self):
        if self.request.method == "GET":
            return [TicketPollingThrottle()]
        return super().get_throttles()

    @extend_schema(
        summary="Customer: Poll a queue ticket",
        parameters=[TICKET_PARAMETER],
        responses={200: TicketSerializer},
        tags=["queue"],
    )
    def get(self, request, ticket):
        try:
            order = resolve_ticket(ticket)
        except (TicketNotFound, TicketForbidden) as e:
            return ticket_error_response(e)

        serializer = TicketSerializer(order, context={"request": request, "position": queue_position(order)})
        return Response(serializer.data)

    @extend_schema(
        summary="Staff: Set the status of a ticket's order",
        description="Writes any of the six statuses, regardless of the current one.",
        parameters=[TICKET_PARAMETER],
        request=OrderStatusSerializer,
        responses={200: OrderStatusSerializer},
        tags=["queue"],
    )
    def patch(self, request, ticket):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_status(ticket, serializer.validated_data["status"])
        except InvalidStatus as e:
            return Response({"error": str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except (TicketNotFound, TicketForbidden) as e:
            return ticket_error_response(e)

        return Response(OrderStatusSerializer(order).data)


@extend_schema(
    summary="Customer: Ticket QR code",
    parameters=[TICKET_PARAMETER],
    responses={(200, "image/png"): OpenApiTypes.BINARY},
    tags=["queue"],
)
class TicketQRView(PublicTicketMixin, APIView):
    def get(self, request, ticket):
        try:
            order = resolve_ticket(ticket)
        except (TicketNotFound, TicketForbidden) as e:
            return ticket_error_response(e)

        return HttpResponse(render_qr_png(order.tracking_url), content_type="image/png")
