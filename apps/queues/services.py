import logging
import uuid
from bisect import bisect_left
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction

from apps.common.constants import WALK_IN_CUSTOMER_NAME, OperationMode, OrderStatus
from apps.menus.models import MenuItem
from apps.orders.models import Order, OrderItem
from apps.orders.transitions import set_order_status
from apps.queues import codec
from apps.queues.counter import next_queue_number
from apps.queues.exceptions import (
    InvalidStatus,
    InvalidTicketFormat,
    OrderDraftError,
    TicketForbidden,
    TicketNotFound,
)
from apps.shop.models import ShopSettings

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _quantize(amount: Decimal) -> Decimal:
    return (amount or Decimal("0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


@dataclass
class LineItemDraft:
    name: str
    quantity: int
    unit_price: Decimal
    menu_item: MenuItem | None = None
    notes: str = ""

    @property
    def total_price(self) -> Decimal:
        return _quantize(self.unit_price * self.quantity)


@dataclass
class OrderDraft:
    items: list[LineItemDraft] = field(default_factory=list)
    customer_name: str = ""
    customer_phone: str = ""
    table_number: str = ""
    notes: str = ""

    @property
    def total_amount(self) -> Decimal:
        return _quantize(sum((item.total_price for item in self.items), Decimal("0")))


@dataclass(frozen=True)
class QueuePosition:
    orders_ahead: int
    estimated_wait_minutes: int


def validate_draft(draft: OrderDraft) -> None:
    if not draft.items:
        raise OrderDraftError("Order items are required.")
    if any(item.quantity < 1 for item in draft.items):
        raise OrderDraftError("Item quantities must be at least 1.")
    if draft.total_amount <= 0:
        raise OrderDraftError("Total amount must be greater than 0.")


def _persist_order(draft: OrderDraft, **fields) -> Order:
    order = Order.objects.create(
        order_no=Order.generate_order_no(),
        customer_name=draft.customer_name,
        customer_phone=draft.customer_phone,
        table_number=draft.table_number,
        notes=draft.notes,
        total_amount=draft.total_amount,
        status=OrderStatus.PENDING,
        **fields,
    )
    OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                menu_item=item.menu_item,
                menu_item_name=item.name,
                quantity=item.quantity,
                unit_price=_quantize(item.unit_price),
                total_price=item.total_price,
                notes=item.notes,
            )
            for item in draft.items
        ]
    )
    return order


@transaction.atomic
def create_ticket(draft: OrderDraft, *, walk_in: bool = False, base_url: str | None = None) -> Order:
    """
    Admit an order to the market queue.

    Customer checkouts must carry items and a positive total; walk-ins skip
    that check and may be empty placeholders. Number allocation and the
    order insert share one transaction, so a failed insert never leaves a
    number allocated without an order behind it.
    """
    if not walk_in:
        validate_draft(draft)

    queue_number = next_queue_number()
    order = _persist_order(draft, mode=OperationMode.MARKET, queue_number=queue_number)

    queue_url = codec.mint_queue_url(queue_number, order.id, base_url or settings.APP_BASE_URL)
    order.tracking_url = queue_url.url
    order.save(update_fields=["tracking_url", "updated_at"])

    kind = "Walk-in" if walk_in else "Checkout"
    logger.info(f"{kind} ticket {codec.format_queue_number(queue_number)} issued for order {order.order_no}")
    return order


def create_walk_in_ticket(customer_name: str = "", customer_phone: str = "", base_url: str | None = None) -> Order:
    draft = OrderDraft(
        customer_name=customer_name.strip() or WALK_IN_CUSTOMER_NAME,
        customer_phone=customer_phone.strip(),
    )
    return create_ticket(draft, walk_in=True, base_url=base_url)


@transaction.atomic
def create_table_order(draft: OrderDraft) -> Order:
    validate_draft(draft)
    if not draft.table_number:
        raise OrderDraftError("Table number is required.")

    order = _persist_order(draft, mode=OperationMode.RESTAURANT)
    logger.info(f"Table {draft.table_number} placed order {order.order_no}")
    return order


def resolve_ticket(ticket: str) -> Order:
    parsed = codec.parse_ticket(ticket)
    if parsed is None:
        raise InvalidTicketFormat(f"'{ticket}' is not a queue ticket.")

    candidates = list(Order.objects.by_queue_number(parsed.queue_number).prefetch_related("items"))
    if not candidates:
        raise TicketNotFound(f"No order holds queue number {parsed.label}.")

    # after a counter reset an older, finished order may share the number
    for order in candidates:
        if codec.verify_queue_digest(order.id, parsed.hash):
            return order

    logger.warning(f"Ticket hash mismatch for {parsed.label}")
    raise TicketForbidden(f"Ticket {parsed.label} does not match its order.")


def _resolve_order(ticket_or_id) -> Order:
    if isinstance(ticket_or_id, Order):
        return ticket_or_id

    value = str(ticket_or_id)
    try:
        order_id = uuid.UUID(value)
    except ValueError:
        return resolve_ticket(value)

    order = Order.objects.live().filter(id=order_id).first()
    if order is None:
        raise TicketNotFound(f"Order {value} not found.")
    return order


def update_status(ticket_or_id, new_status) -> Order:
    """Write ``new_status`` as is, whatever the current state (raw override)."""
    if new_status not in OrderStatus.values:
        raise InvalidStatus(f"Invalid status. Must be one of: {', '.join(OrderStatus.values)}")

    order = _resolve_order(ticket_or_id)
    return set_order_status(order, new_status)


def queue_position(order: Order, wait_per_queue: int | None = None) -> QueuePosition:
    if order.queue_number is None:
        orders_ahead = 0
    else:
        orders_ahead = (
            Order.objects.in_queue(order.mode)
            .filter(status__in=OrderStatus.queue_blocking(), queue_number__lt=order.queue_number)
            .exclude(pk=order.pk)
            .count()
        )

    if wait_per_queue is None:
        wait_per_queue = ShopSettings.load().estimated_wait_per_queue

    return QueuePosition(orders_ahead=orders_ahead, estimated_wait_minutes=orders_ahead * wait_per_queue)


def queue_positions(orders: list[Order], wait_per_queue: int | None = None) -> dict:
    """Positions for every order on a board, computed from the board itself."""
    if wait_per_queue is None:
        wait_per_queue = ShopSettings.load().estimated_wait_per_queue

    blocking = sorted(
        order.queue_number
        for order in orders
        if order.queue_number is not None and order.status in OrderStatus.queue_blocking()
    )

    positions = {}
    for order in orders:
        ahead = bisect_left(blocking, order.queue_number) if order.queue_number is not None else 0
        positions[order.pk] = QueuePosition(orders_ahead=ahead, estimated_wait_minutes=ahead * wait_per_queue)
    return positions
