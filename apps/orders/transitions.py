"""
Order lifecycle.

Orders move ``pending -> confirmed -> preparing -> ready -> completed``, one
stage per guided advance. A guided cancel is only offered while the order is
still ``pending``. ``completed`` and ``cancelled`` are terminal.

``set_order_status`` is the raw override used by the generic status-update
endpoints: it accepts any of the six statuses from any state and is kept
separate from the guided actions on purpose.
"""

import logging

from apps.common.constants import OrderStatus
from apps.orders.models import Order

logger = logging.getLogger(__name__)

NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
    OrderStatus.COMPLETED: None,
    OrderStatus.CANCELLED: None,
}


class TransitionError(Exception):
    pass


def next_status(status) -> OrderStatus | None:
    return NEXT_STATUS[OrderStatus(status)]


def can_cancel(status) -> bool:
    return OrderStatus(status) == OrderStatus.PENDING


def is_terminal(status) -> bool:
    return OrderStatus(status) in OrderStatus.terminal()


def _write_status(order: Order, status: OrderStatus) -> Order:
    order.status = status
    order.save(update_fields=["status", "updated_at"])
    return order


def advance_order(order: Order) -> Order:
    target = next_status(order.status)
    if target is None:
        raise TransitionError(f"Order {order.order_no} is {order.status} and cannot be advanced.")

    logger.info(f"Order {order.order_no}: {order.status} -> {target}")
    return _write_status(order, target)


def cancel_order(order: Order) -> Order:
    if not can_cancel(order.status):
        raise TransitionError(f"Only pending orders can be cancelled, order {order.order_no} is {order.status}.")

    logger.info(f"Order {order.order_no} cancelled")
    return _write_status(order, OrderStatus.CANCELLED)


def set_order_status(order: Order, status) -> Order:
    status = OrderStatus(status)
    if status != order.status:
        logger.info(f"Order {order.order_no}: status overridden {order.status} -> {status}")
    return _write_status(order, status)
