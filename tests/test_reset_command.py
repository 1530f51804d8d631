from datetime import timedelta

import pytest
from django.core.management import CommandError, call_command
from django.utils import timezone

from apps.common.constants import OrderStatus
from apps.orders.models import Order
from apps.queues.counter import current_queue_number
from apps.queues.services import create_walk_in_ticket

pytestmark = pytest.mark.django_db


def _finish(order, hours_ago=0):
    Order.objects.filter(pk=order.pk).update(
        status=OrderStatus.COMPLETED,
        created_at=timezone.now() - timedelta(hours=hours_ago),
    )


def test_resets_counter():
    _finish(create_walk_in_ticket())

    call_command("reset_queue")

    assert current_queue_number() == 0


def test_refuses_with_active_orders():
    create_walk_in_ticket()

    with pytest.raises(CommandError):
        call_command("reset_queue")
    assert current_queue_number() == 1


def test_force():
    create_walk_in_ticket()
    call_command("reset_queue", "--force")
    assert current_queue_number() == 0


def test_purges_old_finished_orders():
    old = create_walk_in_ticket()
    recent = create_walk_in_ticket()
    _finish(old, hours_ago=30)
    _finish(recent, hours_ago=1)

    call_command("reset_queue", "--purge-before-hours", "24")

    assert list(Order.objects.live()) == [Order.objects.get(pk=recent.pk)]
    old.refresh_from_db()
    assert old.deleted_at is not None
