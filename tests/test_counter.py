import threading
from unittest import mock

import pytest
from django.db import DatabaseError, connection

from apps.orders.models import Order
from apps.queues.counter import current_queue_number, next_queue_number, reset_queue_counter
from apps.queues.exceptions import AllocationError
from apps.queues.models import QueueCounter
from apps.queues.services import OrderDraft, create_ticket, create_walk_in_ticket

pytestmark = pytest.mark.django_db


def test_numbers_start_at_one():
    assert next_queue_number() == 1
    assert current_queue_number() == 1


def test_numbers_are_consecutive_from_current_value():
    QueueCounter.objects.create(name="market", value=41)
    assert [next_queue_number() for _ in range(5)] == [42, 43, 44, 45, 46]


def test_counters_are_independent():
    next_queue_number("market")
    next_queue_number("market")
    assert next_queue_number("kiosk") == 1


def test_reset_restarts_numbering():
    for _ in range(3):
        next_queue_number()

    counter = reset_queue_counter()

    assert counter.value == 0
    assert counter.reset_at is not None
    assert next_queue_number() == 1


def test_current_number_without_counter_is_zero():
    assert current_queue_number("unused") == 0


def test_store_failure_raises_allocation_error_and_leaves_no_order():
    with mock.patch("apps.queues.counter.QueueCounter.objects.filter", side_effect=DatabaseError("down")):
        with pytest.raises(AllocationError):
            create_walk_in_ticket()

    assert not Order.objects.exists()


def test_failed_insert_does_not_keep_the_number():
    with mock.patch("apps.queues.services._persist_order", side_effect=DatabaseError("insert failed")):
        with pytest.raises(DatabaseError):
            create_ticket(OrderDraft(), walk_in=True)

    assert current_queue_number() == 0


THREADS = 8
PER_THREAD = 10


def _allocate_concurrently(name):
    results, errors = [], []
    barrier = threading.Barrier(THREADS)
    lock = threading.Lock()

    def worker():
        try:
            barrier.wait()
            for _ in range(PER_THREAD):
                number = next_queue_number(name)
                with lock:
                    results.append(number)
        except Exception as e:
            with lock:
                errors.append(e)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker) for _ in range(THREADS)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return results, errors


@pytest.mark.django_db(transaction=True)
def test_concurrent_callers_get_distinct_consecutive_numbers():
    QueueCounter.objects.create(name="market", value=7)

    results, errors = _allocate_concurrently("market")

    assert errors == []
    assert sorted(results) == list(range(8, 8 + THREADS * PER_THREAD))
    assert current_queue_number("market") == 7 + THREADS * PER_THREAD


@pytest.mark.django_db(transaction=True)
def test_concurrent_callers_racing_to_create_the_counter():
    results, errors = _allocate_concurrently("lunch-rush")

    assert errors == []
    assert sorted(results) == list(range(1, THREADS * PER_THREAD + 1))
    assert QueueCounter.objects.filter(name="lunch-rush").count() == 1
