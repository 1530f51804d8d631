import logging

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from apps.queues.exceptions import AllocationError
from apps.queues.models import DEFAULT_COUNTER, QueueCounter

logger = logging.getLogger(__name__)


def _get_counter(name: str) -> QueueCounter:
    counter, _ = QueueCounter.objects.get_or_create(name=name)
    return counter


def _increment(name: str) -> int:
    return QueueCounter.objects.filter(name=name).update(value=F("value") + 1, updated_at=timezone.now())


@transaction.atomic
def next_queue_number(name: str = DEFAULT_COUNTER) -> int:
    """
    Hand out the next queue number.

    The UPDATE runs before anything reads the row, so the write lock is taken
    first and held until the surrounding transaction ends; concurrent callers
    queue up behind it instead of reading the same value. A missing counter
    is created at 1, and a caller that loses that race increments the row
    the winner created. Callers that persist an order in the same
    transaction get the number back for free if that insert fails.
    """
    try:
        if not _increment(name):
            try:
                with transaction.atomic():
                    QueueCounter.objects.create(name=name, value=1)
            except IntegrityError:
                logger.debug(f"Queue counter '{name}' created concurrently, incrementing it")
                _increment(name)

        value = QueueCounter.objects.filter(name=name).values_list("value", flat=True).get()
    except DatabaseError as err:
        logger.error(f"Queue counter '{name}' is unavailable: {err}", exc_info=True)
        raise AllocationError("Queue numbers are unavailable right now.") from err

    return value


def current_queue_number(name: str = DEFAULT_COUNTER) -> int:
    return QueueCounter.objects.filter(name=name).values_list("value", flat=True).first() or 0


@transaction.atomic
def reset_queue_counter(name: str = DEFAULT_COUNTER) -> QueueCounter:
    counter = _get_counter(name)
    QueueCounter.objects.filter(pk=counter.pk).update(value=0, reset_at=timezone.now(), updated_at=timezone.now())
    counter.refresh_from_db()
    logger.warning(f"Queue counter '{name}' reset, numbering restarts at 1")
    return counter
