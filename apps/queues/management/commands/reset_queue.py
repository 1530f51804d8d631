from datetime import timedelta

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.common.constants import OrderStatus
from apps.orders.models import Order
from apps.queues.codec import format_queue_number
from apps.queues.counter import reset_queue_counter


class Command(BaseCommand):
    help = "Restarts queue numbering at Q001, optionally archiving finished orders"

    def add_arguments(self, parser):
        parser.add_argument("--force", action="store_true", help="Reset even while active orders hold numbers")
        parser.add_argument(
            "--purge-before-hours",
            type=int,
            default=None,
            help="Soft-delete completed and cancelled orders older than this many hours",
        )

    def handle(self, *args, **options):
        if not options["force"] and Order.objects.active().exists():
            raise CommandError("Active queue orders still hold numbers. Finish them first or pass --force.")

        hours = options["purge_before_hours"]
        if hours is not None:
            if hours < 0:
                raise CommandError("--purge-before-hours must not be negative.")
            cutoff = timezone.now() - timedelta(hours=hours)
            purged = Order.objects.filter(status__in=OrderStatus.terminal(), created_at__lte=cutoff).archive()
            self.stdout.write(f"Archived {purged} finished order(s)")

        counter = reset_queue_counter()
        self.stdout.write(
            self.style.SUCCESS(f"Queue counter reset, next ticket is {format_queue_number(counter.value + 1)}")
        )
