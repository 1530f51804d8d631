import random
import string

from django.db import models

from apps.common.constants import OperationMode, OrderStatus
from apps.common.models import BaseModel, LiveQuerySet
from apps.menus.models import MenuItem
from apps.queues.codec import format_queue_number, ticket_for

ORDER_NO_LENGTH = 6


class OrderQuerySet(LiveQuerySet):
    def in_queue(self, mode=OperationMode.MARKET):
        return self.live().filter(mode=mode, queue_number__isnull=False)

    def active(self, mode=OperationMode.MARKET):
        return self.in_queue(mode).filter(status__in=OrderStatus.active()).order_by("queue_number", "created_at")

    def by_queue_number(self, queue_number: int):
        # numbering restarts after a counter reset, newest holder first
        return self.in_queue().filter(queue_number=queue_number).order_by("-created_at")


class Order(BaseModel):
    order_no = models.CharField(max_length=ORDER_NO_LENGTH, unique=True)
    mode = models.CharField(max_length=20, choices=OperationMode.choices, default=OperationMode.MARKET)
    queue_number = models.PositiveIntegerField(null=True, blank=True)
    table_number = models.CharField(max_length=20, blank=True)
    customer_name = models.CharField(max_length=120, blank=True)
    customer_phone = models.CharField(max_length=30, blank=True)
    status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.TextField(blank=True)
    tracking_url = models.CharField(max_length=255, blank=True)

    objects = OrderQuerySet.as_manager()

    class Meta:
        db_table = "order"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"]),
            models.Index(fields=["mode", "queue_number"]),
        ]
        permissions = [
            ("change_order_status", "Can change order status"),
        ]

    @staticmethod
    def generate_order_no():
        chars = string.ascii_uppercase + string.digits
        while True:
            code = "".join(random.choices(chars, k=ORDER_NO_LENGTH))
            if not Order.objects.filter(order_no=code).exists():
                return code

    @property
    def queue_label(self):
        if self.queue_number is None:
            return None
        return format_queue_number(self.queue_number)

    @property
    def ticket(self):
        if self.queue_number is None:
            return None
        return ticket_for(self.queue_number, self.id)

    def __str__(self):
        if self.queue_number is not None:
            return f"{self.order_no} • queue {self.queue_number}"
        if self.table_number:
            return f"{self.order_no} • table {self.table_number}"
        return self.order_no


class OrderItem(BaseModel):
    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
        db_column="order_id",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
        db_column="menu_item_id",
    )
    # name and price are copied at checkout so later menu edits don't rewrite history
    menu_item_name = models.CharField(max_length=150)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    notes = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = "order_item"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["order"]),
            models.Index(fields=["menu_item"]),
        ]

    def __str__(self):
        return f"{self.order.order_no} · {self.menu_item_name} × {self.quantity}"
