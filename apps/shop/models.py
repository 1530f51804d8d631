from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.common.constants import OperationMode
from apps.common.models import BaseModel


class ShopSettings(BaseModel):
    """Single row of shop-wide settings, read through ``ShopSettings.load()``."""

    restaurant_name = models.CharField(max_length=120, default="QR Food Ordering")
    restaurant_description = models.TextField(blank=True)
    operation_mode = models.CharField(max_length=20, choices=OperationMode.choices, default=OperationMode.MARKET)
    currency = models.CharField(max_length=3, default="THB")
    tax_rate = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=Decimal("0.070"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
    )
    service_charge_rate = models.DecimalField(
        max_digits=4,
        decimal_places=3,
        default=Decimal("0.000"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("1"))],
    )
    enable_queue_system = models.BooleanField(default=True)
    enable_table_ordering = models.BooleanField(default=True)
    estimated_wait_per_queue = models.PositiveIntegerField(
        default=5,
        help_text="Estimated service time per queue ticket, in minutes.",
    )

    class Meta:
        db_table = "shop_settings"
        verbose_name = "shop settings"
        verbose_name_plural = "shop settings"

    @classmethod
    def load(cls) -> "ShopSettings":
        settings = cls.objects.order_by("created_at").first()
        if settings is None:
            settings = cls.objects.create()
        return settings

    def __str__(self):
        return self.restaurant_name
