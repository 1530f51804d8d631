from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.common.models import BaseModel


class Category(BaseModel):
    name = models.CharField(max_length=120, unique=True)
    description = models.TextField(blank=True)
    display_order = models.IntegerField(default=0)

    class Meta:
        db_table = "category"
        ordering = ("display_order", "name")
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name


class MenuItem(BaseModel):
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="menu_items",
        db_column="category_id",
    )
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    is_available = models.BooleanField(default=True)
    preparation_time = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes")
    display_order = models.IntegerField(default=0)

    class Meta:
        db_table = "menu_item"
        ordering = ("category__display_order", "display_order", "name")
        indexes = [
            models.Index(fields=["category", "display_order"]),
            models.Index(fields=["name"]),
        ]
        unique_together = [("category", "name")]

    def __str__(self):
        return self.name
