from django.db import models


class UserRole(models.TextChoices):
    STAFF = "staff", "Staff"
    ADMIN = "admin", "Administrator"


class OperationMode(models.TextChoices):
    RESTAURANT = "restaurant", "Restaurant"  # served to a table
    MARKET = "market", "Market"  # served by queue number


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"

    @classmethod
    def active(cls):
        return [cls.PENDING, cls.CONFIRMED, cls.PREPARING, cls.READY]

    @classmethod
    def queue_blocking(cls):
        # ready orders only wait for pickup, they hold nobody up
        return [cls.PENDING, cls.CONFIRMED, cls.PREPARING]

    @classmethod
    def terminal(cls):
        return [cls.COMPLETED, cls.CANCELLED]


ROLE_GROUP_NAMES = ["admin", "staff"]

WALK_IN_CUSTOMER_NAME = "Walk-in Customer"
