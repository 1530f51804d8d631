from django.db import models

from apps.common.models import BaseModel

DEFAULT_COUNTER = "market"


class QueueCounter(BaseModel):
    name = models.CharField(max_length=40, unique=True, default=DEFAULT_COUNTER)
    value = models.PositiveBigIntegerField(default=0)  # last number handed out
    reset_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "queue_counter"
        permissions = [
            ("reset_queuecounter", "Can restart queue numbering from 1"),
        ]

    def __str__(self):
        return f"{self.name} • {self.value}"
