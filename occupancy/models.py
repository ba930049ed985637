# occupancy/models.py

from django.db import models
from django.utils import timezone


class TableState(models.Model):
    """
    Occupancy record for a catalog table.
    Aggregate queries only consider records stamped with today's date.
    """

    class Status(models.TextChoices):
        EMPTY = "empty", "Empty"
        BUSY = "busy", "Busy"

    table = models.ForeignKey(
        "restaurant.RestoTable",
        on_delete=models.PROTECT,
        to_field="table_name",
        db_column="fk_table_name",
        related_name="states",
    )

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.EMPTY,
        db_column="table_status",
    )

    guest_count = models.PositiveIntegerField(default=0)

    # Time of the last status change
    timestamp = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "table_states"
        indexes = [
            models.Index(fields=["status", "timestamp"], name="table_states_status_ts_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~models.Q(status="empty") | models.Q(guest_count=0),
                name="table_states_empty_has_no_guests",
            ),
        ]

    def __str__(self):
        return f"{self.table_id} - {self.status} ({self.guest_count})"


class TableStateEvent(models.Model):
    """
    Append-only trail of applied table transitions.
    """

    table_name = models.CharField(max_length=50, db_index=True)
    status = models.CharField(max_length=10, choices=TableState.Status.choices)
    guest_count = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = "table_state_events"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.table_name} -> {self.status} at {self.created_at}"
