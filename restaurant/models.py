from django.db import models


class RestoTable(models.Model):
    """
    Static catalog entry for a dining table.
    Maintained through the admin; read-only to the occupancy service.
    """

    table_name = models.CharField(max_length=50, primary_key=True)
    seat_capacity = models.PositiveIntegerField()

    class Meta:
        db_table = "resto_table"
        ordering = ["table_name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(seat_capacity__gte=1),
                name="resto_table_seat_capacity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.table_name} ({self.seat_capacity} seats)"
