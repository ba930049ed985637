import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("restaurant", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="TableStateEvent",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("table_name", models.CharField(db_index=True, max_length=50)),
                (
                    "status",
                    models.CharField(
                        choices=[("empty", "Empty"), ("busy", "Busy")], max_length=10
                    ),
                ),
                ("guest_count", models.PositiveIntegerField(default=0)),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
            ],
            options={
                "db_table": "table_state_events",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="TableState",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("empty", "Empty"), ("busy", "Busy")],
                        db_column="table_status",
                        default="empty",
                        max_length=10,
                    ),
                ),
                ("guest_count", models.PositiveIntegerField(default=0)),
                (
                    "timestamp",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "table",
                    models.ForeignKey(
                        db_column="fk_table_name",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="states",
                        to="restaurant.restotable",
                        to_field="table_name",
                    ),
                ),
            ],
            options={
                "db_table": "table_states",
                "indexes": [
                    models.Index(
                        fields=["status", "timestamp"],
                        name="table_states_status_ts_idx",
                    )
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("status", "empty"), _negated=True),
                            ("guest_count", 0),
                            _connector="OR",
                        ),
                        name="table_states_empty_has_no_guests",
                    )
                ],
            },
        ),
    ]
