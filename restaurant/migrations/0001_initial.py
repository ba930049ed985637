from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="RestoTable",
            fields=[
                (
                    "table_name",
                    models.CharField(max_length=50, primary_key=True, serialize=False),
                ),
                ("seat_capacity", models.PositiveIntegerField()),
            ],
            options={
                "db_table": "resto_table",
                "ordering": ["table_name"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("seat_capacity__gte", 1)),
                        name="resto_table_seat_capacity_positive",
                    )
                ],
            },
        ),
    ]
