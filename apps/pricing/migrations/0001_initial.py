from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def multiplier_field():
    return models.DecimalField(
        decimal_places=2,
        max_digits=4,
        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hotels", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="SeasonalPricing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("multiplier", multiplier_field()),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="seasonal_pricing",
                        to="hotels.hotel",
                    ),
                ),
            ],
            options={
                "verbose_name": "Seasonal pricing rule",
                "verbose_name_plural": "Seasonal pricing rules",
                "ordering": ["start_date", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("end_date__gte", models.F("start_date"))),
                        name="seasonal_pricing_valid_date_range",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("multiplier__gt", 0)),
                        name="seasonal_pricing_positive_multiplier",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="DayTypePricing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "day_type",
                    models.CharField(choices=[("weekday", "Weekday"), ("weekend", "Weekend")], max_length=10),
                ),
                ("multiplier", multiplier_field()),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="day_type_pricing",
                        to="hotels.hotel",
                    ),
                ),
            ],
            options={
                "verbose_name": "Day type pricing rule",
                "verbose_name_plural": "Day type pricing rules",
                "ordering": ["day_type"],
                "constraints": [
                    models.UniqueConstraint(fields=("hotel", "day_type"), name="day_type_pricing_unique_per_hotel"),
                    models.CheckConstraint(
                        condition=models.Q(("multiplier__gt", 0)),
                        name="day_type_pricing_positive_multiplier",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OccupancyPricing",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "min_occupancy_pct",
                    models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)]),
                ),
                (
                    "max_occupancy_pct",
                    models.PositiveSmallIntegerField(validators=[django.core.validators.MaxValueValidator(100)]),
                ),
                ("multiplier", multiplier_field()),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="occupancy_pricing",
                        to="hotels.hotel",
                    ),
                ),
            ],
            options={
                "verbose_name": "Occupancy pricing tier",
                "verbose_name_plural": "Occupancy pricing tiers",
                "ordering": ["min_occupancy_pct", "id"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("min_occupancy_pct__lte", models.F("max_occupancy_pct")),
                            ("max_occupancy_pct__lte", 100),
                        ),
                        name="occupancy_pricing_valid_band",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("multiplier__gt", 0)),
                        name="occupancy_pricing_positive_multiplier",
                    ),
                ],
            },
        ),
    ]
