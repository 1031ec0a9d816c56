"""Dynamic pricing rule tables.

The pricing engine only reads these tables. Staff replace a hotel's rules
wholesale; individual rows are never edited in place by the engine.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

MULTIPLIER_FIELD_KWARGS = {
    "max_digits": 4,
    "decimal_places": 2,
    "validators": [MinValueValidator(Decimal("0.01"))],
}


class SeasonalPricing(models.Model):
    """Multiplier applied to every night between start_date and end_date (both inclusive)."""

    hotel = models.ForeignKey("hotels.Hotel", on_delete=models.CASCADE, related_name="seasonal_pricing")
    name = models.CharField(max_length=100)
    start_date = models.DateField()
    end_date = models.DateField()
    multiplier = models.DecimalField(**MULTIPLIER_FIELD_KWARGS)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Seasonal pricing rule")
        verbose_name_plural = _("Seasonal pricing rules")
        ordering = ["start_date", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(end_date__gte=models.F("start_date")),
                name="seasonal_pricing_valid_date_range",
            ),
            models.CheckConstraint(
                condition=models.Q(multiplier__gt=0),
                name="seasonal_pricing_positive_multiplier",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ×{self.multiplier} ({self.start_date} – {self.end_date})"


class DayTypePricing(models.Model):
    """Weekday / weekend multiplier, at most one per day type and hotel."""

    class DayType(models.TextChoices):
        WEEKDAY = "weekday", _("Weekday")
        WEEKEND = "weekend", _("Weekend")

    hotel = models.ForeignKey("hotels.Hotel", on_delete=models.CASCADE, related_name="day_type_pricing")
    day_type = models.CharField(max_length=10, choices=DayType.choices)
    multiplier = models.DecimalField(**MULTIPLIER_FIELD_KWARGS)

    class Meta:
        verbose_name = _("Day type pricing rule")
        verbose_name_plural = _("Day type pricing rules")
        ordering = ["day_type"]
        constraints = [
            models.UniqueConstraint(fields=["hotel", "day_type"], name="day_type_pricing_unique_per_hotel"),
            models.CheckConstraint(
                condition=models.Q(multiplier__gt=0),
                name="day_type_pricing_positive_multiplier",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.get_day_type_display()} ×{self.multiplier}"


class OccupancyPricing(models.Model):
    """Multiplier for an inclusive occupancy percentage band."""

    hotel = models.ForeignKey("hotels.Hotel", on_delete=models.CASCADE, related_name="occupancy_pricing")
    min_occupancy_pct = models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])
    max_occupancy_pct = models.PositiveSmallIntegerField(validators=[MaxValueValidator(100)])
    multiplier = models.DecimalField(**MULTIPLIER_FIELD_KWARGS)

    class Meta:
        verbose_name = _("Occupancy pricing tier")
        verbose_name_plural = _("Occupancy pricing tiers")
        ordering = ["min_occupancy_pct", "id"]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(min_occupancy_pct__lte=models.F("max_occupancy_pct"))
                    & models.Q(max_occupancy_pct__lte=100)
                ),
                name="occupancy_pricing_valid_band",
            ),
            models.CheckConstraint(
                condition=models.Q(multiplier__gt=0),
                name="occupancy_pricing_positive_multiplier",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.min_occupancy_pct}-{self.max_occupancy_pct}% ×{self.multiplier}"
