"""Coupon domain models."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings  # type: ignore
from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CouponQuerySet(models.QuerySet):
    def live(self):
        """Active and not soft-deleted."""
        return self.filter(is_active=True, deleted_at__isnull=True)

    def for_hotel(self, hotel_id: int | None):
        """Coupons of the hotel plus global ones."""
        return self.filter(models.Q(hotel_id=hotel_id) | models.Q(hotel__isnull=True))


class Coupon(models.Model):
    """Promotional code. A coupon without a hotel is valid everywhere."""

    class DiscountType(models.TextChoices):
        PERCENTAGE = "percentage", _("Percentage")
        FIXED = "fixed", _("Fixed amount")

    hotel = models.ForeignKey(
        "hotels.Hotel",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="coupons",
    )
    code = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True)
    discount_type = models.CharField(max_length=20, choices=DiscountType.choices)
    discount_value = models.DecimalField(max_digits=10, decimal_places=2)
    max_discount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Cap for percentage coupons."),
    )
    min_booking_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    used_count = models.PositiveIntegerField(default=0)
    valid_from = models.DateTimeField()
    valid_until = models.DateTimeField()
    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="created_coupons",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CouponQuerySet.as_manager()

    class Meta:
        verbose_name = _("Coupon")
        verbose_name_plural = _("Coupons")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(discount_value__gt=0),
                name="coupon_positive_value",
            ),
            models.CheckConstraint(
                condition=~models.Q(discount_type="percentage") | models.Q(discount_value__lte=100),
                name="coupon_percentage_at_most_100",
            ),
            models.CheckConstraint(
                condition=models.Q(valid_until__gte=models.F("valid_from")),
                name="coupon_valid_window",
            ),
            models.CheckConstraint(
                condition=models.Q(max_discount__isnull=True) | models.Q(max_discount__gt=0),
                name="coupon_positive_cap",
            ),
        ]

    def __str__(self) -> str:
        return self.code

    def save(self, *args, **kwargs):  # type: ignore
        self.code = self.code.strip().upper()
        super().save(*args, **kwargs)

    def deactivate(self) -> None:
        self.is_active = False
        self.deleted_at = timezone.now()
        self.save(update_fields=["is_active", "deleted_at", "updated_at"])


class CouponUsage(models.Model):
    """One redemption of a coupon by a user for a booking."""

    coupon = models.ForeignKey(Coupon, on_delete=models.PROTECT, related_name="usages")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="coupon_usages",
    )
    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="coupon_usages",
    )
    discount_amount = models.DecimalField(max_digits=10, decimal_places=2)
    used_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Coupon usage")
        verbose_name_plural = _("Coupon usages")
        ordering = ["-used_at"]
        constraints = [
            models.UniqueConstraint(fields=["coupon", "booking"], name="coupon_usage_once_per_booking"),
            models.CheckConstraint(
                condition=models.Q(discount_amount__gte=0),
                name="coupon_usage_non_negative_discount",
            ),
        ]
        indexes = [
            models.Index(fields=["coupon", "user"], name="coupon_usage_coupon_user_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.coupon_id} by {self.user_id} on booking {self.booking_id}"
