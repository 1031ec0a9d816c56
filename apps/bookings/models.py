"""Booking domain models for StayFlow."""

from __future__ import annotations

import secrets
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models, transaction  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorderMixin

from .domain import state_machine


class Booking(EventRecorderMixin, models.Model):
    """Reservation of a room type for [check_in_date, check_out_date).

    Prices are snapshotted at creation and never recomputed. Rows are never
    deleted; cancellation is a status.
    """

    class Status(models.TextChoices):
        PENDING = state_machine.PENDING, _("Pending payment")
        CONFIRMED = state_machine.CONFIRMED, _("Confirmed")
        CHECKED_IN = state_machine.CHECKED_IN, _("Checked in")
        CHECKED_OUT = state_machine.CHECKED_OUT, _("Checked out")
        CANCELLED = state_machine.CANCELLED, _("Cancelled")
        NO_SHOW = state_machine.NO_SHOW, _("No show")

    HOLDING_STATUSES = state_machine.HOLDING_STATUSES
    OCCUPYING_STATUSES = state_machine.OCCUPYING_STATUSES

    booking_reference = models.CharField(max_length=20, unique=True, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    hotel = models.ForeignKey("hotels.Hotel", on_delete=models.PROTECT, related_name="bookings")
    room_type = models.ForeignKey("hotels.RoomType", on_delete=models.PROTECT, related_name="bookings")
    room = models.ForeignKey(
        "hotels.Room",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
        help_text=_("Assigned at check-in."),
    )
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    num_guests = models.PositiveSmallIntegerField(default=1)
    guest_name = models.CharField(max_length=255)
    guest_email = models.EmailField()
    guest_phone = models.CharField(max_length=20, blank=True)
    special_requests = models.TextField(blank=True)

    # Price snapshot
    base_price = models.DecimalField(max_digits=10, decimal_places=2)
    seasonal_multiplier = models.DecimalField(max_digits=4, decimal_places=2, default=Decimal("1.00"))
    day_type_multiplier = models.DecimalField(max_digits=4, decimal_places=2, default=Decimal("1.00"))
    occupancy_multiplier = models.DecimalField(max_digits=4, decimal_places=2, default=Decimal("1.00"))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    coupon = models.ForeignKey(
        "coupons.Coupon",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    coupon_discount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    taxes = models.DecimalField(max_digits=12, decimal_places=2)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    actual_check_in = models.DateTimeField(null=True, blank=True)
    actual_check_out = models.DateTimeField(null=True, blank=True)
    checked_in_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    checked_out_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancelled_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    cancellation_reason = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(check_out_date__gt=models.F("check_in_date")),
                name="booking_valid_dates",
            ),
            models.CheckConstraint(
                condition=models.Q(num_guests__gte=1),
                name="booking_at_least_one_guest",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(coupon_discount__gte=0)
                    & models.Q(coupon_discount__lte=models.F("subtotal"))
                ),
                name="booking_discount_within_subtotal",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0) & models.Q(taxes__gte=0),
                name="booking_non_negative_amounts",
            ),
            models.CheckConstraint(
                condition=(
                    ~models.Q(status__in=[state_machine.CHECKED_IN, state_machine.CHECKED_OUT])
                    | (models.Q(room__isnull=False) & models.Q(actual_check_in__isnull=False))
                ),
                name="booking_in_house_has_room",
            ),
            models.CheckConstraint(
                condition=~models.Q(status=state_machine.CHECKED_OUT) | models.Q(actual_check_out__isnull=False),
                name="booking_checked_out_has_timestamp",
            ),
            models.CheckConstraint(
                condition=~models.Q(status=state_machine.CANCELLED) | models.Q(cancelled_at__isnull=False),
                name="booking_cancelled_has_timestamp",
            ),
        ]
        indexes = [
            models.Index(fields=["room_type", "check_in_date", "check_out_date"], name="booking_room_type_dates_idx"),
            models.Index(fields=["hotel", "status"], name="booking_hotel_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking {self.booking_reference} ({self.status})"

    def save(self, *args, **kwargs):  # type: ignore
        with transaction.atomic():
            if self._state.adding and not self.booking_reference:
                self.booking_reference = self.generate_booking_reference()
            super().save(*args, **kwargs)

    @staticmethod
    def generate_booking_reference() -> str:
        return f"BK{timezone.localdate():%y%m%d}-{secrets.token_hex(3).upper()}"

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days

    # --- Lifecycle transitions --------------------------------------------
    # Each method validates the transition before touching any field, so a
    # rejected transition leaves the instance and its row unchanged.

    def mark_confirmed(self) -> None:
        state_machine.ensure_transition(self.status, self.Status.CONFIRMED, "confirm")
        self.status = self.Status.CONFIRMED
        self.save(update_fields=["status", "updated_at"])

    def mark_checked_in(self, room, actor, at) -> None:
        state_machine.ensure_transition(self.status, self.Status.CHECKED_IN, "check in")
        self.room = room
        self.actual_check_in = at
        self.checked_in_by = actor
        self.status = self.Status.CHECKED_IN
        self.save(update_fields=["room", "actual_check_in", "checked_in_by", "status", "updated_at"])

    def mark_checked_out(self, actor, at) -> None:
        state_machine.ensure_transition(self.status, self.Status.CHECKED_OUT, "check out")
        self.actual_check_out = at
        self.checked_out_by = actor
        self.status = self.Status.CHECKED_OUT
        self.save(update_fields=["actual_check_out", "checked_out_by", "status", "updated_at"])

    def mark_cancelled(self, reason: str, actor, at) -> None:
        state_machine.ensure_transition(self.status, self.Status.CANCELLED, "cancel")
        self.cancelled_at = at
        self.cancelled_by = actor
        self.cancellation_reason = reason
        self.status = self.Status.CANCELLED
        self.save(update_fields=["cancelled_at", "cancelled_by", "cancellation_reason", "status", "updated_at"])


class BookingGuest(models.Model):
    """Additional guest staying under a booking."""

    booking = models.ForeignKey(Booking, on_delete=models.CASCADE, related_name="guests")
    full_name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    id_type = models.CharField(max_length=50, blank=True)
    id_number = models.CharField(max_length=100, blank=True)

    class Meta:
        verbose_name = _("Booking guest")
        verbose_name_plural = _("Booking guests")
        ordering = ["id"]

    def __str__(self) -> str:
        return self.full_name
