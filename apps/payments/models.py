"""Payment session and settlement models."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorderMixin
from shared.domain.exceptions import InvalidStateError


def generate_session_token() -> str:
    return str(uuid.uuid4())


class PaymentSession(EventRecorderMixin, models.Model):
    """A time-boxed intent to pay one booking's total.

    At most one pending session exists per booking. A session in a
    terminal state (paid, expired, failed) is never modified again.
    """

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        EXPIRED = "expired", _("Expired")
        FAILED = "failed", _("Failed")

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="payment_sessions",
    )
    session_token = models.CharField(
        max_length=100,
        unique=True,
        default=generate_session_token,
        editable=False,
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    merchant_id = models.CharField(max_length=255, blank=True)
    payment_payload = models.TextField(help_text=_("UPI payment string encoded in the QR code."))
    instruction_data = models.TextField(
        blank=True,
        help_text=_("Rendered payment instruction, e.g. a QR image data URL."),
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    failure_reason = models.CharField(max_length=255, blank=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment session")
        verbose_name_plural = _("Payment sessions")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["booking"],
                condition=models.Q(status="pending"),
                name="payment_session_one_pending_per_booking",
            ),
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="payment_session_positive_amount",
            ),
        ]
        indexes = [
            models.Index(fields=["status", "expires_at"], name="payment_session_status_exp_idx"),
        ]

    def __str__(self) -> str:
        return f"PaymentSession {self.session_token[:8]} ({self.status})"

    @property
    def is_pending(self) -> bool:
        return self.status == self.Status.PENDING

    def is_overdue(self, now) -> bool:
        return self.is_pending and now > self.expires_at

    def _finish(self, status: str, action: str, extra_fields=()) -> None:
        if not self.is_pending:
            raise InvalidStateError(
                f"Cannot {action} a payment session in status '{self.status}'.",
                code=f"session_{self.status}",
            )
        self.status = status
        self.save(update_fields=["status", "updated_at", *extra_fields])

    def mark_paid(self) -> None:
        self._finish(self.Status.PAID, "pay")

    def mark_expired(self) -> None:
        self._finish(self.Status.EXPIRED, "expire")

    def mark_failed(self, reason: str = "") -> None:
        self.failure_reason = reason[:255]
        self._finish(self.Status.FAILED, "fail", ("failure_reason",))


class Payment(models.Model):
    """Append-only settlement record created when a session is verified."""

    class Method(models.TextChoices):
        UPI = "upi", _("UPI")
        CASH = "cash", _("Cash")
        CARD = "card", _("Card")
        BANK_TRANSFER = "bank_transfer", _("Bank transfer")

    class Status(models.TextChoices):
        COMPLETED = "completed", _("Completed")
        REFUNDED = "refunded", _("Refunded")
        FAILED = "failed", _("Failed")

    booking = models.ForeignKey(
        "bookings.Booking",
        on_delete=models.PROTECT,
        related_name="payments",
    )
    session = models.ForeignKey(
        PaymentSession,
        on_delete=models.PROTECT,
        related_name="payments",
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    payment_method = models.CharField(max_length=20, choices=Method.choices, default=Method.UPI)
    transaction_id = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.COMPLETED)
    gateway_response = models.JSONField(default=dict, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="verified_payments",
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Payment")
        verbose_name_plural = _("Payments")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(fields=["session"], name="payment_one_per_session"),
        ]

    def __str__(self) -> str:
        return f"Payment {self.pk} for booking {self.booking_id} ({self.status})"
