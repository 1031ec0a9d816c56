"""Hotel catalog models for StayFlow.

Reservations are made against a RoomType; a concrete Room is only
assigned when the guest checks in.
"""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.text import slugify  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class Hotel(models.Model):
    """A hotel listed on the platform."""

    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, blank=True)
    description = models.TextField(blank=True)
    city = models.CharField(max_length=100)
    address = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Hotel")
        verbose_name_plural = _("Hotels")
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.city})"

    def save(self, *args, **kwargs):  # type: ignore
        if not self.slug:
            base = slugify(self.name) or "hotel"
            slug = base
            suffix = 1
            while Hotel.objects.filter(slug=slug).exclude(pk=self.pk).exists():
                suffix += 1
                slug = f"{base}-{suffix}"
            self.slug = slug
        super().save(*args, **kwargs)


class RoomType(models.Model):
    """A sellable category of rooms with a nightly base rate and capacity."""

    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="room_types")
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    base_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Nightly base rate; bookings snapshot it at creation."),
    )
    max_occupancy = models.PositiveSmallIntegerField(default=2, validators=[MinValueValidator(1)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Room type")
        verbose_name_plural = _("Room types")
        ordering = ["hotel", "base_price"]
        constraints = [
            models.UniqueConstraint(fields=["hotel", "name"], name="room_type_unique_name_per_hotel"),
            models.CheckConstraint(
                condition=models.Q(base_price__gte=0),
                name="room_type_base_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} @ {self.hotel_id}"


class ActiveRoomQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True, deleted_at__isnull=True)


class Room(models.Model):
    """A physical room; assigned to a booking only at check-in."""

    class Status(models.TextChoices):
        AVAILABLE = "available", _("Available")
        OCCUPIED = "occupied", _("Occupied")
        CLEANING = "cleaning", _("Cleaning")
        MAINTENANCE = "maintenance", _("Maintenance")
        OUT_OF_ORDER = "out_of_order", _("Out of order")

    hotel = models.ForeignKey(Hotel, on_delete=models.CASCADE, related_name="rooms")
    room_type = models.ForeignKey(RoomType, on_delete=models.PROTECT, related_name="rooms")
    room_number = models.CharField(max_length=20)
    floor = models.SmallIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    is_active = models.BooleanField(default=True)
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ActiveRoomQuerySet.as_manager()

    class Meta:
        verbose_name = _("Room")
        verbose_name_plural = _("Rooms")
        ordering = ["hotel", "room_number"]
        constraints = [
            models.UniqueConstraint(fields=["hotel", "room_number"], name="room_unique_number_per_hotel"),
        ]
        indexes = [
            models.Index(fields=["room_type", "is_active"], name="room_type_active_idx"),
        ]

    def __str__(self) -> str:
        return f"Room {self.room_number} ({self.get_status_display()})"

    def set_status(self, status: str) -> None:
        self.status = status
        self.save(update_fields=["status", "updated_at"])

    def soft_delete(self) -> None:
        self.is_active = False
        self.deleted_at = timezone.now()
        self.save(update_fields=["is_active", "deleted_at", "updated_at"])
