"""Booking lifecycle services.

BookingLifecycle composes the availability checker, the pricing engine
and the coupon validator. Every state change runs in a unit of work: the
rows involved are locked, the transition is validated, and domain events
are published after commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.coupons.validator import CouponValidator
from apps.hotels.models import Room, RoomType
from apps.pricing.engine import PricingEngine
from shared.application.engine_config import EngineConfig
from shared.application.uow import DjangoUnitOfWork, lock_queryset_if_possible
from shared.domain.exceptions import InvalidStateError, NotFoundError, ValidationError
from shared.domain.value_objects import DateRange

from .availability import AvailabilityChecker
from .domain import state_machine
from .domain.events import (
    BookingCancelled,
    BookingCheckedIn,
    BookingCheckedOut,
    BookingConfirmed,
    BookingCreated,
)
from .models import Booking, BookingGuest

logger = logging.getLogger(__name__)

UNAVAILABLE_ROOM_STATUSES = (
    Room.Status.OCCUPIED,
    Room.Status.MAINTENANCE,
    Room.Status.OUT_OF_ORDER,
)


@dataclass
class CreateBookingRequest:
    hotel_id: int
    room_type_id: int
    check_in: date
    check_out: date
    guest_name: str
    guest_email: str
    num_guests: int = 1
    guest_phone: str = ""
    special_requests: str = ""
    coupon_code: Optional[str] = None
    guests: Sequence[dict] = field(default_factory=tuple)


class BookingLifecycle:
    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        pricing: Optional[PricingEngine] = None,
        coupons: Optional[CouponValidator] = None,
        availability: Optional[AvailabilityChecker] = None,
        clock: Callable = timezone.now,
    ):
        self.config = config or EngineConfig.from_settings()
        self.pricing = pricing or PricingEngine(self.config)
        self.coupons = coupons or CouponValidator(self.config, clock=clock)
        self.availability = availability or AvailabilityChecker()
        self.clock = clock

    # --- Queries ------------------------------------------------------------

    def _base_queryset(self):
        return Booking.objects.select_related("hotel", "room_type", "room", "coupon").prefetch_related("guests")

    def get(self, booking_id: int) -> Booking:
        try:
            return self._base_queryset().get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFoundError(f"Booking {booking_id} not found.")

    def get_by_reference(self, reference: str) -> Booking:
        try:
            return self._base_queryset().get(booking_reference=reference.upper())
        except Booking.DoesNotExist:
            raise NotFoundError(f"Booking {reference} not found.")

    def list_for_user(self, user):
        return self._base_queryset().filter(user=user).order_by("-created_at")

    def list_for_hotel(
        self,
        hotel_id: int,
        status: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ):
        qs = self._base_queryset().filter(hotel_id=hotel_id)
        if status:
            qs = qs.filter(status=status)
        if from_date:
            qs = qs.filter(check_in_date__gte=from_date)
        if to_date:
            qs = qs.filter(check_out_date__lte=to_date)
        return qs.order_by("-check_in_date", "-created_at")

    def arrivals(self, hotel_id: int, day: Optional[date] = None):
        day = day or timezone.localdate(self.clock())
        return self._base_queryset().filter(
            hotel_id=hotel_id,
            status=Booking.Status.CONFIRMED,
            check_in_date=day,
        ).order_by("guest_name")

    def departures(self, hotel_id: int, day: Optional[date] = None):
        day = day or timezone.localdate(self.clock())
        return self._base_queryset().filter(
            hotel_id=hotel_id,
            status=Booking.Status.CHECKED_IN,
            check_out_date=day,
        ).order_by("guest_name")

    # --- Commands -----------------------------------------------------------

    def _validate_request(self, request: CreateBookingRequest) -> DateRange:
        if request.check_out <= request.check_in:
            raise ValidationError("Check-out date must be after check-in date.", code="invalid_dates")
        if request.check_in < timezone.localdate(self.clock()):
            raise ValidationError("Check-in date cannot be in the past.", code="check_in_in_past")
        if not (request.guest_name or "").strip() or not (request.guest_email or "").strip():
            raise ValidationError("Guest name and email are required.", code="missing_guest_fields")
        if request.num_guests < 1:
            raise ValidationError("At least one guest is required.", code="invalid_guest_count")
        return DateRange(request.check_in, request.check_out)

    def create(self, request: CreateBookingRequest, user) -> Booking:
        """Reserve inventory and persist a pending booking with its price snapshot."""

        stay = self._validate_request(request)

        with DjangoUnitOfWork() as uow:
            # Serialises concurrent creates for the same room type.
            room_type_qs = lock_queryset_if_possible(
                RoomType.objects.filter(pk=request.room_type_id, hotel_id=request.hotel_id, is_active=True)
            )
            room_type = room_type_qs.first()
            if room_type is None:
                raise NotFoundError(
                    f"Room type {request.room_type_id} not found for hotel {request.hotel_id}."
                )
            if request.num_guests > room_type.max_occupancy:
                raise ValidationError(
                    f"Room type allows at most {room_type.max_occupancy} guests.",
                    code="too_many_guests",
                )

            self.availability.ensure_available(request.hotel_id, room_type.pk, stay)

            coupon = None
            discount = Decimal("0.00")
            if request.coupon_code:
                # Eligibility first; the minimum amount needs the discount-free subtotal.
                self.coupons.validate(request.coupon_code, request.hotel_id, None, user=user).raise_if_invalid()

            quote = self.pricing.quote(request.hotel_id, room_type.pk, stay, room_type=room_type)

            if request.coupon_code:
                validation = self.coupons.validate(
                    request.coupon_code, request.hotel_id, quote.subtotal, user=user
                ).raise_if_invalid()
                coupon = validation.coupon
                discount = validation.discount_amount
                if discount > 0:
                    quote = self.pricing.quote(
                        request.hotel_id, room_type.pk, stay, coupon_discount=discount, room_type=room_type
                    )

            booking = Booking.objects.create(
                user=user,
                hotel_id=request.hotel_id,
                room_type=room_type,
                check_in_date=stay.start_date,
                check_out_date=stay.end_date,
                num_guests=request.num_guests,
                guest_name=request.guest_name.strip(),
                guest_email=request.guest_email.strip(),
                guest_phone=request.guest_phone or "",
                special_requests=request.special_requests or "",
                base_price=quote.base_price,
                seasonal_multiplier=quote.seasonal_multiplier,
                day_type_multiplier=quote.day_type_multiplier,
                occupancy_multiplier=quote.occupancy_multiplier,
                subtotal=quote.subtotal,
                coupon=coupon,
                coupon_discount=quote.coupon_discount,
                taxes=quote.taxes,
                total_amount=quote.total,
            )
            if request.guests:
                BookingGuest.objects.bulk_create(
                    BookingGuest(booking=booking, **guest) for guest in request.guests
                )

            if coupon is not None and quote.coupon_discount > 0:
                self.coupons.record_usage(coupon, user, booking, quote.coupon_discount)

            booking.add_event(
                BookingCreated(
                    booking_id=booking.pk,
                    booking_reference=booking.booking_reference,
                    hotel_id=booking.hotel_id,
                    room_type_id=room_type.pk,
                    user_id=user.pk,
                    check_in=booking.check_in_date,
                    check_out=booking.check_out_date,
                    total_amount=booking.total_amount,
                    coupon_id=coupon.pk if coupon else None,
                )
            )
            # Nothing to collect, so no payment session can ever confirm it.
            if booking.total_amount == 0:
                booking.mark_confirmed()
                booking.add_event(
                    BookingConfirmed(booking_id=booking.pk, booking_reference=booking.booking_reference)
                )
            uow.collect_events(booking)

        logger.info(
            f"Booking {booking.booking_reference} created for room type {room_type.pk} "
            f"({stay}), total {booking.total_amount}"
        )
        return booking

    def _locked_booking(self, booking_id: int) -> Booking:
        booking = lock_queryset_if_possible(Booking.objects.filter(pk=booking_id)).first()
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found.")
        return booking

    def check_in(self, booking_id: int, room_id: int, actor) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = self._locked_booking(booking_id)
            # Fail before looking at the room so the error names the real problem.
            state_machine.ensure_transition(booking.status, Booking.Status.CHECKED_IN, "check in")

            room = lock_queryset_if_possible(
                Room.objects.active().filter(pk=room_id, hotel_id=booking.hotel_id)
            ).first()
            if room is None:
                raise NotFoundError(f"Room {room_id} not found for hotel {booking.hotel_id}.")
            if room.room_type_id != booking.room_type_id:
                raise ValidationError("Room does not belong to the booked room type.", code="room_type_mismatch")
            if room.status in UNAVAILABLE_ROOM_STATUSES:
                raise ValidationError(
                    f"Room {room.room_number} is {room.get_status_display().lower()}.",
                    code="room_not_available",
                )

            booking.mark_checked_in(room, actor, self.clock())
            room.set_status(Room.Status.OCCUPIED)
            booking.add_event(
                BookingCheckedIn(
                    booking_id=booking.pk,
                    booking_reference=booking.booking_reference,
                    room_id=room.pk,
                    actor_id=getattr(actor, "pk", None),
                )
            )
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_reference} checked in to room {room.room_number}")
        return booking

    def check_out(self, booking_id: int, actor) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = self._locked_booking(booking_id)
            booking.mark_checked_out(actor, self.clock())
            room = booking.room
            room.set_status(Room.Status.CLEANING)
            booking.add_event(
                BookingCheckedOut(
                    booking_id=booking.pk,
                    booking_reference=booking.booking_reference,
                    room_id=room.pk,
                    actor_id=getattr(actor, "pk", None),
                )
            )
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_reference} checked out of room {room.room_number}")
        return booking

    def cancel(self, booking_id: int, reason: str, actor) -> Booking:
        with DjangoUnitOfWork() as uow:
            booking = self._locked_booking(booking_id)
            booking.mark_cancelled(reason or "", actor, self.clock())
            booking.add_event(
                BookingCancelled(
                    booking_id=booking.pk,
                    booking_reference=booking.booking_reference,
                    reason=booking.cancellation_reason,
                    actor_id=getattr(actor, "pk", None),
                )
            )
            uow.collect_events(booking)

        logger.info(f"Booking {booking.booking_reference} cancelled by {getattr(actor, 'pk', None)}")
        return booking

    def update_cancellation_reason(self, booking_id: int, reason: str) -> Booking:
        """The only edit allowed on a cancelled booking."""

        with transaction.atomic():
            booking = self._locked_booking(booking_id)
            if booking.status != Booking.Status.CANCELLED:
                raise InvalidStateError(
                    "Only cancelled bookings carry a cancellation reason.",
                    code="not_cancelled",
                )
            booking.cancellation_reason = reason
            booking.save(update_fields=["cancellation_reason", "updated_at"])
        return booking
