"""
Booking Domain Events

Published through the message bus after the surrounding transaction
commits.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass
class BookingCreated(DomainEvent):
    booking_id: int
    booking_reference: str
    hotel_id: int
    room_type_id: int
    user_id: int
    check_in: date
    check_out: date
    total_amount: Decimal
    coupon_id: Optional[int] = None


@dataclass
class BookingConfirmed(DomainEvent):
    """pending -> confirmed, on payment or when nothing is owed"""
    booking_id: int
    booking_reference: str
    payment_id: Optional[int] = None


@dataclass
class BookingCheckedIn(DomainEvent):
    booking_id: int
    booking_reference: str
    room_id: int
    actor_id: Optional[int] = None


@dataclass
class BookingCheckedOut(DomainEvent):
    booking_id: int
    booking_reference: str
    room_id: int
    actor_id: Optional[int] = None


@dataclass
class BookingCancelled(DomainEvent):
    booking_id: int
    booking_reference: str
    reason: str
    actor_id: Optional[int] = None
