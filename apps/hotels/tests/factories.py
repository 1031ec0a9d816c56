"""Small builders shared by the engine test suites."""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from itertools import count

from django.utils import timezone

from apps.hotels.models import Hotel, Room, RoomType
from apps.users.models import User

_sequence = count(1)


def next_monday() -> date:
    """A Monday between one and seven days from today."""
    today = timezone.localdate()
    return today + timedelta(days=(7 - today.weekday()) or 7)


def create_hotel(name: str = "Seaside Inn", city: str = "Goa") -> Hotel:
    return Hotel.objects.create(name=name, city=city)


def create_room_type(
    hotel: Hotel,
    name: str = "Deluxe",
    base_price: str = "2000.00",
    rooms: int = 2,
    max_occupancy: int = 2,
) -> RoomType:
    room_type = RoomType.objects.create(
        hotel=hotel,
        name=name,
        base_price=Decimal(base_price),
        max_occupancy=max_occupancy,
    )
    for _ in range(rooms):
        Room.objects.create(hotel=hotel, room_type=room_type, room_number=f"{next(_sequence):03d}")
    return room_type


def create_customer(email: str | None = None) -> User:
    return User.objects.create_user(
        email=email or f"guest{next(_sequence)}@example.com",
        password="GuestPass123",
    )


def create_staff(hotel: Hotel | None, role: str, email: str | None = None) -> User:
    return User.objects.create_user(
        email=email or f"{role}{next(_sequence)}@example.com",
        password="StaffPass123",
        role=role,
        hotel=hotel,
    )
