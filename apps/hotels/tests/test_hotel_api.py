"""API tests for the hotel catalog and room status."""

from __future__ import annotations

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.hotels.models import Room
from apps.users.models import User

from .factories import create_customer, create_hotel, create_room_type, create_staff


class HotelCatalogAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        self.room_type = create_room_type(self.hotel, rooms=2)
        closed = create_hotel(name="Closed Lodge")
        closed.is_active = False
        closed.save()

    def test_anonymous_user_lists_active_hotels(self) -> None:
        response = self.client.get(reverse("hotel-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        names = [hotel["name"] for hotel in response.data["results"]]
        self.assertEqual(names, ["Seaside Inn"])

    def test_room_types_of_hotel(self) -> None:
        response = self.client.get(reverse("hotel-room-types", args=[self.hotel.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]["base_price"], "2000.00")


class RoomStatusAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        self.room_type = create_room_type(self.hotel, rooms=1)
        self.room = Room.objects.get(room_type=self.room_type)

    def test_housekeeping_updates_room_status(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.HOUSEKEEPING))

        response = self.client.patch(
            reverse("room-set-status", args=[self.room.pk]),
            {"status": Room.Status.CLEANING},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.CLEANING)

    def test_staff_of_other_hotel_cannot_update_room(self) -> None:
        other = create_hotel(name="Hill View")
        self.client.force_authenticate(create_staff(other, User.RoleChoices.HOTEL_ADMIN))

        response = self.client.patch(
            reverse("room-set-status", args=[self.room.pk]),
            {"status": Room.Status.MAINTENANCE},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN, response.data)
        self.assertEqual(response.data["error"], "permission_denied")
        self.room.refresh_from_db()
        self.assertEqual(self.room.status, Room.Status.AVAILABLE)

    def test_customer_cannot_list_rooms(self) -> None:
        self.client.force_authenticate(create_customer())

        response = self.client.get(reverse("room-list"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_staff_lists_rooms_of_own_hotel(self) -> None:
        create_room_type(create_hotel(name="Hill View"), rooms=3)
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.RECEPTION))

        response = self.client.get(reverse("room-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["count"], 1)
