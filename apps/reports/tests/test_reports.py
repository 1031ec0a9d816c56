"""Report tests."""

from __future__ import annotations

from datetime import timedelta

import pytest
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.bookings.tests.factories import insert_booking
from apps.hotels.tests.factories import create_customer, create_hotel, create_room_type, create_staff, next_monday
from apps.reports.services import ReportService
from apps.users.models import User
from shared.domain.exceptions import ValidationError


@pytest.fixture
def room_type(db):
    return create_room_type(create_hotel(), rooms=2)


@pytest.fixture
def service():
    return ReportService()


def test_period_defaults_to_last_thirty_days(service):
    period = service.period()

    assert period.to_date == timezone.localdate()
    assert (period.to_date - period.from_date).days == 30


def test_reversed_period_is_rejected(service):
    today = timezone.localdate()

    with pytest.raises(ValidationError) as excinfo:
        service.period(from_date=today, to_date=today - timedelta(days=1))

    assert excinfo.value.code == "invalid_period"


@pytest.mark.django_db
def test_occupancy_report_averages_daily_percentages(service, room_type):
    monday = next_monday()
    guest = create_customer()
    insert_booking(guest, room_type, monday, nights=1)
    insert_booking(guest, room_type, monday, nights=2, status=Booking.Status.PENDING)

    report = service.occupancy_report(room_type.hotel_id, service.period(monday, monday + timedelta(days=1)))

    assert report["total_rooms"] == 2
    assert report["daily_occupancy"] == {
        monday.isoformat(): 50,
        (monday + timedelta(days=1)).isoformat(): 0,
    }
    assert report["average_occupancy"] == 25
    assert report["period"] == {"from": monday.isoformat(), "to": (monday + timedelta(days=1)).isoformat()}


@pytest.mark.django_db
def test_revenue_counts_only_earning_bookings(service, room_type):
    guest = create_customer()
    insert_booking(guest, room_type, next_monday(), nights=1)
    insert_booking(guest, room_type, next_monday(), nights=2)
    insert_booking(guest, room_type, next_monday(), nights=1, status=Booking.Status.PENDING)
    cancelled = insert_booking(guest, room_type, next_monday(), nights=3)
    Booking.objects.filter(pk=cancelled.pk).update(status=Booking.Status.CANCELLED, cancelled_at=timezone.now())

    report = service.revenue_report(room_type.hotel_id, service.period())

    assert report["total_revenue"] == "6000.00"
    assert report["booking_count"] == 2
    assert report["average_booking_value"] == "3000.00"
    assert report["daily_revenue"] == {timezone.localdate().isoformat(): "6000.00"}


@pytest.mark.django_db
def test_revenue_of_empty_period_is_zero(service, room_type):
    report = service.revenue_report(room_type.hotel_id, service.period())

    assert report["total_revenue"] == "0.00"
    assert report["average_booking_value"] == "0.00"
    assert report["daily_revenue"] == {}


@pytest.mark.django_db
def test_booking_stats_group_by_status(service, room_type):
    guest = create_customer()
    insert_booking(guest, room_type, next_monday())
    insert_booking(guest, room_type, next_monday(), status=Booking.Status.PENDING)
    insert_booking(guest, room_type, next_monday(), status=Booking.Status.PENDING)

    report = service.booking_stats(room_type.hotel_id, service.period())

    assert report["total_bookings"] == 3
    assert report["by_status"] == {"confirmed": 1, "pending": 2}


@pytest.mark.django_db
def test_room_type_performance_lists_every_active_type(service, room_type):
    suite = create_room_type(room_type.hotel, name="Suite", base_price="5000.00", rooms=1)
    insert_booking(create_customer(), suite, next_monday(), nights=2)

    report = service.room_type_performance(room_type.hotel_id, service.period())

    assert report["room_types"] == [
        {
            "room_type_id": room_type.pk,
            "name": "Deluxe",
            "base_price": "2000.00",
            "booking_count": 0,
            "total_revenue": "0.00",
        },
        {
            "room_type_id": suite.pk,
            "name": "Suite",
            "base_price": "5000.00",
            "booking_count": 1,
            "total_revenue": "10000.00",
        },
    ]


class ReportAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        create_room_type(self.hotel, rooms=2)

    def test_duty_manager_reads_occupancy_but_not_revenue(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.DUTY_MANAGER))

        occupancy = self.client.get(reverse("report-occupancy", args=[self.hotel.pk]))
        revenue = self.client.get(reverse("report-revenue", args=[self.hotel.pk]))

        self.assertEqual(occupancy.status_code, status.HTTP_200_OK, occupancy.data)
        self.assertEqual(occupancy.data["total_rooms"], 2)
        self.assertEqual(len(occupancy.data["daily_occupancy"]), 31)
        self.assertEqual(revenue.status_code, status.HTTP_403_FORBIDDEN)

    def test_accounts_reads_revenue(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.ACCOUNTS))

        response = self.client.get(reverse("report-revenue", args=[self.hotel.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_revenue"], "0.00")

    def test_only_hotel_admin_reads_room_type_performance(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.ACCOUNTS))
        denied = self.client.get(reverse("report-room-types", args=[self.hotel.pk]))

        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.HOTEL_ADMIN))
        allowed = self.client.get(reverse("report-room-types", args=[self.hotel.pk]))

        self.assertEqual(denied.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(allowed.status_code, status.HTTP_200_OK, allowed.data)
        self.assertEqual(len(allowed.data["room_types"]), 1)

    def test_reversed_period_returns_bad_request(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.HOTEL_ADMIN))
        today = timezone.localdate()

        response = self.client.get(
            reverse("report-bookings", args=[self.hotel.pk]),
            {"from_date": today.isoformat(), "to_date": (today - timedelta(days=2)).isoformat()},
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "invalid_period")

    def test_customer_cannot_read_reports(self) -> None:
        self.client.force_authenticate(create_customer())

        response = self.client.get(reverse("report-occupancy", args=[self.hotel.pk]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
