"""API tests for quotes and pricing rule administration."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.hotels.tests.factories import create_hotel, create_room_type, create_staff, next_monday
from apps.pricing.models import DayTypePricing, SeasonalPricing
from apps.users.models import User


class QuoteAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        self.room_type = create_room_type(self.hotel)
        self.check_in = next_monday()

    def _quote(self, **overrides):
        payload = {
            "hotel_id": self.hotel.pk,
            "room_type_id": self.room_type.pk,
            "check_in": self.check_in.isoformat(),
            "check_out": (self.check_in + timedelta(days=3)).isoformat(),
        }
        payload.update(overrides)
        return self.client.post(reverse("pricing-quote"), payload, format="json")

    def test_anonymous_quote_returns_breakdown(self) -> None:
        response = self._quote()

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["subtotal"], "6000.00")
        self.assertEqual(response.data["taxes"], "1080.00")
        self.assertEqual(response.data["total"], "7080.00")
        self.assertEqual(len(response.data["nightly"]), 3)
        self.assertIsNone(response.data["coupon"])

    def test_reversed_dates_are_rejected(self) -> None:
        response = self._quote(check_out=self.check_in.isoformat())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_coupon_is_reported(self) -> None:
        response = self._quote(coupon_code="NOPE")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "coupon_error")
        self.assertEqual(response.data["code"], "INVALID_CODE")

    def test_unknown_room_type_is_not_found(self) -> None:
        response = self._quote(room_type_id=self.room_type.pk + 100)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "not_found")


class PricingRulesAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        self.admin = create_staff(self.hotel, User.RoleChoices.HOTEL_ADMIN)
        SeasonalPricing.objects.create(
            hotel=self.hotel,
            name="Old",
            start_date=next_monday(),
            end_date=next_monday() + timedelta(days=3),
            multiplier="1.10",
        )

    def test_hotel_admin_replaces_seasonal_rules(self) -> None:
        self.client.force_authenticate(self.admin)
        start = next_monday()

        response = self.client.put(
            reverse("pricing-seasonal", args=[self.hotel.pk]),
            {
                "rules": [
                    {
                        "name": "Diwali",
                        "start_date": start.isoformat(),
                        "end_date": (start + timedelta(days=5)).isoformat(),
                        "multiplier": "1.50",
                    }
                ]
            },
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual([rule["name"] for rule in response.data["seasonal"]], ["Diwali"])
        self.assertEqual(SeasonalPricing.objects.filter(hotel=self.hotel).count(), 1)

    def test_reception_cannot_replace_rules(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.RECEPTION))

        response = self.client.put(reverse("pricing-seasonal", args=[self.hotel.pk]), [], format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(SeasonalPricing.objects.filter(name="Old").exists())

    def test_duplicate_day_types_are_rejected(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.put(
            reverse("pricing-day-types", args=[self.hotel.pk]),
            [
                {"day_type": "weekend", "multiplier": "1.20"},
                {"day_type": "weekend", "multiplier": "1.30"},
            ],
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(DayTypePricing.objects.filter(hotel=self.hotel).exists())

    def test_invalid_occupancy_band_is_rejected(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.put(
            reverse("pricing-occupancy-tiers", args=[self.hotel.pk]),
            [{"min_occupancy_pct": 80, "max_occupancy_pct": 40, "multiplier": "1.20"}],
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_staff_reads_pricing_config(self) -> None:
        self.client.force_authenticate(create_staff(self.hotel, User.RoleChoices.ACCOUNTS))

        response = self.client.get(reverse("pricing-config", args=[self.hotel.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(len(response.data["seasonal"]), 1)
        self.assertEqual(response.data["day_types"], [])

    def test_occupancy_endpoint_reports_percentage(self) -> None:
        create_room_type(self.hotel, rooms=4)
        self.client.force_authenticate(self.admin)

        response = self.client.get(
            reverse("pricing-occupancy", args=[self.hotel.pk]), {"date": next_monday().isoformat()}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_rooms"], 4)
        self.assertEqual(response.data["occupancy_pct"], 0)
