"""API tests for coupon administration and validation."""

from __future__ import annotations

from datetime import timedelta

from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.coupons.models import Coupon
from apps.hotels.tests.factories import create_customer, create_hotel, create_staff
from apps.users.models import User

from .factories import create_coupon


class CouponAdminAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        self.admin = create_staff(self.hotel, User.RoleChoices.HOTEL_ADMIN)
        now = timezone.now()
        self.payload = {
            "code": "monsoon20",
            "discount_type": "percentage",
            "discount_value": "20.00",
            "max_discount": "500.00",
            "valid_from": now.isoformat(),
            "valid_until": (now + timedelta(days=10)).isoformat(),
        }

    def test_hotel_admin_creates_coupon_for_own_hotel(self) -> None:
        self.client.force_authenticate(self.admin)

        response = self.client.post(reverse("coupon-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(response.data["code"], "MONSOON20")
        self.assertEqual(response.data["hotel_id"], self.hotel.pk)

    def test_duplicate_code_is_rejected_case_insensitively(self) -> None:
        create_coupon("MONSOON20", hotel=self.hotel)
        self.client.force_authenticate(self.admin)

        response = self.client.post(reverse("coupon-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("code", response.data)

    def test_percentage_above_hundred_is_rejected(self) -> None:
        self.client.force_authenticate(self.admin)
        self.payload["discount_value"] = "120.00"

        response = self.client.post(reverse("coupon-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_hotel_admin_cannot_create_global_coupon(self) -> None:
        self.client.force_authenticate(self.admin)
        self.payload["hotel_id"] = None

        response = self.client.post(reverse("coupon-list"), self.payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(Coupon.objects.exists())

    def test_customer_cannot_list_coupons(self) -> None:
        self.client.force_authenticate(create_customer())

        response = self.client.get(reverse("coupon-list"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_deactivates_coupon(self) -> None:
        coupon = create_coupon("BYE", hotel=self.hotel)
        self.client.force_authenticate(self.admin)

        response = self.client.delete(reverse("coupon-detail", args=[coupon.pk]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        coupon.refresh_from_db()
        self.assertFalse(coupon.is_active)
        self.assertIsNotNone(coupon.deleted_at)


class CouponValidateAPITests(APITestCase):
    def setUp(self) -> None:
        self.hotel = create_hotel()
        create_coupon("SAVE10")

    def test_valid_coupon_returns_capped_discount(self) -> None:
        response = self.client.post(
            reverse("coupon-validate"),
            {"code": "save10", "hotel_id": self.hotel.pk, "booking_amount": "6000.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertTrue(response.data["valid"])
        self.assertEqual(response.data["discount_amount"], "300.00")

    def test_invalid_coupon_returns_reason(self) -> None:
        response = self.client.post(
            reverse("coupon-validate"),
            {"code": "NOPE", "hotel_id": self.hotel.pk, "booking_amount": "6000.00"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "INVALID_CODE")


class CouponStatsAPITests(APITestCase):
    def test_stats_summarise_redemptions(self) -> None:
        hotel = create_hotel()
        coupon = create_coupon("STATS", hotel=hotel)
        self.client.force_authenticate(create_staff(hotel, User.RoleChoices.DUTY_MANAGER))

        response = self.client.get(reverse("coupon-stats", args=[coupon.pk]))

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["total_uses"], 0)
        self.assertEqual(response.data["total_discount"], "0.00")
