"""API tests for authentication endpoints."""

from __future__ import annotations

from datetime import timedelta

from django.db import IntegrityError, transaction
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase

from apps.hotels.tests.factories import create_hotel
from apps.users.models import User


class AuthAPITests(APITestCase):
    def test_register_returns_tokens(self) -> None:
        payload = {
            "email": "guest@example.com",
            "phone": "+919800000001",
            "first_name": "Guest",
            "last_name": "User",
            "password": "StrongPass123",
            "password_confirm": "StrongPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertIn("tokens", response.data)
        self.assertEqual(response.data["user"]["email"], payload["email"])
        self.assertEqual(response.data["user"]["role"], User.RoleChoices.CUSTOMER)
        self.assertTrue(User.objects.filter(email=payload["email"]).exists())

    def test_register_rejects_mismatched_passwords(self) -> None:
        payload = {
            "email": "guest@example.com",
            "password": "StrongPass123",
            "password_confirm": "OtherPass123",
        }

        response = self.client.post(reverse("auth:register"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("password_confirm", response.data)

    def test_login_limited_attempts(self) -> None:
        user = User.objects.create_user(
            email="lock@example.com",
            phone="+919800000002",
            password="CorrectPassword1",
        )

        url = reverse("auth:login")
        wrong_payload = {"login": user.email, "password": "wrong"}
        for _ in range(5):
            response = self.client.post(url, wrong_payload, format="json")

        user.refresh_from_db()
        self.assertTrue(user.is_locked)
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        # After lock expires user can login again
        user.locked_until = timezone.now() - timedelta(minutes=1)
        user.save(update_fields=["locked_until"])
        response = self.client.post(url, {"login": user.email, "password": "CorrectPassword1"})
        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)

    def test_login_by_phone(self) -> None:
        User.objects.create_user(email="phone@example.com", phone="+919800000003", password="CorrectPassword1")

        response = self.client.post(
            reverse("auth:login"),
            {"login": "+919800000003", "password": "CorrectPassword1"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertEqual(response.data["user"]["email"], "phone@example.com")

    def test_jwt_token_pair(self) -> None:
        User.objects.create_user(email="jwt@example.com", password="CorrectPassword1")

        response = self.client.post(
            reverse("auth:token_obtain_pair"),
            {"email": "jwt@example.com", "password": "CorrectPassword1"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        self.assertIn("access", response.data)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        me = self.client.get(reverse("user-me"))
        self.assertEqual(me.status_code, status.HTTP_200_OK, me.data)
        self.assertEqual(me.data["email"], "jwt@example.com")


class UserRoleTests(APITestCase):
    def test_staff_role_requires_hotel(self) -> None:
        with self.assertRaises(IntegrityError), transaction.atomic():
            User.objects.create_user(
                email="desk@example.com",
                password="StaffPass123",
                role=User.RoleChoices.RECEPTION,
            )

    def test_hotel_role_is_scoped_to_own_hotel(self) -> None:
        hotel = create_hotel()
        other = create_hotel(name="Hill View")
        manager = User.objects.create_user(
            email="manager@example.com",
            password="StaffPass123",
            role=User.RoleChoices.DUTY_MANAGER,
            hotel=hotel,
        )

        self.assertTrue(manager.has_hotel_role(hotel.pk, [User.RoleChoices.DUTY_MANAGER]))
        self.assertFalse(manager.has_hotel_role(other.pk, [User.RoleChoices.DUTY_MANAGER]))
        self.assertFalse(manager.has_hotel_role(hotel.pk, [User.RoleChoices.HOTEL_ADMIN]))

    def test_super_admin_acts_on_every_hotel(self) -> None:
        admin = User.objects.create_superuser(email="root@example.com", password="RootPass123")

        self.assertTrue(admin.has_hotel_role(create_hotel().pk, [User.RoleChoices.HOTEL_ADMIN]))
