"""Role checks shared by the engine's API views."""

from __future__ import annotations

from typing import Iterable

from rest_framework import permissions  # type: ignore

from shared.domain.exceptions import PermissionDeniedError

from .models import CustomUser

Role = CustomUser.RoleChoices

FRONT_DESK_ROLES = (Role.RECEPTION, Role.DUTY_MANAGER, Role.HOTEL_ADMIN)
CANCEL_ROLES = (Role.DUTY_MANAGER, Role.HOTEL_ADMIN)
PAYMENT_VERIFY_ROLES = (Role.RECEPTION, Role.DUTY_MANAGER, Role.ACCOUNTS, Role.HOTEL_ADMIN)
PRICING_ADMIN_ROLES = (Role.HOTEL_ADMIN,)
COUPON_ADMIN_ROLES = (Role.HOTEL_ADMIN, Role.DUTY_MANAGER)
REPORT_ROLES = (Role.DUTY_MANAGER, Role.HOTEL_ADMIN, Role.ACCOUNTS)
REVENUE_REPORT_ROLES = (Role.HOTEL_ADMIN, Role.ACCOUNTS)
ROOM_TYPE_REPORT_ROLES = (Role.HOTEL_ADMIN,)
ROOM_STATUS_ROLES = (Role.RECEPTION, Role.DUTY_MANAGER, Role.HOTEL_ADMIN, Role.HOUSEKEEPING)
STAFF_ROLES = tuple(role for role in Role if role not in (Role.CUSTOMER, Role.SUPER_ADMIN))


def ensure_hotel_role(user, hotel_id: int | None, roles: Iterable[str]) -> None:
    """Raise PermissionDeniedError unless ``user`` holds one of ``roles`` at the hotel."""

    if not getattr(user, "is_authenticated", False):
        raise PermissionDeniedError("Authentication required.")
    if not user.has_hotel_role(hotel_id, roles):
        raise PermissionDeniedError()


class IsHotelStaff(permissions.BasePermission):
    """Any authenticated staff member or super admin."""

    def has_permission(self, request, view) -> bool:  # type: ignore
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_super_admin() or user.role in STAFF_ROLES
