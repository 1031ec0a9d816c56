"""Coupon API views."""

from __future__ import annotations

import logging

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import COUPON_ADMIN_ROLES, IsHotelStaff, ensure_hotel_role
from shared.domain.exceptions import PermissionDeniedError

from .models import Coupon
from .serializers import CouponSerializer, CouponValidateSerializer
from .services import coupon_stats
from .validator import CouponValidator

logger = logging.getLogger(__name__)


class CouponViewSet(viewsets.ModelViewSet):
    """Hotel staff manage their hotel's coupons; super admins also manage global ones."""

    serializer_class = CouponSerializer
    permission_classes = [IsHotelStaff]
    filterset_fields = ["is_active", "discount_type"]

    def get_permissions(self):  # type: ignore
        if self.action == "validate":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_queryset(self):  # type: ignore
        qs = Coupon.objects.filter(deleted_at__isnull=True)
        user = self.request.user
        if user.is_super_admin():
            hotel_id = self.request.query_params.get("hotel")
            return qs.for_hotel(int(hotel_id)) if hotel_id else qs
        return qs.for_hotel(user.hotel_id)

    def _ensure_can_manage(self, hotel_id: int | None) -> None:
        user = self.request.user
        if hotel_id is None:
            if not user.is_super_admin():
                raise PermissionDeniedError("Only super admins manage global coupons.")
            return
        ensure_hotel_role(user, hotel_id, COUPON_ADMIN_ROLES)

    def perform_create(self, serializer):  # type: ignore
        user = self.request.user
        if "hotel_id" in serializer.validated_data or user.is_super_admin():
            hotel_id = serializer.validated_data.get("hotel_id")
        else:
            hotel_id = user.hotel_id
        self._ensure_can_manage(hotel_id)
        coupon = serializer.save(hotel_id=hotel_id, created_by=user)
        logger.info(f"Coupon {coupon.code} created for hotel {hotel_id} by {user.pk}")

    def perform_update(self, serializer):  # type: ignore
        self._ensure_can_manage(serializer.instance.hotel_id)
        new_hotel_id = serializer.validated_data.get("hotel_id", serializer.instance.hotel_id)
        if new_hotel_id != serializer.instance.hotel_id:
            self._ensure_can_manage(new_hotel_id)
        serializer.save()

    def destroy(self, request, *args, **kwargs):  # type: ignore
        coupon = self.get_object()
        self._ensure_can_manage(coupon.hotel_id)
        coupon.deactivate()
        logger.info(f"Coupon {coupon.code} deactivated by {request.user.pk}")
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):  # type: ignore
        coupon = self.get_object()
        return Response(coupon_stats(coupon))

    @action(detail=False, methods=["post"])
    def validate(self, request):  # type: ignore
        serializer = CouponValidateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        result = CouponValidator().validate(
            data["code"],
            data["hotel_id"],
            data["booking_amount"],
            user=request.user,
        )
        result.raise_if_invalid()
        return Response(result.as_dict())
