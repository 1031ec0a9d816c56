"""Payment session API views."""

from __future__ import annotations

from rest_framework import permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.bookings.models import Booking
from apps.users.permissions import FRONT_DESK_ROLES, PAYMENT_VERIFY_ROLES, STAFF_ROLES, ensure_hotel_role
from shared.domain.exceptions import NotFoundError

from .models import PaymentSession
from .serializers import (
    FailSessionSerializer,
    PaymentSerializer,
    PaymentSessionSerializer,
    SessionCreateSerializer,
    VerifyPaymentSerializer,
)
from .services import PaymentSessionManager

# Guests pay for their own bookings; the front desk may open a session for walk-ins.
SESSION_CREATE_ROLES = tuple(dict.fromkeys(FRONT_DESK_ROLES + PAYMENT_VERIFY_ROLES))


class PaymentSessionViewSet(viewsets.GenericViewSet):
    permission_classes = [permissions.IsAuthenticated]
    serializer_class = PaymentSessionSerializer
    manager_class = PaymentSessionManager
    lookup_value_regex = r"\d+"

    def get_manager(self) -> PaymentSessionManager:
        return self.manager_class()

    def _render(self, session, manager, status_code=status.HTTP_200_OK) -> Response:
        return Response(PaymentSessionSerializer(session, context={"manager": manager}).data, status=status_code)

    def _ensure_owner_or_roles(self, booking, roles) -> None:
        if booking.user_id == self.request.user.pk:
            return
        ensure_hotel_role(self.request.user, booking.hotel_id, roles)

    def _booking(self, booking_id: int) -> Booking:
        try:
            return Booking.objects.get(pk=booking_id)
        except Booking.DoesNotExist:
            raise NotFoundError(f"Booking {booking_id} not found.")

    def _session(self, **lookup) -> PaymentSession:
        """Plain read for permission checks; no lazy expiry until access is granted."""
        try:
            return PaymentSession.objects.select_related("booking").get(**lookup)
        except PaymentSession.DoesNotExist:
            raise NotFoundError("Payment session not found.")

    def create(self, request):  # type: ignore
        serializer = SessionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self._booking(serializer.validated_data["booking_id"])
        self._ensure_owner_or_roles(booking, SESSION_CREATE_ROLES)
        manager = self.get_manager()
        session = manager.create(booking.pk, serializer.validated_data.get("amount"))
        return self._render(session, manager, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):  # type: ignore
        session = self._session(pk=int(pk))
        self._ensure_owner_or_roles(session.booking, STAFF_ROLES)
        manager = self.get_manager()
        return self._render(manager.get(session.pk), manager)

    @action(detail=False, methods=["get"], url_path=r"token/(?P<token>[0-9a-f-]+)")
    def by_token(self, request, token=None):  # type: ignore
        session = self._session(session_token=token)
        self._ensure_owner_or_roles(session.booking, STAFF_ROLES)
        manager = self.get_manager()
        return self._render(manager.get(session.pk), manager)

    @action(detail=False, methods=["get"], url_path=r"booking/(?P<booking_id>\d+)")
    def for_booking(self, request, booking_id=None):  # type: ignore
        booking = self._booking(int(booking_id))
        self._ensure_owner_or_roles(booking, STAFF_ROLES)
        manager = self.get_manager()
        return Response(
            {
                "sessions": PaymentSessionSerializer(
                    manager.sessions_for_booking(booking.pk), many=True, context={"manager": manager}
                ).data,
                "payments": PaymentSerializer(manager.payments_for_booking(booking.pk), many=True).data,
            }
        )

    @action(detail=True, methods=["post"])
    def verify(self, request, pk=None):  # type: ignore
        session = self._session(pk=int(pk))
        ensure_hotel_role(request.user, session.booking.hotel_id, PAYMENT_VERIFY_ROLES)
        manager = self.get_manager()
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = manager.verify(
            session.pk,
            serializer.validated_data["transaction_id"],
            serializer.validated_data["payment_method"],
            request.user,
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        session = self._session(pk=int(pk))
        self._ensure_owner_or_roles(session.booking, PAYMENT_VERIFY_ROLES)
        manager = self.get_manager()
        session = manager.cancel(session.pk)
        return self._render(session, manager)

    @action(detail=True, methods=["post"])
    def fail(self, request, pk=None):  # type: ignore
        session = self._session(pk=int(pk))
        ensure_hotel_role(request.user, session.booking.hotel_id, PAYMENT_VERIFY_ROLES)
        manager = self.get_manager()
        serializer = FailSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        session = manager.mark_failed(session.pk, serializer.validated_data["reason"])
        return self._render(session, manager)
