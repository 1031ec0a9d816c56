"""API views for the booking domain."""

from __future__ import annotations

from rest_framework import mixins, permissions, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.users.permissions import CANCEL_ROLES, FRONT_DESK_ROLES, STAFF_ROLES, ensure_hotel_role
from shared.domain.value_objects import DateRange

from .models import Booking
from .serializers import (
    AvailabilityQuerySerializer,
    BookingCreateSerializer,
    BookingSerializer,
    CancelSerializer,
    CheckInSerializer,
    HotelBookingFilterSerializer,
)
from .services import BookingLifecycle


class BookingViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """Guest booking flow plus front-desk operations.

    ``list`` returns the caller's own bookings; staff views of a hotel live
    under ``hotel/<hotel_id>/``.
    """

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    lifecycle_class = BookingLifecycle
    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        if self.action == "availability":
            return [permissions.AllowAny()]
        return super().get_permissions()

    def get_lifecycle(self) -> BookingLifecycle:
        return self.lifecycle_class()

    def get_queryset(self):  # type: ignore
        return self.get_lifecycle().list_for_user(self.request.user)

    def _ensure_can_view(self, booking: Booking) -> None:
        user = self.request.user
        if booking.user_id == user.pk:
            return
        ensure_hotel_role(user, booking.hotel_id, STAFF_ROLES)

    def _paginated(self, queryset):
        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(BookingSerializer(page, many=True).data)
        return Response(BookingSerializer(queryset, many=True).data)

    def create(self, request, *args, **kwargs):  # type: ignore
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = self.get_lifecycle().create(serializer.to_request(), request.user)
        booking = self.get_lifecycle().get(booking.pk)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):  # type: ignore
        booking = self.get_lifecycle().get(int(pk))
        self._ensure_can_view(booking)
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["get"], url_path=r"reference/(?P<reference>[A-Za-z0-9-]+)")
    def by_reference(self, request, reference=None):  # type: ignore
        booking = self.get_lifecycle().get_by_reference(reference)
        self._ensure_can_view(booking)
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["get"])
    def availability(self, request):  # type: ignore
        serializer = AvailabilityQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        lifecycle = self.get_lifecycle()
        stay = DateRange(data["check_in"], data["check_out"])
        lifecycle.pricing.get_room_type(data["hotel_id"], data["room_type_id"])
        available = lifecycle.availability.available_count(data["hotel_id"], data["room_type_id"], stay)
        return Response(
            {
                "hotel_id": data["hotel_id"],
                "room_type_id": data["room_type_id"],
                "check_in": data["check_in"].isoformat(),
                "check_out": data["check_out"].isoformat(),
                "available_rooms": available,
                "is_available": available > 0,
            }
        )

    @action(detail=False, methods=["get"], url_path=r"hotel/(?P<hotel_id>\d+)")
    def hotel(self, request, hotel_id=None):  # type: ignore
        hotel_id = int(hotel_id)
        ensure_hotel_role(request.user, hotel_id, STAFF_ROLES)
        filters = HotelBookingFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        queryset = self.get_lifecycle().list_for_hotel(hotel_id, **filters.validated_data)
        return self._paginated(queryset)

    @action(detail=False, methods=["get"], url_path=r"hotel/(?P<hotel_id>\d+)/arrivals")
    def arrivals(self, request, hotel_id=None):  # type: ignore
        hotel_id = int(hotel_id)
        ensure_hotel_role(request.user, hotel_id, STAFF_ROLES)
        return Response(BookingSerializer(self.get_lifecycle().arrivals(hotel_id), many=True).data)

    @action(detail=False, methods=["get"], url_path=r"hotel/(?P<hotel_id>\d+)/departures")
    def departures(self, request, hotel_id=None):  # type: ignore
        hotel_id = int(hotel_id)
        ensure_hotel_role(request.user, hotel_id, STAFF_ROLES)
        return Response(BookingSerializer(self.get_lifecycle().departures(hotel_id), many=True).data)

    @action(detail=True, methods=["post"], url_path="check-in")
    def check_in(self, request, pk=None):  # type: ignore
        lifecycle = self.get_lifecycle()
        booking = lifecycle.get(int(pk))
        ensure_hotel_role(request.user, booking.hotel_id, FRONT_DESK_ROLES)
        serializer = CheckInSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.check_in(booking.pk, serializer.validated_data["room_id"], request.user)
        return Response(BookingSerializer(lifecycle.get(booking.pk)).data)

    @action(detail=True, methods=["post"], url_path="check-out")
    def check_out(self, request, pk=None):  # type: ignore
        lifecycle = self.get_lifecycle()
        booking = lifecycle.get(int(pk))
        ensure_hotel_role(request.user, booking.hotel_id, FRONT_DESK_ROLES)
        lifecycle.check_out(booking.pk, request.user)
        return Response(BookingSerializer(lifecycle.get(booking.pk)).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):  # type: ignore
        lifecycle = self.get_lifecycle()
        booking = lifecycle.get(int(pk))
        if booking.user_id != request.user.pk:
            ensure_hotel_role(request.user, booking.hotel_id, CANCEL_ROLES)
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        lifecycle.cancel(booking.pk, serializer.validated_data["reason"], request.user)
        return Response(BookingSerializer(lifecycle.get(booking.pk)).data)

    @action(detail=True, methods=["patch"], url_path="cancellation-reason")
    def cancellation_reason(self, request, pk=None):  # type: ignore
        lifecycle = self.get_lifecycle()
        booking = lifecycle.get(int(pk))
        ensure_hotel_role(request.user, booking.hotel_id, CANCEL_ROLES)
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = lifecycle.update_cancellation_reason(booking.pk, serializer.validated_data["reason"])
        return Response(BookingSerializer(lifecycle.get(booking.pk)).data)
