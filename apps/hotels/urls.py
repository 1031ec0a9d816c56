"""URL routing for the hotel catalog."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import HotelViewSet, RoomViewSet

router = SimpleRouter()
router.register(r"rooms", RoomViewSet, basename="room")
router.register(r"", HotelViewSet, basename="hotel")

urlpatterns = [
    path("", include(router.urls)),
]
