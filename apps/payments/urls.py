"""URL routing for payments."""

from __future__ import annotations

from django.urls import include, path  # type: ignore
from rest_framework.routers import SimpleRouter  # type: ignore

from .views import PaymentSessionViewSet

router = SimpleRouter()
router.register(r"sessions", PaymentSessionViewSet, basename="payment-session")

urlpatterns = [
    path("", include(router.urls)),
]
