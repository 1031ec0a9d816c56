"""Admin registration for payments."""

from __future__ import annotations

from django.contrib import admin

from .models import Payment, PaymentSession


@admin.register(PaymentSession)
class PaymentSessionAdmin(admin.ModelAdmin):
    list_display = ("session_token", "booking", "amount", "status", "expires_at", "created_at")
    list_filter = ("status",)
    search_fields = ("session_token", "booking__booking_reference")
    readonly_fields = ("session_token", "payment_payload", "instruction_data", "created_at", "updated_at")


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("id", "booking", "amount", "payment_method", "status", "transaction_id", "verified_by", "verified_at")
    list_filter = ("status", "payment_method")
    search_fields = ("transaction_id", "booking__booking_reference")
    readonly_fields = ("created_at", "updated_at")
