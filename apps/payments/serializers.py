"""Serializers for payment sessions and payments."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Payment, PaymentSession


class PaymentSessionSerializer(serializers.ModelSerializer):
    booking_reference = serializers.ReadOnlyField(source="booking.booking_reference")
    remaining_seconds = serializers.SerializerMethodField()

    class Meta:
        model = PaymentSession
        fields = [
            "id",
            "booking",
            "booking_reference",
            "session_token",
            "amount",
            "merchant_id",
            "payment_payload",
            "instruction_data",
            "status",
            "failure_reason",
            "expires_at",
            "remaining_seconds",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_remaining_seconds(self, obj: PaymentSession) -> int:
        manager = self.context.get("manager")
        if manager is None or not obj.is_pending:
            return 0
        return manager.remaining_seconds(obj)


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "session",
            "amount",
            "payment_method",
            "transaction_id",
            "status",
            "verified_by",
            "verified_at",
            "created_at",
        ]
        read_only_fields = fields


class SessionCreateSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)


class VerifyPaymentSerializer(serializers.Serializer):
    transaction_id = serializers.CharField(max_length=255)
    payment_method = serializers.ChoiceField(choices=Payment.Method.choices, default=Payment.Method.UPI)


class FailSessionSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
