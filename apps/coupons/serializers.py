"""Serializers for coupons."""

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers  # type: ignore

from .models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    hotel_id = serializers.IntegerField(required=False, allow_null=True)

    class Meta:
        model = Coupon
        fields = [
            "id",
            "hotel_id",
            "code",
            "description",
            "discount_type",
            "discount_value",
            "max_discount",
            "min_booking_amount",
            "usage_limit",
            "used_count",
            "valid_from",
            "valid_until",
            "is_active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "used_count", "created_at", "updated_at"]
        extra_kwargs = {
            # Uniqueness is checked case-insensitively in validate_code.
            "code": {"validators": []},
        }

    def validate_code(self, value: str) -> str:
        code = value.strip().upper()
        if not code:
            raise serializers.ValidationError("Coupon code cannot be blank.")
        duplicates = Coupon.objects.filter(code__iexact=code)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("Coupon code already exists.")
        return code

    def validate(self, attrs):  # type: ignore
        discount_type = attrs.get("discount_type", getattr(self.instance, "discount_type", None))
        discount_value = attrs.get("discount_value", getattr(self.instance, "discount_value", None))
        valid_from = attrs.get("valid_from", getattr(self.instance, "valid_from", None))
        valid_until = attrs.get("valid_until", getattr(self.instance, "valid_until", None))

        if discount_value is not None and discount_value <= 0:
            raise serializers.ValidationError({"discount_value": "Discount must be positive."})
        if discount_type == Coupon.DiscountType.PERCENTAGE and discount_value is not None and discount_value > Decimal("100"):
            raise serializers.ValidationError({"discount_value": "Percentage cannot exceed 100."})
        if valid_from and valid_until and valid_until < valid_from:
            raise serializers.ValidationError({"valid_until": "valid_until must not precede valid_from."})
        return attrs


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    hotel_id = serializers.IntegerField()
    booking_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0"))
