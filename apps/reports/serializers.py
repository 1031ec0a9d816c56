from __future__ import annotations

from rest_framework import serializers  # type: ignore


class ReportPeriodSerializer(serializers.Serializer):
    from_date = serializers.DateField(required=False)
    to_date = serializers.DateField(required=False)
