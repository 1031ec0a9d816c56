from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def user_fk(related_name):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


def multiplier_field():
    return models.DecimalField(decimal_places=2, default=Decimal("1.00"), max_digits=4)


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("hotels", "0001_initial"),
        ("coupons", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("booking_reference", models.CharField(editable=False, max_length=20, unique=True)),
                ("check_in_date", models.DateField()),
                ("check_out_date", models.DateField()),
                ("num_guests", models.PositiveSmallIntegerField(default=1)),
                ("guest_name", models.CharField(max_length=255)),
                ("guest_email", models.EmailField(max_length=254)),
                ("guest_phone", models.CharField(blank=True, max_length=20)),
                ("special_requests", models.TextField(blank=True)),
                ("base_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("seasonal_multiplier", multiplier_field()),
                ("day_type_multiplier", multiplier_field()),
                ("occupancy_multiplier", multiplier_field()),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=12)),
                ("coupon_discount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=12)),
                ("taxes", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, max_digits=12)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending payment"),
                            ("confirmed", "Confirmed"),
                            ("checked_in", "Checked in"),
                            ("checked_out", "Checked out"),
                            ("cancelled", "Cancelled"),
                            ("no_show", "No show"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("actual_check_in", models.DateTimeField(blank=True, null=True)),
                ("actual_check_out", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancellation_reason", models.CharField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "hotel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="hotels.hotel",
                    ),
                ),
                (
                    "room_type",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="hotels.roomtype",
                    ),
                ),
                (
                    "room",
                    models.ForeignKey(
                        blank=True,
                        help_text="Assigned at check-in.",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="hotels.room",
                    ),
                ),
                (
                    "coupon",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="coupons.coupon",
                    ),
                ),
                ("checked_in_by", user_fk("+")),
                ("checked_out_by", user_fk("+")),
                ("cancelled_by", user_fk("+")),
            ],
            options={
                "verbose_name": "Booking",
                "verbose_name_plural": "Bookings",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["room_type", "check_in_date", "check_out_date"],
                        name="booking_room_type_dates_idx",
                    ),
                    models.Index(fields=["hotel", "status"], name="booking_hotel_status_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(check_out_date__gt=models.F("check_in_date")),
                        name="booking_valid_dates",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(num_guests__gte=1),
                        name="booking_at_least_one_guest",
                    ),
                    models.CheckConstraint(
                        condition=(
                            models.Q(coupon_discount__gte=0)
                            & models.Q(coupon_discount__lte=models.F("subtotal"))
                        ),
                        name="booking_discount_within_subtotal",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(total_amount__gte=0) & models.Q(taxes__gte=0),
                        name="booking_non_negative_amounts",
                    ),
                    models.CheckConstraint(
                        condition=(
                            ~models.Q(status__in=["checked_in", "checked_out"])
                            | (models.Q(room__isnull=False) & models.Q(actual_check_in__isnull=False))
                        ),
                        name="booking_in_house_has_room",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(status="checked_out") | models.Q(actual_check_out__isnull=False),
                        name="booking_checked_out_has_timestamp",
                    ),
                    models.CheckConstraint(
                        condition=~models.Q(status="cancelled") | models.Q(cancelled_at__isnull=False),
                        name="booking_cancelled_has_timestamp",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="BookingGuest",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("full_name", models.CharField(max_length=255)),
                ("age", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("id_type", models.CharField(blank=True, max_length=50)),
                ("id_number", models.CharField(blank=True, max_length=100)),
                (
                    "booking",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="guests",
                        to="bookings.booking",
                    ),
                ),
            ],
            options={
                "verbose_name": "Booking guest",
                "verbose_name_plural": "Booking guests",
                "ordering": ["id"],
            },
        ),
    ]
