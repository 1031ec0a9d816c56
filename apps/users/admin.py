"""Admin registrations for the users domain."""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(BaseUserAdmin):
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        (_("Personal info"), {"fields": ("username", "first_name", "last_name", "phone")}),
        (_("Role"), {"fields": ("role", "hotel")}),
        (
            _("Permissions"),
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        (_("Security"), {"fields": ("failed_login_attempts", "locked_until", "last_login")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "password1", "password2", "role", "hotel"),
            },
        ),
    )
    list_display = ("email", "role", "hotel", "is_active", "created_at")
    list_filter = ("role", "hotel", "is_active")
    search_fields = ("email", "phone", "first_name", "last_name")
    ordering = ("-created_at",)
    readonly_fields = ("last_login",)
