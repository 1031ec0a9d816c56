"""Admin registration for the hotel catalog."""

from __future__ import annotations

from django.contrib import admin

from .models import Hotel, Room, RoomType


class RoomTypeInline(admin.TabularInline):
    model = RoomType
    extra = 0


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "city", "is_active", "created_at")
    list_filter = ("city", "is_active")
    search_fields = ("name", "city")
    readonly_fields = ("slug", "created_at", "updated_at")
    inlines = [RoomTypeInline]


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("room_number", "hotel", "room_type", "floor", "status", "is_active")
    list_filter = ("hotel", "status", "is_active")
    search_fields = ("room_number",)
