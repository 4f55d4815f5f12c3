"""Admin registration for spots."""

from __future__ import annotations

from django.contrib import admin

from .models import Spot


@admin.register(Spot)
class SpotAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "city", "country", "price", "created_at")
    list_filter = ("country", "city")
    search_fields = ("name", "address", "owner__username", "owner__email")
    readonly_fields = ("created_at", "updated_at")
