from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "industry", "phone", "is_active", "updated_at")
    list_filter = ("is_active", "industry")
    search_fields = ("name", "address", "phone")
    ordering = ("name",)
