from django.contrib import admin

from .models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "email", "status", "role", "total_orders", "total_spent", "last_order_date")
    list_filter = ("status", "role")
    search_fields = ("name", "email", "phone")
    ordering = ("-created_at", "id")
    exclude = ("password",)
