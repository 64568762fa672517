from django.contrib import admin

from .models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = ("id", "user_id", "product_id", "product_name", "price", "quantity", "created_at")
    search_fields = ("user_id", "product_name")
    readonly_fields = ("options_key",)
    ordering = ("-created_at",)
