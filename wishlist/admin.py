from django.contrib import admin

from .models import WishlistItem


@admin.register(WishlistItem)
class WishlistItemAdmin(admin.ModelAdmin):
    list_display = ("id", "user_id", "product_id", "product_name", "price", "created_at")
    search_fields = ("user_id", "product_name")
