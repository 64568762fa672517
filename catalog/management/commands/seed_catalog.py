"""Seed catalog data for local development.

Creates a few categories, products with options and a demo coupon.
Re-running is idempotent; existing rows are reused by slug/name/code.
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.text import slugify

from catalog.models import Category, Product
from coupons.models import Coupon


class Command(BaseCommand):
    help = "Seed initial catalog data (categories, products, a demo coupon)"

    @transaction.atomic
    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog data...")

        categories = [
            ("Mugs", "Printed and engraved mugs", 1),
            ("Frames", "Photo frames and wall art", 2),
            ("Gift Boxes", "Curated gift boxes", 3),
        ]

        cat_objs = {}
        for name, desc, order in categories:
            cat, _ = Category.objects.get_or_create(
                slug=slugify(name),
                defaults={"name": name, "description": desc, "is_active": True, "display_order": order},
            )
            cat_objs[name] = cat

        products = [
            {
                "name": "Custom Photo Mug",
                "description": "Ceramic mug printed with your own photo.",
                "price": Decimal("85.50"),
                "original_price": Decimal("100.00"),
                "stock": 40,
                "category": "Mugs",
                "featured": True,
                "dynamic_options": [
                    {"name": "color", "type": "select", "values": ["white", "black", "red"]},
                    {"name": "photo", "type": "image", "required": True},
                ],
            },
            {
                "name": "Wooden Frame 30x40",
                "description": "Solid oak frame with optional engraving.",
                "price": Decimal("120.00"),
                "stock": 15,
                "category": "Frames",
                "dynamic_options": [
                    {"name": "engraving", "type": "text", "price": "15.00"},
                ],
            },
            {
                "name": "Birthday Gift Box",
                "description": "Mug, candle and a handwritten card.",
                "price": Decimal("250.00"),
                "stock": 0,
                "category": "Gift Boxes",
                "tags": ["birthday", "bundle"],
            },
        ]

        for p in products:
            data = dict(p)
            data["category"] = cat_objs[data["category"]]
            Product.objects.get_or_create(name=data.pop("name"), defaults=data)

        Coupon.objects.get_or_create(
            code="SAVE20",
            defaults={
                "discount_type": Coupon.TYPE_PERCENTAGE,
                "discount_value": Decimal("20"),
                "usage_limit": 100,
                "is_active": True,
            },
        )

        self.stdout.write(self.style.SUCCESS("Catalog seed complete."))
