from decimal import Decimal

import factory
from factory import Faker
from factory.django import DjangoModelFactory

from catalog.models import Category, Product, Review


class CategoryFactory(DjangoModelFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.LazyAttribute(lambda o: o.name.lower().replace(" ", "-"))
    description = Faker("sentence")
    is_active = True
    display_order = 0


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f"Product {n}")
    description = Faker("paragraph")
    price = Decimal("50.00")
    stock = 10
    category = factory.SubFactory(CategoryFactory)
    main_image = Faker("image_url")
    is_active = True
    featured = False


class ReviewFactory(DjangoModelFactory):
    class Meta:
        model = Review

    product = factory.SubFactory(ProductFactory)
    customer_id = factory.Sequence(lambda n: str(n))
    customer_name = Faker("name")
    comment = Faker("sentence")
