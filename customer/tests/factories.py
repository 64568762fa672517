import factory
from django.contrib.auth.hashers import make_password
from factory import Faker
from factory.django import DjangoModelFactory

from customer.models import Customer


class CustomerFactory(DjangoModelFactory):
    """Active customer whose password is `secret1`."""

    class Meta:
        model = Customer

    email = factory.Sequence(lambda n: f"customer{n}@example.com")
    name = Faker("name")
    phone = Faker("numerify", text="01#########")
    city = Faker("city")
    password = factory.LazyFunction(lambda: make_password("secret1"))
