from decimal import Decimal
from unittest import mock

import pytest

from cart import services
from cart.models import MAX_QUANTITY, CartItem
from cart.selectors import cart_totals, list_cart
from cart.services import (
    add_item,
    clear_cart,
    remove_by_product,
    remove_item,
    update_item,
    update_item_options,
)
from catalog.tests.factories import ProductFactory
from common.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.mark.django_db
def test_add_item_snapshots_product_fields():
    product = ProductFactory(name="Photo Mug", price=Decimal("85.50"), main_image="/img/mug.jpg")

    item = add_item(user_id="7", product_id=product.id, quantity=2, selected_options={"color": "red"})

    assert item.user_id == "7"
    assert item.product_name == "Photo Mug"
    assert item.price == Decimal("85.50")
    assert item.image == "/img/mug.jpg"
    assert item.quantity == 2
    assert item.attachments == {"images": [], "text": ""}


@pytest.mark.django_db
def test_add_same_product_and_options_merges_quantity():
    product = ProductFactory()

    first = add_item(user_id="7", product_id=product.id, quantity=1, selected_options={"color": "red", "size": "L"})
    second = add_item(user_id="7", product_id=product.id, quantity=2, selected_options={"size": "L", "color": "red"})

    assert second.id == first.id
    assert second.quantity == 3
    assert CartItem.objects.filter(user_id="7").count() == 1


@pytest.mark.django_db
def test_different_options_make_separate_lines():
    product = ProductFactory()

    a = add_item(user_id="7", product_id=product.id, selected_options={"color": "red"})
    b = add_item(user_id="7", product_id=product.id, selected_options={"color": "blue"})

    assert a.id != b.id
    assert CartItem.objects.filter(user_id="7", product_id=product.id).count() == 2


@pytest.mark.django_db
def test_merge_replaces_attachments_only_when_new_ones_have_content():
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id, attachments={"text": "Happy birthday"})

    kept = add_item(user_id="7", product_id=product.id, attachments={"images": [], "text": ""})
    assert kept.attachments["text"] == "Happy birthday"

    replaced = add_item(user_id="7", product_id=product.id, attachments={"images": ["/u/1.png"]})
    assert replaced.attachments == {"images": ["/u/1.png"], "text": ""}


@pytest.mark.django_db
@pytest.mark.parametrize("quantity", [0, -1, "abc", None])
def test_add_item_rejects_non_positive_quantity(quantity):
    product = ProductFactory()
    with pytest.raises(ValidationError):
        add_item(user_id="7", product_id=product.id, quantity=quantity)
    assert CartItem.objects.count() == 0


@pytest.mark.django_db
def test_add_item_unknown_product():
    with pytest.raises(NotFoundError):
        add_item(user_id="7", product_id=987654)


@pytest.mark.django_db
def test_blank_user_falls_back_to_guest_cart(settings):
    settings.GUEST_USER_ID = "guest"
    product = ProductFactory()

    item = add_item(user_id="", product_id=product.id)

    assert item.user_id == "guest"
    assert [i.id for i in list_cart(None)] == [item.id]


@pytest.mark.django_db
def test_sequential_distinct_adds_get_unique_ids():
    products = [ProductFactory() for _ in range(50)]

    ids = [add_item(user_id="7", product_id=p.id).id for p in products]

    assert len(set(ids)) == 50
    assert CartItem.objects.filter(user_id="7").count() == 50


@pytest.mark.django_db
def test_lost_insert_race_is_retried_as_merge():
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id, quantity=1)
    real_merge = services._merge_into_existing
    calls = {"n": 0}

    def miss_first_time(**kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            return None
        return real_merge(**kwargs)

    with mock.patch("cart.services._merge_into_existing", side_effect=miss_first_time):
        item = add_item(user_id="7", product_id=product.id, quantity=2)

    assert calls["n"] == 2
    assert item.quantity == 3
    assert CartItem.objects.filter(user_id="7").count() == 1


@pytest.mark.django_db
def test_add_item_gives_up_after_max_retries(settings):
    settings.CART_ADD_MAX_RETRIES = 2
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id)

    with mock.patch("cart.services._merge_into_existing", return_value=None) as merge:
        with pytest.raises(ConflictError):
            add_item(user_id="7", product_id=product.id)

    assert merge.call_count == 2
    assert CartItem.objects.get(user_id="7").quantity == 1


@pytest.mark.django_db
def test_update_item_changes_quantity_and_options():
    product = ProductFactory()
    item = add_item(user_id="7", product_id=product.id, selected_options={"color": "red"})

    updated = update_item(user_id="7", item_id=item.id, quantity=4, selected_options={"color": "blue"})

    updated.refresh_from_db()
    assert updated.quantity == 4
    assert updated.selected_options == {"color": "blue"}
    # Merging now follows the new options
    assert add_item(user_id="7", product_id=product.id, selected_options={"color": "blue"}).id == item.id


@pytest.mark.django_db
def test_update_item_into_existing_options_is_rejected():
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id, selected_options={"color": "red"})
    blue = add_item(user_id="7", product_id=product.id, selected_options={"color": "blue"})

    with pytest.raises(ValidationError):
        update_item(user_id="7", item_id=blue.id, selected_options={"color": "red"})


@pytest.mark.django_db
def test_update_item_of_another_user_is_not_found():
    product = ProductFactory()
    item = add_item(user_id="7", product_id=product.id)

    with pytest.raises(NotFoundError):
        update_item(user_id="8", item_id=item.id, quantity=2)
    with pytest.raises(ValidationError):
        update_item(user_id="7", item_id=item.id, quantity=0)


@pytest.mark.django_db
def test_update_item_options_targets_latest_line():
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id, selected_options={"color": "red"})
    latest = add_item(user_id="7", product_id=product.id, selected_options={"color": "blue"})

    item = update_item_options(
        user_id="7", product_id=product.id, selected_options={"color": "green"}, attachments={"text": "Hi"}
    )

    assert item.id == latest.id
    item.refresh_from_db()
    assert item.selected_options == {"color": "green"}
    assert item.attachments == {"images": [], "text": "Hi"}

    with pytest.raises(NotFoundError):
        update_item_options(user_id="7", product_id=product.id + 1000, selected_options={})


@pytest.mark.django_db
def test_remove_item_and_remove_by_product():
    p1, p2 = ProductFactory(), ProductFactory()
    line = add_item(user_id="7", product_id=p1.id)
    add_item(user_id="7", product_id=p2.id, selected_options={"size": "S"})
    add_item(user_id="7", product_id=p2.id, selected_options={"size": "M"})

    remove_item(user_id="7", item_id=line.id)
    with pytest.raises(NotFoundError):
        remove_item(user_id="7", item_id=line.id)

    assert remove_by_product(user_id="7", product_id=p2.id) == 2
    with pytest.raises(NotFoundError):
        remove_by_product(user_id="7", product_id=p2.id)
    assert CartItem.objects.filter(user_id="7").count() == 0


@pytest.mark.django_db
def test_clear_cart_only_touches_owner_and_empty_is_ok():
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id)
    add_item(user_id="8", product_id=product.id)

    assert clear_cart(user_id="7") == 1
    assert clear_cart(user_id="7") == 0
    assert CartItem.objects.filter(user_id="8").count() == 1


@pytest.mark.django_db
def test_list_cart_newest_first_with_live_product_and_totals():
    p1 = ProductFactory(price=Decimal("85.50"))
    p2 = ProductFactory(price=Decimal("120.00"))
    old = add_item(user_id="7", product_id=p1.id, quantity=2)
    new = add_item(user_id="7", product_id=p2.id)
    p2.delete()

    items = list_cart("7")

    assert [i.id for i in items] == [new.id, old.id]
    assert items[0].product is None
    assert items[1].product["id"] == p1.id

    totals = cart_totals("7")
    assert totals["item_count"] == 2
    assert totals["quantity"] == 3
    assert totals["subtotal"] == Decimal("291.00")
    assert totals["total"] == Decimal("291.00")


@pytest.mark.django_db
def test_cart_totals_of_empty_cart():
    assert cart_totals("nobody") == {
        "item_count": 0,
        "quantity": 0,
        "subtotal": Decimal("0.00"),
        "total": Decimal("0.00"),
    }


@pytest.mark.django_db
def test_add_item_rejects_quantity_beyond_column_range():
    product = ProductFactory()

    with pytest.raises(ValidationError) as exc:
        add_item(user_id="7", product_id=product.id, quantity=10**20)

    assert "quantity" in exc.value.errors
    assert CartItem.objects.count() == 0


@pytest.mark.django_db
def test_merge_that_would_overflow_quantity_is_rejected():
    product = ProductFactory()
    add_item(user_id="7", product_id=product.id, quantity=MAX_QUANTITY)

    with pytest.raises(ValidationError):
        add_item(user_id="7", product_id=product.id, quantity=1)

    assert CartItem.objects.get(user_id="7").quantity == MAX_QUANTITY


@pytest.mark.django_db
def test_inactive_product_cannot_be_added():
    product = ProductFactory(is_active=False)

    with pytest.raises(NotFoundError):
        add_item(user_id="7", product_id=product.id)

    assert CartItem.objects.count() == 0
