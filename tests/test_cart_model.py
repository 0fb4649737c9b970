from beanie import PydanticObjectId

from sportspro.models.cartModel import Cart


def new_cart() -> Cart:
    return Cart(user_id=PydanticObjectId(), items=[])


def test_add_line_merges_same_equipment(db):
    cart = new_cart()
    equipment_id = PydanticObjectId()

    first = cart.add_line(equipment_id, 50.0, 2)
    second = cart.add_line(equipment_id, 99.0, 3)

    assert first is second
    assert len(cart.items) == 1
    assert cart.items[0].quantity == 5
    assert cart.items[0].price == 50.0  # snapshot from the first add


def test_recompute_totals_sums_snapshot_prices(db):
    cart = new_cart()
    cart.add_line(PydanticObjectId(), 19.99, 3)
    cart.add_line(PydanticObjectId(), 0.01, 1)

    cart.recompute_totals()

    assert cart.total_items == 4
    assert cart.total_price == 59.98


def test_remove_line_reports_whether_anything_was_removed(db):
    cart = new_cart()
    item = cart.add_line(PydanticObjectId(), 10.0, 1)

    assert cart.remove_line(PydanticObjectId()) is False
    assert len(cart.items) == 1
    assert cart.remove_line(str(item.id)) is True
    assert cart.items == []


def test_find_item_accepts_string_ids(db):
    cart = new_cart()
    item = cart.add_line(PydanticObjectId(), 10.0, 1)

    assert cart.find_item(str(item.id)) is item
    assert cart.find_item("not-an-object-id") is None


def test_mark_mutated_bumps_version_and_totals(db):
    cart = new_cart()
    cart.add_line(PydanticObjectId(), 25.0, 2)

    cart.mark_mutated()
    cart.mark_mutated()

    assert cart.version == 2
    assert cart.total_items == 2
    assert cart.total_price == 50.0
