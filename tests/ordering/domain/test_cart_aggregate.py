"""Domain tests for the ShoppingCart aggregate."""

import pytest
from ordering.cart.cart import CartItem, ShoppingCart
from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from ordering.catalog import Meal
from protean.exceptions import ObjectNotFoundError

BIRYANI = Meal(meal_id="meal-biryani", name="Kacchi Biryani", price=150.0, chef_id="chef-1")
BHUNA = Meal(meal_id="meal-bhuna", name="Beef Bhuna", price=200.0, chef_id="chef-2")


@pytest.fixture()
def cart():
    return ShoppingCart.create("rina@example.com")


class TestCartCreation:
    def test_cart_is_keyed_by_owner(self, cart):
        assert cart.owner_email == "rina@example.com"

    def test_new_cart_is_empty(self, cart):
        assert len(cart.items) == 0
        assert cart.next_position == 0


class TestAddMeal:
    def test_add_snapshots_catalog_fields(self, cart):
        item = cart.add_meal(BIRYANI, quantity=2)

        assert isinstance(item, CartItem)
        assert item.meal_id == "meal-biryani"
        assert item.meal_name == "Kacchi Biryani"
        assert item.unit_price == 150.0
        assert item.chef_id == "chef-1"
        assert item.owner_email == "rina@example.com"
        assert item.quantity == 2

    def test_adding_same_meal_increments_quantity(self, cart):
        cart.add_meal(BIRYANI)
        item = cart.add_meal(BIRYANI, quantity=2)

        assert len(cart.items) == 1
        assert item.quantity == 3

    def test_positions_follow_insertion_order(self, cart):
        cart.add_meal(BHUNA)
        cart.add_meal(BIRYANI)

        assert [i.meal_id for i in cart.sorted_items()] == ["meal-bhuna", "meal-biryani"]
        assert [i.position for i in cart.sorted_items()] == [0, 1]

    def test_add_raises_event(self, cart):
        cart.add_meal(BIRYANI, quantity=2)

        event = cart._events[-1]
        assert isinstance(event, CartItemAdded)
        assert event.meal_id == "meal-biryani"
        assert event.quantity == 2


class TestSetQuantity:
    def test_updates_in_place(self, cart):
        item = cart.add_meal(BIRYANI)
        updated = cart.set_quantity(item.id, 4)

        assert updated.quantity == 4
        assert isinstance(cart._events[-1], CartQuantityUpdated)
        assert cart._events[-1].previous_quantity == 1

    def test_zero_removes_item(self, cart):
        item = cart.add_meal(BIRYANI)

        assert cart.set_quantity(item.id, 0) is None
        assert len(cart.items) == 0
        assert isinstance(cart._events[-1], CartItemRemoved)

    def test_negative_removes_item(self, cart):
        item = cart.add_meal(BIRYANI)
        cart.set_quantity(item.id, -3)
        assert len(cart.items) == 0

    def test_unknown_item_is_not_found(self, cart):
        with pytest.raises(ObjectNotFoundError):
            cart.set_quantity("missing", 2)


class TestRemoveAndClear:
    def test_remove_item(self, cart):
        keep = cart.add_meal(BHUNA)
        drop = cart.add_meal(BIRYANI)

        cart.remove_item(drop.id)

        assert [str(i.id) for i in cart.items] == [str(keep.id)]

    def test_remove_unknown_item_is_not_found(self, cart):
        with pytest.raises(ObjectNotFoundError):
            cart.remove_item("missing")

    def test_clear_drops_every_line(self, cart):
        cart.add_meal(BHUNA)
        cart.add_meal(BIRYANI)

        cart.clear()

        assert len(cart.items) == 0
        assert isinstance(cart._events[-1], CartCleared)
        assert cart._events[-1].items_removed == 2

    def test_clearing_empty_cart_raises_no_event(self, cart):
        cart.clear()
        assert cart._events == []
