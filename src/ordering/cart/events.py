"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer, String

from ordering.domain import ordering


@ordering.event(part_of="ShoppingCart")
class CartItemAdded:
    """A meal was added to the cart, or its existing line was incremented."""

    __version__ = 1

    owner_email = String(required=True)
    item_id = Identifier(required=True)
    meal_id = String(required=True)
    quantity = Integer(required=True)
    unit_price = Float(required=True)


@ordering.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    __version__ = 1

    owner_email = String(required=True)
    item_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@ordering.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    owner_email = String(required=True)
    item_id = Identifier(required=True)
    meal_id = String(required=True)


@ordering.event(part_of="ShoppingCart")
class CartCleared:
    """All lines were dropped, by the customer or after a checkout."""

    __version__ = 1

    owner_email = String(required=True)
    items_removed = Integer(required=True)
