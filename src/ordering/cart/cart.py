"""Shopping Cart aggregate: one pending selection of meals per customer.

The cart is keyed by the owner's email and created lazily on first add.
Prices, names and chefs are snapshotted from the catalog when a line is
added; checkout re-resolves them, so a stale snapshot never reaches an order.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Float, HasMany, Integer, String

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from ordering.domain import ordering


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    meal_id = String(required=True, max_length=100)
    meal_name = String(required=True, max_length=255)
    unit_price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    chef_id = String(required=True, max_length=100)
    owner_email = String(required=True, max_length=255)
    position = Integer(default=0)
    added_at = DateTime()


@ordering.aggregate
class ShoppingCart:
    owner_email = String(identifier=True, max_length=255)
    items = HasMany(CartItem)
    next_position = Integer(default=0)
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_email):
        return cls(owner_email=owner_email, next_position=0, updated_at=datetime.now(UTC))

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def sorted_items(self) -> list:
        return sorted(self.items, key=lambda i: i.position)

    def find_item(self, item_id):
        """Return the line with ``item_id``; the owner can only reach their own lines."""
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError({"item_id": [f"Item {item_id} is not in your cart"]})
        return item

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_meal(self, meal, quantity=1):
        """Add a meal, incrementing the existing line for the same meal."""
        existing = next((i for i in self.items if str(i.meal_id) == str(meal.meal_id)), None)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(
                meal_id=str(meal.meal_id),
                meal_name=meal.name,
                unit_price=meal.price,
                quantity=quantity,
                chef_id=str(meal.chef_id),
                owner_email=self.owner_email,
                position=self.next_position,
                added_at=now,
            )
            self.add_items(item)
            self.next_position += 1

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                owner_email=self.owner_email,
                item_id=str(item.id),
                meal_id=str(meal.meal_id),
                quantity=item.quantity,
                unit_price=item.unit_price,
            )
        )
        return item

    def set_quantity(self, item_id, quantity):
        """Set a line's quantity. Anything below one removes the line.

        Returns the updated line, or None when it was removed.
        """
        item = self.find_item(item_id)
        if quantity < 1:
            self.remove_item(item_id)
            return None

        previous = item.quantity
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartQuantityUpdated(
                owner_email=self.owner_email,
                item_id=str(item.id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )
        return item

    def remove_item(self, item_id):
        item = self.find_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemRemoved(
                owner_email=self.owner_email,
                item_id=str(item.id),
                meal_id=str(item.meal_id),
            )
        )

    def clear(self):
        """Drop every line. Clearing an empty cart changes nothing."""
        if not self.items:
            return
        count = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(owner_email=self.owner_email, items_removed=count))
