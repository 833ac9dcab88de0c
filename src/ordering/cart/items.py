"""Cart item management: commands, handler and the cart listing."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.catalog import get_catalog
from ordering.domain import ordering

logger = structlog.get_logger(__name__)


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    owner_email = String(required=True, max_length=255)
    meal_id = String(required=True, max_length=100)
    quantity = Integer(default=1, min_value=1)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    owner_email = String(required=True, max_length=255)
    item_id = String(required=True, max_length=100)
    quantity = Integer(required=True)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    owner_email = String(required=True, max_length=255)
    item_id = String(required=True, max_length=100)


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    owner_email = String(required=True, max_length=255)


def load_cart(owner_email) -> ShoppingCart:
    """Fetch the owner's cart, starting an empty one if none exists yet."""
    try:
        return current_domain.repository_for(ShoppingCart).get(owner_email)
    except ObjectNotFoundError:
        return ShoppingCart.create(owner_email)


def cart_items(owner_email) -> list:
    """The owner's cart lines in insertion order."""
    return load_cart(owner_email).sorted_items()


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        meal = get_catalog().get_meal(command.meal_id)
        if meal is None:
            raise ValidationError({"meal_id": [f"Meal {command.meal_id} does not exist"]})
        if not meal.available:
            raise ValidationError({"meal_id": [f"Meal {command.meal_id} is not available"]})

        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.owner_email)
        item = cart.add_meal(meal, quantity=command.quantity or 1)
        repo.add(cart)

        logger.info("cart_item_added", owner_email=command.owner_email, meal_id=meal.meal_id, quantity=item.quantity)
        return item

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.owner_email)
        item = cart.set_quantity(command.item_id, command.quantity)
        repo.add(cart)
        return item

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.owner_email)
        cart.remove_item(command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.owner_email)
        cart.clear()
        repo.add(cart)
