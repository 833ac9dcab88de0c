"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str | dict[str, list[str]]


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request or domain rule violated"},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "Not allowed for this account"},
    404: {"model": ErrorResponse, "description": "Unknown cart item, meal or order"},
    409: {"model": ErrorResponse, "description": "Order or payment state changed underneath the request"},
}


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    meal_id: str
    quantity: int = Field(ge=1, default=1)

    model_config = {"json_schema_extra": {"examples": [{"meal_id": "meal-001", "quantity": 2}]}}


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class CartItemResponse(BaseModel):
    item_id: str
    meal_id: str
    meal_name: str
    unit_price: float
    quantity: int
    chef_id: str
    owner_email: str
    added_at: datetime | None = None

    @classmethod
    def from_entity(cls, item) -> "CartItemResponse":
        return cls(
            item_id=str(item.id),
            meal_id=str(item.meal_id),
            meal_name=item.meal_name,
            unit_price=item.unit_price,
            quantity=item.quantity,
            chef_id=str(item.chef_id),
            owner_email=item.owner_email,
            added_at=item.added_at,
        )


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CheckoutRequest(BaseModel):
    delivery_address: str
    source: Literal["cart", "direct"] = "cart"
    meal_id: str | None = None
    quantity: int | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"delivery_address": "House 12, Road 5, Dhanmondi, Dhaka", "source": "cart"},
                {
                    "delivery_address": "House 12, Road 5, Dhanmondi, Dhaka",
                    "source": "direct",
                    "meal_id": "meal-001",
                    "quantity": 2,
                },
            ]
        }
    }


class TransitionRequest(BaseModel):
    status: str
    expected_status: str | None = None


class OrderItemResponse(BaseModel):
    item_id: str
    meal_id: str
    meal_name: str
    unit_price: float
    quantity: int
    chef_id: str


class OrderResponse(BaseModel):
    order_id: str
    owner_email: str
    chef_ids: list[str]
    items: list[OrderItemResponse]
    delivery_address: str
    subtotal: float
    delivery_fee: float
    total_amount: float
    order_status: str
    payment_status: str
    order_time: datetime | None = None
    updated_at: datetime | None = None
    cancelled_by: str | None = None
    refund_review: bool = False

    @classmethod
    def from_aggregate(cls, order) -> "OrderResponse":
        return cls(
            order_id=str(order.id),
            owner_email=order.owner_email,
            chef_ids=order.chef_ids,
            items=[
                OrderItemResponse(
                    item_id=str(item.id),
                    meal_id=str(item.meal_id),
                    meal_name=item.meal_name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                    chef_id=str(item.chef_id),
                )
                for item in order.items
            ],
            delivery_address=order.delivery_address,
            subtotal=order.pricing.subtotal,
            delivery_fee=order.pricing.delivery_fee,
            total_amount=order.pricing.total_amount,
            order_status=order.order_status,
            payment_status=order.payment_status,
            order_time=order.order_time,
            updated_at=order.updated_at,
            cancelled_by=order.cancelled_by,
            refund_review=bool(order.refund_review),
        )


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreateIntentRequest(BaseModel):
    order_id: str


class IntentResponse(BaseModel):
    intent_ref: str
    client_secret: str | None
    amount: float
    currency: str


class ConfirmPaymentRequest(BaseModel):
    order_id: str
    transaction_reference: str


class PaymentRecordResponse(BaseModel):
    payment_id: str
    order_id: str
    owner_email: str
    amount: float
    currency: str | None = None
    transaction_reference: str
    recorded_at: datetime | None = None

    @classmethod
    def from_aggregate(cls, record) -> "PaymentRecordResponse":
        return cls(
            payment_id=str(record.id),
            order_id=str(record.order_id),
            owner_email=record.owner_email,
            amount=record.amount,
            currency=record.currency,
            transaction_reference=record.transaction_reference,
            recorded_at=record.recorded_at,
        )
