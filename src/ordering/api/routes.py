"""FastAPI routes for the Ordering domain: cart, orders, payments and stats."""

from fastapi import APIRouter, Depends, Response
from protean.utils.globals import current_domain

from ordering.access.principal import Principal
from ordering.api.dependencies import current_principal
from ordering.api.schemas import (
    ERROR_RESPONSES,
    AddToCartRequest,
    CartItemResponse,
    CheckoutRequest,
    ConfirmPaymentRequest,
    CreateIntentRequest,
    IntentResponse,
    OrderResponse,
    PaymentRecordResponse,
    StatusResponse,
    TransitionRequest,
    UpdateCartQuantityRequest,
)
from ordering.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity, cart_items
from ordering.checkout.aggregator import checkout
from ordering.ledger.revenue import ledger_snapshot
from ordering.order.queries import all_orders, order_detail, orders_for_chef, orders_for_owner
from ordering.order.transitions import TransitionOrder
from ordering.payment.confirmation import ConfirmPayment
from ordering.payment.intent import CreatePaymentIntent
from ordering.payment.queries import payment_history

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"], responses=ERROR_RESPONSES)


@cart_router.get("", response_model=list[CartItemResponse])
async def list_cart(principal: Principal = Depends(current_principal)) -> list[CartItemResponse]:
    return [CartItemResponse.from_entity(item) for item in cart_items(principal.email)]


@cart_router.post("", status_code=201, response_model=CartItemResponse)
async def add_cart_item(body: AddToCartRequest, principal: Principal = Depends(current_principal)) -> CartItemResponse:
    command = AddToCart(
        owner_email=principal.email,
        meal_id=body.meal_id,
        quantity=body.quantity,
    )
    item = current_domain.process(command, asynchronous=False)
    return CartItemResponse.from_entity(item)


# Declared before /{item_id} so "clear" is never read as an item id
@cart_router.delete("/clear", response_model=StatusResponse)
async def clear_cart(principal: Principal = Depends(current_principal)) -> StatusResponse:
    current_domain.process(ClearCart(owner_email=principal.email), asynchronous=False)
    return StatusResponse(status="cleared")


@cart_router.patch("/{item_id}", response_model=CartItemResponse | StatusResponse)
async def update_cart_item(
    item_id: str,
    body: UpdateCartQuantityRequest,
    principal: Principal = Depends(current_principal),
) -> CartItemResponse | StatusResponse:
    command = UpdateCartQuantity(
        owner_email=principal.email,
        item_id=item_id,
        quantity=body.quantity,
    )
    item = current_domain.process(command, asynchronous=False)
    if item is None:
        return StatusResponse(status="removed")
    return CartItemResponse.from_entity(item)


@cart_router.delete("/{item_id}", response_model=StatusResponse)
async def remove_cart_item(item_id: str, principal: Principal = Depends(current_principal)) -> StatusResponse:
    command = RemoveFromCart(owner_email=principal.email, item_id=item_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse(status="removed")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"], responses=ERROR_RESPONSES)


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: CheckoutRequest, principal: Principal = Depends(current_principal)) -> OrderResponse:
    order = checkout(
        principal,
        delivery_address=body.delivery_address,
        source=body.source,
        meal_id=body.meal_id,
        quantity=body.quantity,
    )
    return OrderResponse.from_aggregate(order)


@order_router.get("/my", response_model=list[OrderResponse])
async def my_orders(principal: Principal = Depends(current_principal)) -> list[OrderResponse]:
    return [OrderResponse.from_aggregate(o) for o in orders_for_owner(principal)]


@order_router.get("/chef/{chef_id}", response_model=list[OrderResponse])
async def chef_orders(chef_id: str, principal: Principal = Depends(current_principal)) -> list[OrderResponse]:
    return [OrderResponse.from_aggregate(o) for o in orders_for_chef(principal, chef_id)]


@order_router.get("", response_model=list[OrderResponse])
async def list_all_orders(principal: Principal = Depends(current_principal)) -> list[OrderResponse]:
    return [OrderResponse.from_aggregate(o) for o in all_orders(principal)]


@order_router.patch("/status/{order_id}", response_model=OrderResponse)
async def transition_order(
    order_id: str,
    body: TransitionRequest,
    principal: Principal = Depends(current_principal),
) -> OrderResponse:
    command = TransitionOrder(
        order_id=order_id,
        target_status=body.status,
        expected_status=body.expected_status,
        **principal.as_actor(),
    )
    order = current_domain.process(command, asynchronous=False)
    return OrderResponse.from_aggregate(order)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, principal: Principal = Depends(current_principal)) -> OrderResponse:
    return OrderResponse.from_aggregate(order_detail(principal, order_id))


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"], responses=ERROR_RESPONSES)


@payment_router.post("/create-intent", response_model=IntentResponse)
async def create_intent(body: CreateIntentRequest, principal: Principal = Depends(current_principal)) -> IntentResponse:
    command = CreatePaymentIntent(order_id=body.order_id, **principal.as_actor())
    intent = current_domain.process(command, asynchronous=False)
    return IntentResponse(
        intent_ref=intent.intent_ref,
        client_secret=intent.client_secret,
        amount=intent.amount,
        currency=intent.currency,
    )


@payment_router.post("/success", response_model=OrderResponse)
async def confirm_payment(
    body: ConfirmPaymentRequest,
    response: Response,
    principal: Principal = Depends(current_principal),
) -> OrderResponse:
    command = ConfirmPayment(
        order_id=body.order_id,
        transaction_reference=body.transaction_reference,
        **principal.as_actor(),
    )
    result = current_domain.process(command, asynchronous=False)
    if result.replayed:
        response.headers["Idempotent-Replay"] = "true"
    return OrderResponse.from_aggregate(result.order)


@payment_router.get("/history", response_model=list[PaymentRecordResponse])
async def list_payment_history(principal: Principal = Depends(current_principal)) -> list[PaymentRecordResponse]:
    return [PaymentRecordResponse.from_aggregate(r) for r in payment_history(principal)]


# ---------------------------------------------------------------------------
# Stats Router
# ---------------------------------------------------------------------------
stats_router = APIRouter(prefix="/stats", tags=["stats"], responses=ERROR_RESPONSES)


@stats_router.get("")
async def stats(principal: Principal = Depends(current_principal)) -> dict:
    return ledger_snapshot(principal).to_dict()
