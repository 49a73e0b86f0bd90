"""FastAPI routes for the Ordering domain: carts, wishlists and orders."""

import json
from datetime import date

from fastapi import APIRouter, HTTPException, Query
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    AddToCartRequest,
    AddToWishlistRequest,
    BulkRemoveCartItemsRequest,
    BulkUpdateCartItemsRequest,
    BulkUpdateOrdersRequest,
    CancelOrderRequest,
    CartItemResponse,
    CheckoutRequest,
    CheckoutResponse,
    CountResponse,
    CreateWishlistRequest,
    CustomizationsSchema,
    IdResponse,
    MergeGuestCartRequest,
    MoveToCartRequest,
    OrderFilterRequest,
    RenameWishlistRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderDetailsRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
    WishlistItemNotesRequest,
)
from ordering.cart.items import (
    AddToCart,
    BulkRemoveCartItems,
    BulkUpdateCartItems,
    ClearCart,
    RemoveCartItem,
    UpdateCartItem,
)
from ordering.cart.management import MergeGuestCart
from ordering.cart.queries import cart_for_customer, cart_for_session, cart_summary, recent_cart_items
from ordering.checkout.checkout import Checkout
from ordering.order.management import (
    BulkUpdateOrders,
    CancelOrder,
    UpdateOrderDetails,
    UpdateOrderStatus,
    UpdatePaymentStatus,
)
from ordering.order.queries import (
    OrderFilter,
    customer_order_stats,
    customer_orders,
    filter_orders,
    order_analytics,
    order_by_id,
    order_by_number,
    orders_by_delivery_date,
    orders_by_status,
    popular_products,
    recent_orders,
)
from ordering.wishlist.management import (
    AddToWishlist,
    CreateWishlist,
    DeleteWishlist,
    MoveWishlistItemToCart,
    RemoveFromWishlist,
    RenameWishlist,
    SetDefaultWishlist,
    UpdateWishlistItemNotes,
)
from ordering.wishlist.queries import customer_wishlists, default_wishlist, is_product_in_wishlist

cart_router = APIRouter(prefix="/carts", tags=["carts"])
wishlist_router = APIRouter(prefix="/wishlists", tags=["wishlists"])
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _customizations(customizations: CustomizationsSchema | None) -> str | None:
    if customizations is None:
        return None
    return json.dumps(customizations.model_dump(exclude_none=True))


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
@cart_router.get("/customer/{customer_id}")
async def get_customer_cart(customer_id: str) -> dict:
    cart = cart_for_customer(customer_id)
    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@cart_router.get("/session/{session_id}")
async def get_session_cart(session_id: str) -> dict:
    cart = cart_for_session(session_id)
    if cart is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return cart


@cart_router.get("/{cart_id}/summary")
async def get_cart_summary(cart_id: str) -> dict:
    return cart_summary(cart_id)


@cart_router.get("/{cart_id}/recent")
async def get_recent_cart_items(cart_id: str, limit: int = Query(5, ge=1, le=50)) -> list[dict]:
    return recent_cart_items(cart_id, limit)


@cart_router.post("/items", status_code=201, response_model=CartItemResponse)
async def add_to_cart(body: AddToCartRequest) -> CartItemResponse:
    data = body.model_dump(exclude={"customizations"})
    result = _process(AddToCart(**data, customizations=_customizations(body.customizations)))
    return CartItemResponse(**result)


@cart_router.put("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def update_cart_item(cart_id: str, item_id: str, body: UpdateCartItemRequest) -> StatusResponse:
    _process(
        UpdateCartItem(
            cart_id=cart_id,
            item_id=item_id,
            quantity=body.quantity,
            customizations=_customizations(body.customizations),
        )
    )
    return StatusResponse()


@cart_router.delete("/{cart_id}/items/{item_id}", response_model=StatusResponse)
async def remove_cart_item(cart_id: str, item_id: str) -> StatusResponse:
    _process(RemoveCartItem(cart_id=cart_id, item_id=item_id))
    return StatusResponse()


@cart_router.put("/{cart_id}/items", response_model=CountResponse)
async def bulk_update_cart_items(cart_id: str, body: BulkUpdateCartItemsRequest) -> CountResponse:
    updates = json.dumps([u.model_dump() for u in body.updates])
    count = _process(BulkUpdateCartItems(cart_id=cart_id, updates=updates))
    return CountResponse(count=count)


@cart_router.post("/{cart_id}/items/remove", response_model=CountResponse)
async def bulk_remove_cart_items(cart_id: str, body: BulkRemoveCartItemsRequest) -> CountResponse:
    count = _process(BulkRemoveCartItems(cart_id=cart_id, item_ids=json.dumps(body.item_ids)))
    return CountResponse(count=count)


@cart_router.delete("/{cart_id}/items", response_model=CountResponse)
async def clear_cart(cart_id: str) -> CountResponse:
    count = _process(ClearCart(cart_id=cart_id))
    return CountResponse(count=count)


@cart_router.post("/merge", response_model=CountResponse)
async def merge_guest_cart(body: MergeGuestCartRequest) -> CountResponse:
    count = _process(MergeGuestCart(**body.model_dump()))
    return CountResponse(count=count)


# ---------------------------------------------------------------------------
# Wishlist Router
# ---------------------------------------------------------------------------
@wishlist_router.get("/customer/{customer_id}")
async def get_customer_wishlists(customer_id: str) -> list[dict]:
    return customer_wishlists(customer_id)


@wishlist_router.get("/customer/{customer_id}/default")
async def get_default_wishlist(customer_id: str) -> dict:
    wishlist = default_wishlist(customer_id)
    if wishlist is None:
        raise HTTPException(status_code=404, detail="Wishlist not found")
    return wishlist


@wishlist_router.get("/customer/{customer_id}/contains/{product_id}")
async def check_product_in_wishlist(customer_id: str, product_id: str, variant_id: str | None = None) -> dict:
    return {"in_wishlist": is_product_in_wishlist(customer_id, product_id, variant_id)}


@wishlist_router.post("", status_code=201, response_model=IdResponse)
async def create_wishlist(body: CreateWishlistRequest) -> IdResponse:
    return IdResponse(id=_process(CreateWishlist(**body.model_dump())))


@wishlist_router.put("/{wishlist_id}", response_model=StatusResponse)
async def rename_wishlist(wishlist_id: str, body: RenameWishlistRequest) -> StatusResponse:
    _process(RenameWishlist(wishlist_id=wishlist_id, name=body.name))
    return StatusResponse()


@wishlist_router.put("/{wishlist_id}/default", response_model=StatusResponse)
async def set_default_wishlist(wishlist_id: str) -> StatusResponse:
    _process(SetDefaultWishlist(wishlist_id=wishlist_id))
    return StatusResponse()


@wishlist_router.delete("/{wishlist_id}", response_model=StatusResponse)
async def delete_wishlist(wishlist_id: str) -> StatusResponse:
    _process(DeleteWishlist(wishlist_id=wishlist_id))
    return StatusResponse()


@wishlist_router.post("/{wishlist_id}/items", status_code=201, response_model=IdResponse)
async def add_to_wishlist(wishlist_id: str, body: AddToWishlistRequest) -> IdResponse:
    return IdResponse(id=_process(AddToWishlist(wishlist_id=wishlist_id, **body.model_dump())))


@wishlist_router.delete("/{wishlist_id}/items/{item_id}", response_model=StatusResponse)
async def remove_from_wishlist(wishlist_id: str, item_id: str) -> StatusResponse:
    _process(RemoveFromWishlist(wishlist_id=wishlist_id, item_id=item_id))
    return StatusResponse()


@wishlist_router.put("/{wishlist_id}/items/{item_id}/notes", response_model=StatusResponse)
async def update_wishlist_item_notes(wishlist_id: str, item_id: str, body: WishlistItemNotesRequest) -> StatusResponse:
    _process(UpdateWishlistItemNotes(wishlist_id=wishlist_id, item_id=item_id, notes=body.notes))
    return StatusResponse()


@wishlist_router.post("/{wishlist_id}/items/{item_id}/move-to-cart", response_model=IdResponse)
async def move_wishlist_item_to_cart(wishlist_id: str, item_id: str, body: MoveToCartRequest) -> IdResponse:
    cart_id = _process(
        MoveWishlistItemToCart(
            wishlist_id=wishlist_id,
            item_id=item_id,
            product_name=body.product_name,
            unit_price=body.unit_price,
            quantity=body.quantity,
            customizations=_customizations(body.customizations),
        )
    )
    return IdResponse(id=cart_id)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
@order_router.post("/checkout", status_code=201, response_model=CheckoutResponse)
async def checkout(body: CheckoutRequest) -> CheckoutResponse:
    result = _process(
        Checkout(
            cart_id=body.cart_id,
            delivery_address=body.delivery_address.model_dump_json(),
            delivery_date=body.delivery_date,
            special_instructions=body.special_instructions,
            payment_method_id=body.payment_method_id,
            delivery_fee=body.delivery_fee,
            contact_email=body.contact_email,
        )
    )
    return CheckoutResponse(**result)


@order_router.get("/recent")
async def get_recent_orders(limit: int = Query(10, ge=1, le=100)) -> list[dict]:
    return recent_orders(limit)


@order_router.get("/analytics")
async def get_order_analytics(date_from: date | None = None, date_to: date | None = None) -> dict:
    return order_analytics(date_from, date_to)


@order_router.get("/popular-products")
async def get_popular_products(limit: int = Query(10, ge=1, le=100)) -> list[dict]:
    return popular_products(limit)


@order_router.get("/status/{status}")
async def get_orders_by_status(status: str) -> list[dict]:
    return orders_by_status(status)


@order_router.get("/delivery/{day}")
async def get_orders_by_delivery_date(day: date) -> list[dict]:
    return orders_by_delivery_date(day)


@order_router.post("/filter")
async def search_orders(body: OrderFilterRequest) -> dict:
    return filter_orders(OrderFilter(**body.model_dump()))


@order_router.get("/customer/{customer_id}")
async def get_customer_orders(
    customer_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status: str | None = None,
    date_from: date | None = None,
    date_to: date | None = None,
) -> list[dict]:
    return customer_orders(customer_id, limit, offset, status, date_from, date_to)


@order_router.get("/customer/{customer_id}/stats")
async def get_customer_order_stats(customer_id: str) -> dict:
    return customer_order_stats(customer_id)


@order_router.get("/number/{order_number}")
async def get_order_by_number(order_number: str) -> dict:
    order = order_by_number(order_number)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@order_router.get("/{order_id}")
async def get_order(order_id: str) -> dict:
    order = order_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order


@order_router.put("/bulk", response_model=CountResponse)
async def bulk_update_orders(body: BulkUpdateOrdersRequest) -> CountResponse:
    data = body.model_dump(exclude={"order_ids"})
    count = _process(BulkUpdateOrders(order_ids=json.dumps(body.order_ids), **data))
    return CountResponse(count=count)


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    _process(UpdateOrderStatus(order_id=order_id, **body.model_dump()))
    return StatusResponse()


@order_router.put("/{order_id}/cancel", response_model=StatusResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> StatusResponse:
    _process(CancelOrder(order_id=order_id, **body.model_dump()))
    return StatusResponse()


@order_router.put("/{order_id}/payment", response_model=StatusResponse)
async def update_payment_status(order_id: str, body: UpdatePaymentStatusRequest) -> StatusResponse:
    _process(UpdatePaymentStatus(order_id=order_id, **body.model_dump()))
    return StatusResponse()


@order_router.put("/{order_id}", response_model=StatusResponse)
async def update_order_details(order_id: str, body: UpdateOrderDetailsRequest) -> StatusResponse:
    _process(
        UpdateOrderDetails(
            order_id=order_id,
            special_instructions=body.special_instructions,
            delivery_date=body.delivery_date,
            delivery_address=body.delivery_address.model_dump_json() if body.delivery_address else None,
        )
    )
    return StatusResponse()
