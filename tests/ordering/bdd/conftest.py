"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.cart import Cart
from ordering.order.order import DeliveryAddress, Order
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@given(parsers.cfparse('a cart for customer "{customer_id}"'), target_fixture="cart")
def a_customer_cart(customer_id):
    return Cart.create(customer_id=customer_id)


@given(parsers.cfparse('an order for {quantity:d} "{product_name}" at {unit_price:f}'), target_fixture="order")
def an_order(quantity, product_name, unit_price):
    subtotal = round(quantity * unit_price, 2)
    tax = round(subtotal * 0.08, 2)
    return Order.place(
        items_data=[
            {
                "product_id": "prod-1",
                "product_name": product_name,
                "quantity": quantity,
                "unit_price": unit_price,
            }
        ],
        pricing={"subtotal": subtotal, "tax": tax, "delivery_fee": 0.0, "total": round(subtotal + tax, 2)},
        delivery_address=DeliveryAddress(
            first_name="Dee",
            last_name="Baker",
            address_line_1="1 Sugar Lane",
            city="London",
            postal_code="E1 6AN",
            country="UK",
        ),
        customer_id="cust-001",
    )


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)
