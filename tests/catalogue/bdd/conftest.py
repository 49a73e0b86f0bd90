"""Shared BDD fixtures and step definitions for the Catalogue domain."""

import pytest
from catalogue.product.events import AllergenDeclared, ProductImageAdded, StockAdjusted, VariantAdded
from catalogue.product.product import Product
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

_EVENT_CLASSES = {
    "AllergenDeclared": AllergenDeclared,
    "ProductImageAdded": ProductImageAdded,
    "StockAdjusted": StockAdjusted,
    "VariantAdded": VariantAdded,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@given(parsers.cfparse('a product "{name}" priced at {price:f}'), target_fixture="product")
def a_product(name, price):
    return Product.create(name=name, base_price=price)


@then("the action fails with a validation error")
def action_fails_with_validation_error(error):
    assert error["exc"] is not None, "Expected a validation error but none was raised"
    assert isinstance(error["exc"], ValidationError)


@then(parsers.re(r"an? (?P<event_type>\w+) event is raised"))
def event_raised(product, event_type):
    event_cls = _EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in product._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in product._events]}"
