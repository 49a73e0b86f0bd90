"""Ordering bounded context: carts, wishlists, checkout and orders.

Carts and wishlists are short-lived customer state; an Order is created from
a cart at checkout and then moves through the bakery's fulfilment states.
"""

import structlog
from protean.domain import Domain

from shared.utils.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
