"""Catalogue bounded context: categories, products, tags and allergens."""

from protean.domain import Domain

from shared.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

catalogue = Domain(name="catalogue")
