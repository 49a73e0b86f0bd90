"""Messaging bounded context: customer conversations and custom bake requests."""

from protean.domain import Domain

from shared.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

messaging = Domain(name="messaging")
