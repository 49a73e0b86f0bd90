"""Identity bounded context: customer accounts and administration."""

from protean.domain import Domain

from shared.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

identity = Domain(name="identity")
