"""Notifications bounded context: transactional and marketing email.

Consumes Identity and Ordering events, renders the bakery's email templates
and dispatches them through the email channel. Every email is tracked as a
Notification so failed sends can be retried. Also owns newsletter
subscriptions.
"""

import structlog
from protean.domain import Domain

from shared.utils.logging import configure_logging

configure_logging()

notifications = Domain(name="notifications")

logger = structlog.get_logger(__name__)
