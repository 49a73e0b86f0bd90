"""FastAPI routes for bakery email: the notification log, delivery
webhooks and the newsletter sign-up form."""

from fastapi import APIRouter, HTTPException, Query
from protean.utils.globals import current_domain

from notifications.api.schemas import (
    CancelNotificationRequest,
    DeliveryReceiptRequest,
    DeliveryReceiptResponse,
    SendDueRequest,
    SendDueResponse,
    StatusResponse,
    SubscribeRequest,
    SubscribeResponse,
    UnsubscribeRequest,
    UnsubscribeResponse,
)
from notifications.notification.delivery import (
    CancelNotification,
    RecordDeliveryReceipt,
    RetryNotification,
    SendDueNotifications,
)
from notifications.notification.queries import (
    failed_notifications,
    notification_by_id,
    notification_stats,
    recipient_notifications,
)
from notifications.subscriber.newsletter import Subscribe, Unsubscribe
from notifications.subscriber.queries import subscriber_stats
from notifications.subscriber.subscriber import AlreadySubscribedError

router = APIRouter(prefix="/notifications", tags=["notifications"])
newsletter_router = APIRouter(tags=["newsletter"])


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------
@router.get("/stats")
async def get_notification_stats() -> dict:
    return notification_stats()


@router.get("/failed")
async def get_failed_notifications(limit: int = Query(50, ge=1, le=200)) -> list[dict]:
    """Failed emails that can still be retried."""
    return failed_notifications(limit=limit)


@router.post("/receipts", response_model=DeliveryReceiptResponse)
async def record_delivery_receipt(body: DeliveryReceiptRequest) -> DeliveryReceiptResponse:
    """Webhook for the mail provider's delivered and bounced reports."""
    command = RecordDeliveryReceipt(message_id=body.message_id, outcome=body.outcome, reason=body.reason)
    notification_id = current_domain.process(command, asynchronous=False)
    return DeliveryReceiptResponse(notification_id=notification_id)


@router.post("/send-due", response_model=SendDueResponse)
async def send_due_notifications(body: SendDueRequest | None = None) -> SendDueResponse:
    as_of = body.as_of if body else None
    result = current_domain.process(SendDueNotifications(as_of=as_of), asynchronous=False)
    return SendDueResponse(**result)


@router.get("/subscribers/stats")
async def get_subscriber_stats() -> dict:
    return subscriber_stats()


@router.get("/recipient/{recipient}")
async def get_recipient_notifications(
    recipient: str,
    status: str | None = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> dict:
    return recipient_notifications(recipient, status=status, limit=limit, offset=offset)


@router.get("/{notification_id}")
async def get_notification(notification_id: str) -> dict:
    notification = notification_by_id(notification_id)
    if notification is None:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification


@router.post("/{notification_id}/retry", response_model=StatusResponse)
async def retry_notification(notification_id: str) -> StatusResponse:
    """Retry a failed notification."""
    current_domain.process(RetryNotification(notification_id=notification_id), asynchronous=False)
    return StatusResponse()


@router.put("/{notification_id}/cancel", response_model=StatusResponse)
async def cancel_notification(notification_id: str, body: CancelNotificationRequest) -> StatusResponse:
    """Cancel a pending notification."""
    command = CancelNotification(notification_id=notification_id, reason=body.reason)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Newsletter
# ---------------------------------------------------------------------------
@newsletter_router.post("/subscribe", response_model=SubscribeResponse)
async def subscribe(body: SubscribeRequest) -> SubscribeResponse:
    command = Subscribe(email=body.email, first_name=body.first_name, source=body.source)
    try:
        subscriber_id = current_domain.process(command, asynchronous=False)
    except AlreadySubscribedError:
        raise HTTPException(status_code=409, detail="This email is already subscribed to our newsletter.")
    return SubscribeResponse(
        success=True,
        message="Successfully subscribed! Welcome to Dee's cake newsletter.",
        subscriber_id=subscriber_id,
    )


@newsletter_router.post("/unsubscribe", response_model=UnsubscribeResponse)
async def unsubscribe(body: UnsubscribeRequest) -> UnsubscribeResponse:
    current_domain.process(Unsubscribe(email=body.email, token=body.token), asynchronous=False)
    return UnsubscribeResponse(
        success=True,
        message="You have been unsubscribed. A confirmation email is on its way.",
    )
