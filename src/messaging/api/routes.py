"""FastAPI endpoints for the Messaging domain."""

import json
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from protean.utils.globals import current_domain

from messaging.activity import message_stats, recent_activity, unread_count
from messaging.api.schemas import (
    AdminNotesRequest,
    BulkThreadUpdateRequest,
    CompleteRequest,
    CountResponse,
    IdResponse,
    MarkReadRequest,
    PostMessageRequest,
    QuoteRequest,
    StartThreadRequest,
    StatusResponse,
    SubmitCustomRequestRequest,
    ThreadPriorityRequest,
    ThreadStatusRequest,
    UpdateCustomRequestRequest,
)
from messaging.request.lifecycle import (
    ApproveCustomRequest,
    CompleteCustomRequest,
    DeclineCustomRequest,
    QuoteCustomRequest,
    ReviewCustomRequest,
    SubmitCustomRequest,
    UpdateCustomRequest,
)
from messaging.request.queries import RequestFilter, all_requests, customer_requests, request_by_id
from messaging.thread.conversation import (
    BulkUpdateThreads,
    ChangeThreadPriority,
    ChangeThreadStatus,
    MarkThreadRead,
    PostMessage,
    StartThread,
)
from messaging.thread.queries import ThreadFilter, all_threads, customer_threads, thread_by_id

thread_router = APIRouter(prefix="/threads", tags=["threads"])
request_router = APIRouter(prefix="/custom-requests", tags=["custom-requests"])


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _json(value):
    return json.dumps(value) if value is not None else None


def _thread_filter(
    status: list[str] | None = Query(None),
    priority: list[str] | None = Query(None),
    has_order: bool | None = None,
    unread_only: bool = False,
    search: str | None = Query(None, max_length=255),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> ThreadFilter:
    return ThreadFilter(
        status=status or [],
        priority=priority or [],
        has_order=has_order,
        unread_only=unread_only,
        search=search,
        limit=limit,
        offset=offset,
    )


def _request_filter(
    status: list[str] | None = Query(None),
    request_type: list[str] | None = Query(None),
    has_quote: bool | None = None,
    event_date_from: date | None = None,
    event_date_to: date | None = None,
    search: str | None = Query(None, max_length=255),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
) -> RequestFilter:
    return RequestFilter(
        status=status or [],
        request_type=request_type or [],
        has_quote=has_quote,
        event_date_from=event_date_from,
        event_date_to=event_date_to,
        search=search,
        limit=limit,
        offset=offset,
    )


# --- Thread endpoints ---


@thread_router.get("")
async def list_threads(filters: ThreadFilter = Depends(_thread_filter)) -> list[dict]:
    return all_threads(filters)


@thread_router.get("/stats")
async def get_message_stats(customer_id: str | None = None) -> dict:
    return message_stats(customer_id)


@thread_router.get("/activity")
async def get_recent_activity(customer_id: str | None = None, limit: int = Query(10, ge=1, le=50)) -> list[dict]:
    return recent_activity(customer_id, limit)


@thread_router.get("/customer/{customer_id}")
async def list_customer_threads(customer_id: str, filters: ThreadFilter = Depends(_thread_filter)) -> list[dict]:
    return customer_threads(customer_id, filters)


@thread_router.get("/customer/{customer_id}/unread", response_model=CountResponse)
async def get_unread_count(customer_id: str) -> CountResponse:
    return CountResponse(count=unread_count(customer_id))


@thread_router.get("/{thread_id}")
async def get_thread(thread_id: str) -> dict:
    thread = thread_by_id(thread_id)
    if thread is None:
        raise HTTPException(status_code=404, detail="Thread not found")
    return thread


@thread_router.post("", status_code=201, response_model=IdResponse)
async def start_thread(body: StartThreadRequest) -> IdResponse:
    data = body.model_dump(exclude={"attachments"})
    return IdResponse(id=_process(StartThread(**data, attachments=_json(body.attachments))))


@thread_router.post("/{thread_id}/messages", status_code=201, response_model=IdResponse)
async def post_message(thread_id: str, body: PostMessageRequest) -> IdResponse:
    data = body.model_dump(exclude={"attachments"})
    message_id = _process(PostMessage(thread_id=thread_id, **data, attachments=_json(body.attachments)))
    return IdResponse(id=message_id)


@thread_router.put("/{thread_id}/read", response_model=CountResponse)
async def mark_thread_read(thread_id: str, body: MarkReadRequest) -> CountResponse:
    return CountResponse(count=_process(MarkThreadRead(thread_id=thread_id, reader=body.reader)))


@thread_router.put("/bulk", response_model=CountResponse)
async def bulk_update_threads(body: BulkThreadUpdateRequest) -> CountResponse:
    count = _process(
        BulkUpdateThreads(thread_ids=json.dumps(body.thread_ids), status=body.status, priority=body.priority)
    )
    return CountResponse(count=count)


@thread_router.put("/{thread_id}/status", response_model=StatusResponse)
async def change_thread_status(thread_id: str, body: ThreadStatusRequest) -> StatusResponse:
    _process(ChangeThreadStatus(thread_id=thread_id, status=body.status))
    return StatusResponse()


@thread_router.put("/{thread_id}/priority", response_model=StatusResponse)
async def change_thread_priority(thread_id: str, body: ThreadPriorityRequest) -> StatusResponse:
    _process(ChangeThreadPriority(thread_id=thread_id, priority=body.priority))
    return StatusResponse()


# --- Custom request endpoints ---


@request_router.get("")
async def list_requests(filters: RequestFilter = Depends(_request_filter)) -> list[dict]:
    return all_requests(filters)


@request_router.get("/customer/{customer_id}")
async def list_customer_requests(customer_id: str, filters: RequestFilter = Depends(_request_filter)) -> list[dict]:
    return customer_requests(customer_id, filters)


@request_router.get("/{request_id}")
async def get_request(request_id: str) -> dict:
    request = request_by_id(request_id)
    if request is None:
        raise HTTPException(status_code=404, detail="Custom request not found")
    return request


@request_router.post("", status_code=201, response_model=IdResponse)
async def submit_request(body: SubmitCustomRequestRequest) -> IdResponse:
    data = body.model_dump(exclude={"specifications", "reference_images"})
    request_id = _process(
        SubmitCustomRequest(
            **data,
            specifications=_json(body.specifications),
            reference_images=_json(body.reference_images),
        )
    )
    return IdResponse(id=request_id)


@request_router.put("/{request_id}", response_model=StatusResponse)
async def update_request(request_id: str, body: UpdateCustomRequestRequest) -> StatusResponse:
    data = body.model_dump(exclude={"specifications", "reference_images"})
    _process(
        UpdateCustomRequest(
            request_id=request_id,
            **data,
            specifications=_json(body.specifications),
            reference_images=_json(body.reference_images),
        )
    )
    return StatusResponse()


@request_router.put("/{request_id}/review", response_model=StatusResponse)
async def review_request(request_id: str, body: AdminNotesRequest) -> StatusResponse:
    _process(ReviewCustomRequest(request_id=request_id, admin_notes=body.admin_notes))
    return StatusResponse()


@request_router.put("/{request_id}/quote", response_model=StatusResponse)
async def quote_request(request_id: str, body: QuoteRequest) -> StatusResponse:
    _process(QuoteCustomRequest(request_id=request_id, price=body.price, admin_notes=body.admin_notes))
    return StatusResponse()


@request_router.put("/{request_id}/approve", response_model=StatusResponse)
async def approve_request(request_id: str) -> StatusResponse:
    _process(ApproveCustomRequest(request_id=request_id))
    return StatusResponse()


@request_router.put("/{request_id}/decline", response_model=StatusResponse)
async def decline_request(request_id: str, body: AdminNotesRequest) -> StatusResponse:
    _process(DeclineCustomRequest(request_id=request_id, admin_notes=body.admin_notes))
    return StatusResponse()


@request_router.put("/{request_id}/complete", response_model=StatusResponse)
async def complete_request(request_id: str, body: CompleteRequest) -> StatusResponse:
    _process(CompleteCustomRequest(request_id=request_id, order_id=body.order_id))
    return StatusResponse()
