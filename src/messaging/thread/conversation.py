"""Thread commands: starting conversations, posting, read state and triage."""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from messaging.domain import messaging
from messaging.thread.thread import MessageThread, Reader, ThreadPriority, ThreadStatus

logger = structlog.get_logger(__name__)


@messaging.command(part_of="MessageThread")
class StartThread:
    customer_id: Identifier(required=True)
    subject: String(required=True, max_length=200, sanitize=False)
    content: Text(required=True, sanitize=False)
    priority: String(choices=ThreadPriority, default=ThreadPriority.NORMAL.value)
    order_id: Identifier()
    attachments: Text(sanitize=False)  # JSON


@messaging.command(part_of="MessageThread")
class PostMessage:
    thread_id: Identifier(required=True)
    sender_id: Identifier()
    content: Text(required=True, sanitize=False)
    is_from_customer: Boolean(default=True)
    attachments: Text(sanitize=False)  # JSON


@messaging.command(part_of="MessageThread")
class MarkThreadRead:
    thread_id: Identifier(required=True)
    reader: String(choices=Reader, default=Reader.CUSTOMER.value)


@messaging.command(part_of="MessageThread")
class ChangeThreadStatus:
    thread_id: Identifier(required=True)
    status: String(required=True, choices=ThreadStatus)


@messaging.command(part_of="MessageThread")
class ChangeThreadPriority:
    thread_id: Identifier(required=True)
    priority: String(required=True, choices=ThreadPriority)


@messaging.command(part_of="MessageThread")
class BulkUpdateThreads:
    thread_ids: Text(required=True, sanitize=False)  # JSON list of thread ids
    status: String(choices=ThreadStatus)
    priority: String(choices=ThreadPriority)


@messaging.command_handler(part_of=MessageThread)
class ConversationHandler:
    @handle(StartThread)
    def start_thread(self, command):
        thread = MessageThread.start(
            customer_id=command.customer_id,
            subject=command.subject,
            content=command.content,
            priority=command.priority,
            order_id=command.order_id,
            attachments=command.attachments,
        )
        current_domain.repository_for(MessageThread).add(thread)
        logger.info("Thread started", thread_id=str(thread.id), customer_id=str(command.customer_id))
        return str(thread.id)

    @handle(PostMessage)
    def post_message(self, command):
        repo = current_domain.repository_for(MessageThread)
        thread = repo.get(command.thread_id)
        message = thread.post(
            command.sender_id,
            command.content,
            is_from_customer=command.is_from_customer,
            attachments=command.attachments,
        )
        repo.add(thread)
        return str(message.id)

    @handle(MarkThreadRead)
    def mark_read(self, command):
        repo = current_domain.repository_for(MessageThread)
        thread = repo.get(command.thread_id)
        count = thread.mark_read(command.reader)
        repo.add(thread)
        return count

    @handle(ChangeThreadStatus)
    def change_status(self, command):
        repo = current_domain.repository_for(MessageThread)
        thread = repo.get(command.thread_id)
        thread.change_status(command.status)
        repo.add(thread)

    @handle(ChangeThreadPriority)
    def change_priority(self, command):
        repo = current_domain.repository_for(MessageThread)
        thread = repo.get(command.thread_id)
        thread.change_priority(command.priority)
        repo.add(thread)

    @handle(BulkUpdateThreads)
    def bulk_update(self, command):
        try:
            thread_ids = json.loads(command.thread_ids)
        except (json.JSONDecodeError, TypeError):
            raise ValidationError({"thread_ids": ["Thread ids must be a JSON list"]}) from None
        if not isinstance(thread_ids, list) or not thread_ids:
            raise ValidationError({"thread_ids": ["At least one thread ID is required"]})
        thread_ids = list(dict.fromkeys(str(thread_id) for thread_id in thread_ids))
        if not command.status and not command.priority:
            raise ValidationError({"thread": ["At least one field must be updated"]})

        repo = current_domain.repository_for(MessageThread)
        threads = [repo.get(thread_id) for thread_id in thread_ids]
        for thread in threads:
            if command.status:
                thread.change_status(command.status)
            if command.priority:
                thread.change_priority(command.priority)
        for thread in threads:
            repo.add(thread)

        logger.info("Bulk thread update", count=len(threads), status=command.status, priority=command.priority)
        return len(threads)
