"""Outbound mail interface shared by the in-memory and SMTP adapters."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Adapters report delivery problems in the result instead of raising."""

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
        from_address: str | None = None,
    ) -> dict:
        """Hand one message to the mail transport.

        Returns:
            ``{"message_id", "status", "error"}`` with status ``"sent"`` or ``"failed"``.
        """

    @staticmethod
    def accepted(message_id: str) -> dict:
        return {"message_id": message_id, "status": "sent", "error": None}

    @staticmethod
    def rejected(error: str) -> dict:
        return {"message_id": None, "status": "failed", "error": error}
