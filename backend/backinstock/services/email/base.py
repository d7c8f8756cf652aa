"""Protocol for email transports. One call sends one rendered message."""
from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class SendResult:
    ok: bool
    error: str | None = None
    message_id: str | None = None

    @classmethod
    def success(cls, message_id: str | None = None) -> "SendResult":
        return cls(ok=True, message_id=message_id)

    @classmethod
    def failure(cls, reason: str) -> "SendResult":
        return cls(ok=False, error=reason)


class EmailSender(Protocol):
    def send(self, to: str, subject: str, html_body: str, text_body: str) -> SendResult:
        """
        Deliver one message. Returns SendResult.failure(reason) for a rejected send;
        raising DeliveryError (or anything else) is also treated as a failure by the dispatcher.
        """
        ...
