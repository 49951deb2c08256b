"""
Integration Result Types.

Provider calls report failure through the result, never by raising, so a
flaky provider cannot fail the request that triggered the message.
"""

from dataclasses import dataclass


@dataclass
class SendResult:
    """Outcome of one outbound message or CRM call."""

    success: bool
    message_id: str | None = None
    error: str | None = None

    @classmethod
    def ok(cls, message_id: str | None = None, error: str | None = None) -> "SendResult":
        return cls(success=True, message_id=message_id, error=error)

    @classmethod
    def failed(cls, error: str) -> "SendResult":
        return cls(success=False, error=error)
