"""Port definition for outbound mail."""

from typing import Protocol


class MailerPort(Protocol):
    def send(self, sender: str, recipient: str, subject: str, html: str) -> None:
        """Deliver an HTML message. Raise MailDeliveryError on failure."""
        ...
