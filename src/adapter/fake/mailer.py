"""In-memory implementation of MailerPort for testing."""

from dataclasses import dataclass

from domain.model.errors import MailDeliveryError


@dataclass(frozen=True)
class SentMail:
    sender: str
    recipient: str
    subject: str
    html: str


class FakeMailer:
    def __init__(self):
        self.outbox: list[SentMail] = []
        self.fail_with: str | None = None

    def send(self, sender: str, recipient: str, subject: str, html: str) -> None:
        if self.fail_with is not None:
            raise MailDeliveryError(self.fail_with)
        self.outbox.append(SentMail(sender=sender, recipient=recipient, subject=subject, html=html))

    def last_to(self, recipient: str) -> SentMail | None:
        for mail in reversed(self.outbox):
            if mail.recipient == recipient:
                return mail
        return None
