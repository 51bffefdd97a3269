"""SMTP implementation of MailerPort."""

import logging
import smtplib
from email.message import EmailMessage

from domain.model.errors import MailDeliveryError

logger = logging.getLogger(__name__)


class SmtpMailer:
    """Sends HTML mail through an SMTP relay.

    ``secure=True`` opens an implicit TLS connection (port 465 style).
    Otherwise the connection is upgraded with STARTTLS when the server
    advertises it. Login is skipped when no username is configured.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str = '',
        password: str = '',
        secure: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.secure = secure
        self.timeout = timeout

    def _build_message(self, sender: str, recipient: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = sender
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def _connect(self) -> smtplib.SMTP:
        if self.secure:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls()
            server.ehlo()
        return server

    def send(self, sender: str, recipient: str, subject: str, html: str) -> None:
        message = self._build_message(sender, recipient, subject, html)

        try:
            with self._connect() as server:
                if self.username:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP send failed", extra={"recipient": recipient, "error": str(e)})
            raise MailDeliveryError(str(e) or e.__class__.__name__) from e

        logger.info("Email sent", extra={"recipient": recipient, "subject": subject})
