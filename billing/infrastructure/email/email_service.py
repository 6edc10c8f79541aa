"""
Email senders for bulk dispatch.
One chunk is one SMTP transaction: every recipient goes into the envelope,
the visible To header only carries the sender.
"""

import asyncio
import re
import smtplib
import logging
from typing import List, Dict, Any, Optional, Sequence
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr, make_msgid
from datetime import datetime

from billing.config import Settings, settings
from billing.domain.models.base import TransportError
from billing.domain.models.dispatch import ChunkResult
from billing.domain.services.message_service import OutboundMessageSender


logger = logging.getLogger(__name__)

_TAG_PATTERN = re.compile(r'<[^>]+>')


def _looks_like_html(body: str) -> bool:
    return body.lstrip().startswith("<")


class SmtpEmailSender(OutboundMessageSender):
    """Sends chunks through an SMTP relay."""

    def __init__(self, config: Optional[Settings] = None):
        """Initialize sender with SMTP configuration."""
        config = config or settings
        self.smtp_host = config.smtp_host
        self.smtp_port = config.smtp_port
        self.smtp_user = config.smtp_user
        self.smtp_password = config.smtp_password
        self.use_tls = config.smtp_use_tls
        self.timeout = config.smtp_timeout_seconds
        self.from_name = config.email_from_name
        self.from_address = config.email_from_address

    async def send_chunk(self, recipients: Sequence[str], subject: str, body: str) -> ChunkResult:
        """Send one message to every recipient of the chunk."""
        mime_message = self._create_mime_message(subject, body)
        # smtplib blocks, keep it off the event loop
        refused = await asyncio.to_thread(self._send_via_smtp, mime_message, list(recipients))

        if refused:
            logger.warning(f"SMTP server refused {len(refused)} of {len(recipients)} recipients")
        else:
            logger.info(f"Email sent to {len(recipients)} recipients: {subject}")
        return ChunkResult(rejected=refused)

    def _create_mime_message(self, subject: str, body: str) -> MIMEMultipart:
        """Create MIME message with a plain text part and, for HTML bodies, an HTML part."""
        mime_msg = MIMEMultipart("alternative")
        sender = formataddr((self.from_name, self.from_address))

        mime_msg["Subject"] = subject
        mime_msg["From"] = sender
        mime_msg["To"] = sender
        mime_msg["Message-ID"] = make_msgid()

        if _looks_like_html(body):
            mime_msg.attach(MIMEText(_TAG_PATTERN.sub('', body).strip(), "plain", "utf-8"))
            mime_msg.attach(MIMEText(body, "html", "utf-8"))
        else:
            mime_msg.attach(MIMEText(body, "plain", "utf-8"))

        return mime_msg

    def _send_via_smtp(self, mime_message: MIMEMultipart, recipients: List[str]) -> Dict[str, str]:
        """
        Run one SMTP transaction. Returns the refused recipients with the
        server's reason; raises TransportError when the transaction fails.
        """
        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.smtp_user:
                    server.login(self.smtp_user, self.smtp_password)
                refused = server.send_message(mime_message, to_addrs=recipients)

        except smtplib.SMTPRecipientsRefused as e:
            return {addr: self._describe(code, msg) for addr, (code, msg) in e.recipients.items()}
        except (smtplib.SMTPException, OSError) as e:
            raise TransportError(f"SMTP send failed: {str(e) or type(e).__name__}", e)

        return {addr: self._describe(code, msg) for addr, (code, msg) in refused.items()}

    @staticmethod
    def _describe(code: int, msg: Any) -> str:
        if isinstance(msg, bytes):
            msg = msg.decode("utf-8", errors="replace")
        return f"{code} {msg}"


class LoggingEmailSender(OutboundMessageSender):
    """Logs messages instead of sending them (for development and tests)."""

    def __init__(self):
        self.sent_emails: List[Dict[str, Any]] = []

    async def send_chunk(self, recipients: Sequence[str], subject: str, body: str) -> ChunkResult:
        email_log = {
            "timestamp": datetime.now().isoformat(),
            "to": list(recipients),
            "subject": subject,
            "body_preview": body[:200] + "..." if len(body) > 200 else body,
        }
        self.sent_emails.append(email_log)

        logger.info(f"Email logged (SMTP not configured): {subject} to {len(recipients)} recipients")
        return ChunkResult.accepted_all()

    def get_sent_emails(self) -> List[Dict[str, Any]]:
        """Get list of logged emails."""
        return self.sent_emails.copy()

    def clear_sent_emails(self) -> None:
        """Clear logged emails."""
        self.sent_emails.clear()


# Singleton instance
_email_sender = None


def get_email_sender() -> OutboundMessageSender:
    """Get singleton sender; falls back to logging when SMTP is not configured."""
    global _email_sender
    if _email_sender is None:
        if settings.smtp_configured:
            _email_sender = SmtpEmailSender()
        else:
            logger.warning("SMTP not configured, emails will be logged instead of sent")
            _email_sender = LoggingEmailSender()
    return _email_sender
