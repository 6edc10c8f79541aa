"""
Email infrastructure.
SMTP and logging senders plus the Jinja2 template renderer.
"""

from .email_service import SmtpEmailSender, LoggingEmailSender, get_email_sender
from .template_loader import EmailTemplateLoader, BUILTIN_TEMPLATES

__all__ = [
    "SmtpEmailSender",
    "LoggingEmailSender",
    "get_email_sender",
    "EmailTemplateLoader",
    "BUILTIN_TEMPLATES",
]
