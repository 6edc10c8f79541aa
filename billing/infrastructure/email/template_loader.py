"""
Email template loader and renderer.
Handles Jinja2 templates for reminders, announcements and newsletters.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, List, Mapping, Optional
from datetime import date, datetime
from jinja2 import DictLoader, Environment, StrictUndefined, TemplateNotFound, UndefinedError

from billing.domain.models.base import ConfigurationError
from billing.domain.services.message_service import TemplateRenderer

logger = logging.getLogger(__name__)


_LAYOUT = """<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>{% block title %}{% endblock %}</title></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
<div style="max-width: 600px; margin: 0 auto; padding: 20px;">
{% block content %}{% endblock %}
<hr>
<p style="font-size: 12px; color: #888;">{{ app_name }}</p>
</div>
</body>
</html>
"""

_INVOICE_REMINDER = """{% extends "layout" %}
{% block title %}Invoice #{{ invoice_number }}{% endblock %}
{% block content %}
<h1>Invoice #{{ invoice_number }}</h1>
{% if reminder_type == "before_due" %}
<p>This is a friendly reminder that invoice #{{ invoice_number }} for {{ total|currency(currency) }} is due on {{ due_date|date }}.</p>
{% elif reminder_type == "on_due" %}
<p>Invoice #{{ invoice_number }} for {{ total|currency(currency) }} is due today. Please make payment at your earliest convenience.</p>
{% elif reminder_type == "after_1" %}
<p>We noticed that invoice #{{ invoice_number }} for {{ total|currency(currency) }} is now overdue. Please send payment as soon as possible.</p>
{% elif reminder_type == "after_2" %}
<p>This is a second reminder that invoice #{{ invoice_number }} is outstanding.</p>
{% elif reminder_type == "after_3" %}
<p>Please be advised that invoice #{{ invoice_number }} is significantly overdue. Immediate payment is requested.</p>
{% else %}
<p>Just a reminder about invoice #{{ invoice_number }} for {{ total|currency(currency) }}.</p>
{% endif %}
{% if payment_link %}<p><a href="{{ payment_link }}">Pay now</a></p>{% endif %}
{% endblock %}
"""

_ANNOUNCEMENT = """{% extends "layout" %}
{% block title %}{{ subject }}{% endblock %}
{% block content %}
<h1>{{ subject }}</h1>
<p style="white-space: pre-line;">{{ message }}</p>
{% endblock %}
"""

_NEWSLETTER = """{% extends "layout" %}
{% block title %}{{ title }}{% endblock %}
{% block content %}
<h1>{{ title }}</h1>
<div style="white-space: pre-line;">{{ content }}</div>
<p style="font-size: 12px; color: #888;">You are receiving this because you subscribed to our newsletter.</p>
{% endblock %}
"""

BUILTIN_TEMPLATES: Dict[str, str] = {
    "layout": _LAYOUT,
    "invoice_reminder": _INVOICE_REMINDER,
    "announcement": _ANNOUNCEMENT,
    "newsletter": _NEWSLETTER,
}


def format_currency(value, currency="EUR"):
    """Format currency value."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return str(value)
    return f"{amount:,.2f} {currency}"


def format_date(value, format="%d/%m/%Y"):
    """Format date value."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if isinstance(value, (date, datetime)):
        return value.strftime(format)
    return str(value)


class EmailTemplateLoader(TemplateRenderer):
    """Loads and renders email templates using Jinja2."""

    def __init__(self, templates: Optional[Mapping[str, str]] = None, app_name: str = "Billing"):
        """Initialize with the built-in templates, optionally overridden."""
        self.app_name = app_name
        self.env = Environment(
            loader=DictLoader({**BUILTIN_TEMPLATES, **(templates or {})}),
            autoescape=True,
            undefined=StrictUndefined
        )

        # Register custom filters
        self._register_filters()

    def _register_filters(self):
        """Register custom Jinja2 filters for email templates."""
        self.env.filters["currency"] = format_currency
        self.env.filters["date"] = format_date

    def render(self, template_id: str, variables: Mapping[str, Any]) -> str:
        """
        Render a template with variables.

        Unknown templates and missing variables are configuration problems
        and surface as ConfigurationError.
        """
        context = {"app_name": self.app_name, "payment_link": None, **variables}
        try:
            template = self.env.get_template(template_id)
            rendered = template.render(**context)
        except TemplateNotFound:
            raise ConfigurationError(f"Unknown email template: {template_id}", "template_id")
        except UndefinedError as e:
            raise ConfigurationError(f"Template {template_id} is missing a variable: {e}", "variables")

        logger.debug(f"Successfully rendered template: {template_id}")
        return rendered

    def template_exists(self, template_id: str) -> bool:
        """Check if a template is registered."""
        return template_id in self.list_templates()

    def list_templates(self) -> List[str]:
        """List renderable templates (the shared layout is not one)."""
        return [name for name in self.env.list_templates() if name != "layout"]
