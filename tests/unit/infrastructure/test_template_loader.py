"""
Unit tests for EmailTemplateLoader.
"""

import pytest
from datetime import date
from decimal import Decimal

from billing.domain.models.base import ConfigurationError
from billing.infrastructure.email.template_loader import EmailTemplateLoader, format_currency, format_date


class TestEmailTemplateLoader:
    """Test cases for EmailTemplateLoader."""

    def setup_method(self):
        """Set up test fixtures."""
        self.loader = EmailTemplateLoader(app_name="Acme Billing")
        self.reminder = {
            "invoice_number": "INV-001",
            "total": Decimal("1309.4"),
            "currency": "EUR",
            "due_date": date(2024, 1, 31),
        }

    def test_list_templates(self):
        assert set(self.loader.list_templates()) == {"invoice_reminder", "announcement", "newsletter"}
        assert self.loader.template_exists("newsletter")
        assert not self.loader.template_exists("layout")

    def test_render_before_due_reminder(self):
        html = self.loader.render("invoice_reminder", {**self.reminder, "reminder_type": "before_due"})

        assert "1,309.40 EUR" in html
        assert "31/01/2024" in html
        assert "Acme Billing" in html

    def test_render_overdue_reminder_with_link(self):
        html = self.loader.render("invoice_reminder", {
            **self.reminder,
            "reminder_type": "after_1",
            "payment_link": "https://paypal.me/acme?invoice=INV-001",
        })

        assert "now overdue" in html
        assert 'href="https://paypal.me/acme?invoice=INV-001"' in html

    def test_escapes_variables(self):
        html = self.loader.render("announcement", {"subject": "Hi", "message": "<script>alert(1)</script>"})

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_unknown_template(self):
        with pytest.raises(ConfigurationError, match="Unknown email template"):
            self.loader.render("missing", {})

    def test_missing_variable(self):
        with pytest.raises(ConfigurationError) as exc_info:
            self.loader.render("announcement", {"subject": "Hi"})
        assert exc_info.value.setting == "variables"

    def test_custom_templates(self):
        loader = EmailTemplateLoader(templates={"plain": "Hello {{ name }}"})

        assert loader.render("plain", {"name": "Ada"}) == "Hello Ada"

    def test_filters_registered_on_environment(self):
        assert self.loader.env.filters["currency"] is format_currency
        assert self.loader.env.filters["date"] is format_date

    def test_format_currency(self):
        assert format_currency(Decimal("1234.5")) == "1,234.50 EUR"
        assert format_currency("12", "USD") == "12.00 USD"
        assert format_currency("n/a") == "n/a"

    def test_format_date(self):
        assert format_date(date(2024, 3, 5)) == "05/03/2024"
        assert format_date("2024-03-05T10:00:00Z") == "05/03/2024"
        assert format_date("soon") == "soon"
