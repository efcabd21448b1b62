"""Invoice e-mails for finished or running sessions.

Sending an invoice never changes a unit: a failed delivery is reported to
the caller and the session carries on untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from jinja2 import TemplateError, TemplateSyntaxError
from jinja2.sandbox import SandboxedEnvironment

from ..core.config import AppSettings
from ..core.errors import MailerError, Rejected
from ..core.statuses import INVOICEABLE_STATUSES
from ..crud.pricing import PriceQuote, PricingTable
from ..models.invoice import EmailTemplate, InvoiceResult
from ..models.unit import Unit
from .activity import ActivityFeed
from .mailer import Mailer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceCandidate:
    unit: Unit
    quote: PriceQuote


def is_invoiceable(unit: Unit) -> bool:
    return bool(
        unit.email
        and unit.user
        and unit.session_duration
        and unit.status in INVOICEABLE_STATUSES
    )


def eligible_units(units: list[Unit], pricing: PricingTable) -> list[InvoiceCandidate]:
    return [
        InvoiceCandidate(unit=unit, quote=pricing.quote(unit.session_duration))
        for unit in units
        if is_invoiceable(unit)
    ]


def format_amount(price: float | None, currency: str) -> str:
    if price is None:
        return "-"
    return f"{currency}{price:,.2f}"


# Admin-edited templates render sandboxed. Inserted values are never re-expanded.
_env = SandboxedEnvironment(keep_trailing_newline=True)


def render(text: str, values: dict[str, str]) -> str:
    return _env.from_string(text).render(**values)


def check_template(subject: str, body: str) -> Rejected | None:
    """Reject a template that Jinja cannot parse."""
    for part, text in (("subject", subject), ("body", body)):
        try:
            _env.parse(text)
        except TemplateSyntaxError as exc:
            return Rejected(f"Template {part} is invalid: {exc.message}")
    return None


def render_invoice(
    template: EmailTemplate, unit: Unit, quote: PriceQuote, config: AppSettings
) -> tuple[str, str]:
    values = {
        "customerName": unit.user or "",
        "pcName": unit.name,
        "duration": quote.label,
        "amount": format_amount(quote.price, config.CURRENCY_SYMBOL),
        "companyName": config.COMPANY_NAME,
    }
    return render(template.subject, values), render(template.body, values)


async def send_invoice(
    unit: Unit,
    *,
    pricing: PricingTable,
    template: EmailTemplate,
    mailer: Mailer,
    feed: ActivityFeed,
    config: AppSettings,
) -> InvoiceResult | Rejected:
    if not is_invoiceable(unit):
        return Rejected(f'PC "{unit.name}" has no session to invoice')
    quote = pricing.quote(unit.session_duration)
    if not quote.known:
        return Rejected("Invalid session duration.")

    try:
        subject, body = render_invoice(template, unit, quote, config)
    except TemplateError as exc:
        logger.warning("Invoice template for unit %s failed to render: %s", unit.id, exc)
        return Rejected(f"Could not render the invoice template: {exc}")
    try:
        await mailer.send(subject, body, unit.email or "")
    except MailerError as exc:
        logger.warning("Invoice for unit %s not sent: %s", unit.id, exc)
        return InvoiceResult(success=False, message=str(exc), subject=subject, body=body)

    feed.log(f'Sent invoice to {unit.email} for PC "{unit.name}".')
    return InvoiceResult(
        success=True,
        message=f"Email has been sent to {unit.email}.",
        subject=subject,
        body=body,
    )
