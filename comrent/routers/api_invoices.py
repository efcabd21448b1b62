"""Invoice e-mail endpoints.

WHAT: List units that can be invoiced, edit the e-mail template and send invoices.
WHEN: Used from the admin's invoice screen.
WHY: Billing has to reach the customer even though the shop keeps no accounts.
HOW: ``services.invoicing`` renders the template and hands it to the mailer;
a delivery failure is reported with 502 and leaves the unit untouched.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from ..db.store import Store, get_store
from ..models.invoice import EmailTemplate, InvoiceResult
from ..schemas.invoice import (
    EmailTemplateIn,
    EmailTemplateOut,
    InvoiceCandidateOut,
    InvoiceRequest,
    InvoiceResultOut,
)
from ..schemas.unit import PriceQuoteOut, UnitOut
from ..services.invoicing import check_template, eligible_units, format_amount, send_invoice
from ._outcomes import unwrap

router = APIRouter(prefix="/api", tags=["invoices"])


@router.get("/invoices/eligible")
def api_eligible(store: Store = Depends(get_store)):
    return [
        InvoiceCandidateOut(
            unit=UnitOut.model_validate(candidate.unit),
            quote=PriceQuoteOut.model_validate(candidate.quote),
            amount=format_amount(candidate.quote.price, store.config.CURRENCY_SYMBOL),
        )
        for candidate in eligible_units(store.registry.list_units(), store.pricing)
    ]


@router.post("/invoices")
async def api_send(payload: InvoiceRequest, store: Store = Depends(get_store)):
    unit = unwrap(store.registry.get_unit(payload.id))
    result: InvoiceResult = unwrap(
        await send_invoice(
            unit,
            pricing=store.pricing,
            template=store.email_template,
            mailer=store.mailer,
            feed=store.feed,
            config=store.config,
        )
    )
    body = InvoiceResultOut.model_validate(result)
    if not result.success:
        return JSONResponse(body.model_dump(), status_code=status.HTTP_502_BAD_GATEWAY)
    return body


@router.get("/email-template")
def api_get_template(store: Store = Depends(get_store)):
    return EmailTemplateOut.model_validate(store.email_template)


@router.post("/email-template")
def api_set_template(payload: EmailTemplateIn, store: Store = Depends(get_store)):
    unwrap(check_template(payload.subject, payload.body), prefix="Could not update template")
    store.email_template = EmailTemplate(subject=payload.subject, body=payload.body)
    store.feed.log("Updated the invoice e-mail template.")
    return {"success": True, "message": "Template updated successfully."}
