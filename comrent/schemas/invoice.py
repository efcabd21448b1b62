from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .unit import PriceQuoteOut, UnitOut, _as_str


class EmailTemplateIn(BaseModel):
    subject: str
    body: str


class EmailTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subject: str
    body: str


class InvoiceRequest(BaseModel):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str(value)


class InvoiceCandidateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    unit: UnitOut
    quote: PriceQuoteOut
    amount: str = Field(default="-")


class InvoiceResultOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    success: bool
    message: str
    subject: str = ""
    body: str = ""
