from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_str(value: Any) -> Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class UnitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    name: str
    status: str
    user: Optional[str] = None
    email: Optional[str] = None
    session_start: Optional[str] = None
    session_duration: Optional[int] = None
    payment_method: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("payment_method", "paymentMethod"),
        serialization_alias="paymentMethod",
    )
    payment_proof: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("payment_proof", "paymentProof"),
        serialization_alias="paymentProof",
    )


class UnitCreate(BaseModel):
    name: str


class UnitUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    new_status: Optional[str] = Field(default=None, validation_alias=AliasChoices("newStatus", "new_status", "status"))
    new_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("newName", "new_name"))
    duration: Optional[int] = None
    user: Optional[str] = None
    email: Optional[str] = None
    payment_method: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("paymentMethod", "payment_method")
    )
    payment_proof: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("paymentProof", "payment_proof", "paymentProofRef")
    )

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str(value)


class UnitDelete(BaseModel):
    id: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        return _as_str(value)


class UnitDeleted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deleted_id: str = Field(serialization_alias="deletedId")


class PriceQuoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    duration_minutes: Optional[int] = Field(default=None, serialization_alias="durationMinutes")
    label: str
    price: Optional[float] = None
    known: bool
