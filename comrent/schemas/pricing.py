from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PricingTierOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    duration_minutes: int = Field(serialization_alias="durationMinutes")
    label: str
    price: float


class PricingTierIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    duration_minutes: int = Field(validation_alias=AliasChoices("durationMinutes", "duration_minutes", "value"))
    label: str
    price: float


class PricingTierUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_duration: int = Field(
        validation_alias=AliasChoices("originalDuration", "original_duration", "originalValue")
    )
    updated_tier: PricingTierIn = Field(validation_alias=AliasChoices("updatedTier", "updated_tier"))


class PricingTierDelete(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    duration_minutes: int = Field(validation_alias=AliasChoices("durationMinutes", "duration_minutes", "value"))
