from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class NotificationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    unit_id: str = Field(validation_alias=AliasChoices("unit_id", "unitId"), serialization_alias="unitId")
    unit_name: str = Field(validation_alias=AliasChoices("unit_name", "unitName"), serialization_alias="unitName")
    status_from: str = Field(validation_alias=AliasChoices("status_from", "statusFrom"), serialization_alias="statusFrom")
    status_to: str = Field(validation_alias=AliasChoices("status_to", "statusTo"), serialization_alias="statusTo")
    timestamp: str
    message: str


class AuditEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: str
    message: str
    line: Optional[str] = None


class AnalyticsSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    total_revenue: float = Field(serialization_alias="totalRevenue")
    total_sessions: int = Field(serialization_alias="totalSessions")
    active_users: int = Field(serialization_alias="activeUsers")
    status_counts: dict[str, int] = Field(default_factory=dict, serialization_alias="statusCounts")
