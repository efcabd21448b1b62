from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    pc_name: str = Field(validation_alias=AliasChoices("pc_name", "pcName"), serialization_alias="pcName")
    sender: str
    text: Optional[str] = None
    image_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("image_url", "imageUrl"), serialization_alias="imageUrl"
    )
    timestamp: str
    is_read: bool = Field(default=False, validation_alias=AliasChoices("is_read", "isRead"), serialization_alias="isRead")


class MessageCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pc_name: str = Field(validation_alias=AliasChoices("pcName", "pc_name"))
    sender: str
    text: Optional[str] = None
    image_url: Optional[str] = Field(default=None, validation_alias=AliasChoices("imageUrl", "image_url"))


class MarkRead(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pc_name: str = Field(validation_alias=AliasChoices("pcName", "pc_name"))
    role: str = "admin"
