from datetime import datetime, UTC
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _clean_title(v):
    if v is not None and not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip() if v is not None else v


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)


class TaskUpdate(BaseModel):
    """Partial update. Only fields present in the request body are applied,
    so ``{"description": null}`` clears the description while ``{}`` keeps it.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


def _camel(name, alias):
    return Field(validation_alias=AliasChoices(name, alias), serialization_alias=alias)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    completed: bool
    user_id: str = _camel("user_id", "userId")
    created_at: datetime = _camel("created_at", "createdAt")
    updated_at: datetime = _camel("updated_at", "updatedAt")

    @field_validator("created_at", "updated_at")
    @classmethod
    def as_utc(cls, v: datetime) -> datetime:
        # the store keeps naive UTC timestamps
        return v.replace(tzinfo=UTC) if v.tzinfo is None else v
