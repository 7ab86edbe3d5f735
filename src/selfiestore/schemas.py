from __future__ import annotations

from datetime import datetime, timezone
from typing import TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TITLE = "New Selfie!"
TModel = TypeVar("TModel", bound=BaseModel)


def now_utc() -> datetime:
    return datetime.now(tz=timezone.utc)


def _normalize_datetime(value: datetime) -> datetime:
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class DTOBase(BaseModel):
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


class Selfie(DTOBase):
    created: datetime = Field(default_factory=now_utc, frozen=True)
    id: UUID = Field(default_factory=uuid4, frozen=True)
    title: str = DEFAULT_TITLE

    @field_validator("created", mode="after")
    @classmethod
    def validate_created(cls, value: datetime) -> datetime:
        return _normalize_datetime(value)


def validate_json(model_cls: type[TModel], payload: str | bytes | bytearray) -> TModel:
    return model_cls.model_validate_json(payload)


def normalize_selfie_id(value: Selfie | UUID | str) -> UUID:
    """Return the UUID a selfie, UUID or UUID string refers to."""
    if isinstance(value, Selfie):
        return value.id
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid selfie id: {value!r}") from exc
