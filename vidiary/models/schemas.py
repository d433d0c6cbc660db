"""
Pydantic models for validating entry data before it reaches the store.
"""
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vidiary.core.exceptions import ValidationException


class VideoEntryCreate(BaseModel):
    """Fields supplied by the caller when adding an entry."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: Optional[str] = ""
    uri: str = Field(min_length=1)
    thumbnail_uri: Optional[str] = None
    duration: float = Field(gt=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class VideoEntryUpdate(BaseModel):
    """Partial update of an entry's editable fields."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    uri: Optional[str] = Field(default=None, min_length=1)
    thumbnail_uri: Optional[str] = None
    duration: Optional[float] = Field(default=None, gt=0)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("Name cannot be cleared")
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("uri")
    @classmethod
    def uri_not_null(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("uri cannot be cleared")
        return value

    @field_validator("duration")
    @classmethod
    def duration_not_null(cls, value: Optional[float]) -> Optional[float]:
        if value is None:
            raise ValueError("duration cannot be cleared")
        return value

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually set."""
        return self.model_dump(exclude_unset=True)


def _format_errors(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err["loc"]) or "entry"
        parts.append(f"{location}: {err['msg']}")
    return "; ".join(parts)


def validate_create(data: Union[VideoEntryCreate, Dict[str, Any]]) -> VideoEntryCreate:
    """Validate new-entry input, raising ValidationException on bad data."""
    if isinstance(data, VideoEntryCreate):
        return data
    try:
        return VideoEntryCreate.model_validate(data)
    except ValidationError as e:
        raise ValidationException(_format_errors(e)) from e


def validate_update(data: Union[VideoEntryUpdate, Dict[str, Any]]) -> VideoEntryUpdate:
    """Validate partial-update input, raising ValidationException on bad data."""
    if isinstance(data, VideoEntryUpdate):
        return data
    try:
        return VideoEntryUpdate.model_validate(data)
    except ValidationError as e:
        raise ValidationException(_format_errors(e)) from e
