import json
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from crowdfund.core.exceptions import ValidationError
from crowdfund.schemas.user import UserPublic


def normalize_tags(tags: List[str]) -> List[str]:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    seen = []
    for tag in tags:
        name = tag.strip()
        if name and name not in seen:
            seen.append(name)
    return seen


def parse_tags_field(raw: Optional[str]) -> List[str]:
    """
    Decode the multipart `tags` field, a JSON array of strings.
    A missing or empty field means no tags.
    """
    if raw is None or not raw.strip():
        return []
    try:
        value: Any = json.loads(raw)
    except json.JSONDecodeError:
        raise ValidationError("Invalid format for tags.")
    if not isinstance(value, list) or not all(isinstance(tag, str) for tag in value):
        raise ValidationError("Invalid format for tags.")
    return value


class _EventFields(BaseModel):
    @field_validator("title", "description", check_fields=False)
    @classmethod
    def validate_not_empty(cls, v: Optional[str], info) -> str:
        if v is None or not v.strip():
            raise ValueError(f"{info.field_name} is required")
        return v.strip() if info.field_name == "title" else v

    @field_validator("amount_to_raise", check_fields=False)
    @classmethod
    def validate_goal(cls, v: Optional[float]) -> float:
        if v is None:
            raise ValueError("amount_to_raise is required")
        if v <= 0:
            raise ValueError("amount_to_raise must be greater than 0")
        return v

    @field_validator("tags", check_fields=False)
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> List[str]:
        return normalize_tags(v or [])

    @field_validator("image_url", check_fields=False)
    @classmethod
    def blank_url_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class EventCreate(_EventFields):
    title: str = Field(..., max_length=200, description="Campaign title")
    description: str = Field(..., description="Campaign description")
    amount_to_raise: float = Field(..., allow_inf_nan=False, description="Fundraising goal, greater than 0")
    tags: List[str] = Field(default_factory=list, description="Free-text tags")
    image_url: Optional[str] = Field(None, max_length=1000, description="External image URL")


class EventUpdate(_EventFields):
    """
    Mutable event fields. Only the fields present in the body are replaced;
    owner and running total are not part of this model, so clients cannot set them.
    """
    title: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    amount_to_raise: Optional[float] = Field(None, allow_inf_nan=False)
    tags: Optional[List[str]] = None
    image_url: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None

    @field_validator("is_active")
    @classmethod
    def validate_is_active(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("is_active cannot be null")
        return v

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "title": "School library for Hampi",
                "amountToRaise": 50000,
                "tags": ["education", "books"],
                "isActive": False
            }
        }


class OwnerSummary(UserPublic):
    pass


class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    amount_to_raise: float
    tags: List[str]
    uploaded_image: Optional[str] = None
    image_url: Optional[str] = None
    created_by: Optional[OwnerSummary] = None
    current_amount: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class EventPageResponse(BaseModel):
    events: List[EventResponse]
    total_pages: int
    current_page: int
    total: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ContributionRequest(BaseModel):
    # Left optional so a missing amount reaches the service and is rejected with 400
    amount: Optional[float] = Field(None, description="Amount to add to the running total")

    class Config:
        json_schema_extra = {"example": {"amount": 250}}


class ContributionResponse(BaseModel):
    message: str
    current_amount: float
    progress: float

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str


def serialize_event(event) -> EventResponse:
    """Build the response body for an Event row, with the owner populated."""
    owner = event.owner
    return EventResponse(
        id=event.id,
        title=event.title,
        description=event.description,
        amount_to_raise=event.amount_to_raise,
        tags=event.tags,
        uploaded_image=event.uploaded_image,
        image_url=event.image_url,
        created_by=OwnerSummary(
            id=owner.id,
            first_name=owner.first_name,
            last_name=owner.last_name,
            email=owner.email,
            avatar=owner.avatar,
        ) if owner else None,
        current_amount=event.current_amount,
        is_active=event.is_active,
        created_at=event.created_at,
        updated_at=event.updated_at,
    )
